"""Unit tests for the error taxonomy."""

import pytest

from sysupdate.core.errors import (
    DescriptorError,
    LocalVersionUnavailableError,
    MalformedVersionError,
    MissingDependencyError,
    NetworkError,
    NotFoundError,
    OperationCancelledError,
    RemoteVersionError,
    RemoteVersionUnavailableError,
    ResponseParseError,
    SysUpdateError,
    UpdateActionFailedError,
    describe_failure,
)


class TestHierarchy:
    """Tests for exception inheritance."""

    @pytest.mark.parametrize("cls", [NetworkError, NotFoundError, ResponseParseError])
    def test_remote_errors(self, cls: type[Exception]) -> None:
        """Resolver errors share a base class."""
        assert issubclass(cls, RemoteVersionError)
        assert issubclass(cls, SysUpdateError)

    def test_cancelled_is_not_network(self) -> None:
        """Cancellation is distinct from connectivity failures."""
        assert not issubclass(OperationCancelledError, RemoteVersionError)

    def test_descriptor_errors(self) -> None:
        """Descriptor errors are SysUpdateErrors."""
        assert issubclass(DescriptorError, SysUpdateError)


class TestDescribeFailure:
    """Tests for describe_failure."""

    @pytest.mark.parametrize(
        ("exc", "expected"),
        [
            (OperationCancelledError("stop"), "cancelled"),
            (LocalVersionUnavailableError("tmux", "not installed"), "not installed"),
            (LocalVersionUnavailableError("tmux", "no version"), "local version unknown"),
            (MissingDependencyError("npm", "Node.js"), "missing dependency"),
            (RemoteVersionUnavailableError("tmux", NetworkError("x")), "remote lookup failed"),
            (NotFoundError("x"), "remote lookup failed"),
            (MalformedVersionError("latest"), "malformed version"),
            (UpdateActionFailedError("exit 1"), "update failed"),
            (ValueError("x"), "error"),
        ],
    )
    def test_categories(self, exc: Exception, expected: str) -> None:
        """Each failure maps to one user-facing category."""
        assert describe_failure(exc) == expected
