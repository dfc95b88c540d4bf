"""Unit tests for GitHubResolver.

HTTP traffic goes through a mocked requests session.
"""

import threading
from typing import Any
from unittest.mock import MagicMock, patch

import pytest
import requests

from sysupdate.core.errors import (
    NetworkError,
    NotFoundError,
    OperationCancelledError,
    ResponseParseError,
)
from sysupdate.models.descriptor import GitHubSource
from sysupdate.resolvers.base import strip_tag_prefix
from sysupdate.resolvers.github import GitHubResolver

SOURCE = GitHubSource(owner="kovidgoyal", repo="kitty")


def _response(status: int, body: Any = None) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status
    resp.ok = status < 400
    if isinstance(body, Exception):
        resp.json.side_effect = body
    else:
        resp.json.return_value = body
    return resp


@pytest.fixture
def session() -> MagicMock:
    """Mock requests session."""
    return MagicMock()


class TestGitHubResolver:
    """Tests for GitHubResolver.resolve."""

    def test_strips_v_prefix(self, session: MagicMock) -> None:
        """The leading v of the tag is removed."""
        session.get.return_value = _response(200, {"tag_name": "v0.37.0"})

        assert GitHubResolver(session=session).resolve(SOURCE) == "0.37.0"

        url = session.get.call_args[0][0]
        assert url == "https://api.github.com/repos/kovidgoyal/kitty/releases/latest"
        assert session.get.call_args.kwargs["timeout"] == 15.0

    def test_tag_without_prefix(self, session: MagicMock) -> None:
        """Tags without a prefix are returned as they are."""
        session.get.return_value = _response(200, {"tag_name": "3.5a"})

        assert GitHubResolver(session=session).resolve(SOURCE) == "3.5a"

    def test_sets_headers(self, session: MagicMock) -> None:
        """The session identifies the client to the API."""
        GitHubResolver(session=session)

        headers = session.headers.update.call_args[0][0]
        assert headers["Accept"] == "application/vnd.github+json"
        assert headers["User-Agent"].startswith("sysupdate/")

    def test_timeout(self, session: MagicMock) -> None:
        """Request timeouts become NetworkError."""
        session.get.side_effect = requests.Timeout("slow")

        with pytest.raises(NetworkError, match="timed out"):
            GitHubResolver(session=session).resolve(SOURCE)

    def test_connection_error(self, session: MagicMock) -> None:
        """Connection failures become NetworkError."""
        session.get.side_effect = requests.ConnectionError("refused")

        with pytest.raises(NetworkError, match="Connection failed"):
            GitHubResolver(session=session).resolve(SOURCE)

    def test_not_found(self, session: MagicMock) -> None:
        """404 means no published release."""
        session.get.return_value = _response(404, {"message": "Not Found"})

        with pytest.raises(NotFoundError):
            GitHubResolver(session=session).resolve(SOURCE)

    def test_missing_tag_name(self, session: MagicMock) -> None:
        """A release without tag_name cannot be parsed."""
        session.get.return_value = _response(200, {"name": "kitty"})

        with pytest.raises(ResponseParseError):
            GitHubResolver(session=session).resolve(SOURCE)

    def test_invalid_json(self, session: MagicMock) -> None:
        """Invalid JSON cannot be parsed."""
        session.get.return_value = _response(200, ValueError("no json"))

        with pytest.raises(ResponseParseError):
            GitHubResolver(session=session).resolve(SOURCE)

    def test_rate_limit_retried(self, session: MagicMock) -> None:
        """429 answers are retried with backoff."""
        session.get.side_effect = [
            _response(429),
            _response(200, {"tag_name": "v0.37.0"}),
        ]

        with patch("sysupdate.resolvers.github.time.sleep") as mock_sleep:
            result = GitHubResolver(retries=2, session=session).resolve(SOURCE)

        assert result == "0.37.0"
        mock_sleep.assert_called_once()

    def test_server_errors_exhaust_retries(self, session: MagicMock) -> None:
        """Persistent 5xx answers end in NetworkError."""
        session.get.return_value = _response(503)

        with (
            patch("sysupdate.resolvers.github.time.sleep"),
            pytest.raises(NetworkError, match="503"),
        ):
            GitHubResolver(retries=3, session=session).resolve(SOURCE)

        assert session.get.call_count == 3

    def test_cancelled(self, session: MagicMock) -> None:
        """A set cancel event raises before any request."""
        cancel = threading.Event()
        cancel.set()

        with pytest.raises(OperationCancelledError):
            GitHubResolver(session=session).resolve(SOURCE, cancel)

        session.get.assert_not_called()

    def test_one_session_per_thread(self) -> None:
        """Worker threads never share a session; each thread reuses its own."""
        created: list[MagicMock] = []

        def new_session() -> MagicMock:
            mock = MagicMock()
            mock.headers = {}
            mock.get.return_value = _response(200, {"tag_name": "v0.37.0"})
            created.append(mock)
            return mock

        with patch("sysupdate.resolvers.base.requests.Session", side_effect=new_session):
            resolver = GitHubResolver()
            resolver.resolve(SOURCE)
            resolver.resolve(SOURCE)
            worker = threading.Thread(target=resolver.resolve, args=(SOURCE,))
            worker.start()
            worker.join()

        assert len(created) == 2
        assert created[0].get.call_count == 2
        assert created[1].get.call_count == 1
        assert created[1].headers["User-Agent"].startswith("sysupdate/")


class TestStripTagPrefix:
    """Tests for strip_tag_prefix."""

    @pytest.mark.parametrize(
        ("tag", "expected"),
        [("v1.2.3", "1.2.3"), ("V2.0", "2.0"), ("3.5a", "3.5a"), ("version-1", "version-1")],
    )
    def test_strip(self, tag: str, expected: str) -> None:
        """Only a v directly followed by a digit is removed."""
        assert strip_tag_prefix(tag) == expected
