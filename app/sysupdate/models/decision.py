"""Decision and session models.

This module defines the outcome of comparing installed and published
versions of one application, and the outcome of the interactive update
session that follows.
"""

from dataclasses import dataclass
from enum import Enum

from sysupdate.core.errors import SysUpdateError, describe_failure
from sysupdate.models.version import VersionStatus, VersionString


@dataclass(frozen=True, slots=True)
class Decision:
    """Result of comparing local and remote versions for one application.

    Attributes:
        name: Application identifier.
        current: Installed version.
        latest: Latest published version.
        status: Comparison status.
    """

    name: str
    current: VersionString
    latest: VersionString
    status: VersionStatus

    @property
    def update_available(self) -> bool:
        """Check if a newer release exists."""
        return self.status == VersionStatus.UPDATE_AVAILABLE


@dataclass(frozen=True, slots=True)
class CheckResult:
    """Outcome of checking one application in a batch.

    Exactly one of decision and error is set.

    Attributes:
        name: Application identifier.
        decision: Decision when the check succeeded.
        error: Error when the check failed.
    """

    name: str
    decision: Decision | None = None
    error: SysUpdateError | None = None

    def __post_init__(self) -> None:
        """Validate that exactly one outcome is set."""
        if (self.decision is None) == (self.error is None):
            msg = "CheckResult requires exactly one of decision or error"
            raise ValueError(msg)

    @property
    def failed(self) -> bool:
        """Check if the version check failed."""
        return self.error is not None

    @property
    def not_installed(self) -> bool:
        """Check if the check failed because the application is missing."""
        return self.failure_reason == "not installed"

    @property
    def missing_dependency(self) -> bool:
        """Check if the check failed because a dependency is missing."""
        return self.failure_reason == "missing dependency"

    @property
    def needs_install(self) -> bool:
        """Check if the user has to install something before a check can run."""
        return self.not_installed or self.missing_dependency

    @property
    def failure_reason(self) -> str | None:
        """User-facing failure category, if the check failed."""
        return describe_failure(self.error) if self.error is not None else None


class SessionState(Enum):
    """States of an update session.

    EVALUATED is the initial state; SKIPPED, DECLINED, SUCCEEDED and FAILED
    are terminal. CONFIRMED is passed through on the way to an action result.
    """

    EVALUATED = "evaluated"
    SKIPPED = "skipped"
    DECLINED = "declined"
    CONFIRMED = "confirmed"
    SUCCEEDED = "succeeded"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        """Check if no further transition is possible."""
        return self not in (SessionState.EVALUATED, SessionState.CONFIRMED)


@dataclass(frozen=True, slots=True)
class SessionOutcome:
    """Final result of an update session.

    Attributes:
        name: Application identifier.
        state: Terminal session state.
        decision: Decision the session started from.
        output: Captured tail of the update action output.
        error: Error message if the update failed.
    """

    name: str
    state: SessionState
    decision: Decision
    output: str = ""
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        """Check if the update ran and succeeded."""
        return self.state == SessionState.SUCCEEDED

    @property
    def failed(self) -> bool:
        """Check if the update ran and failed."""
        return self.state == SessionState.FAILED
