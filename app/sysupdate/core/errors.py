"""Exception hierarchy for sysupdate.

Every failure in the per-application check/update flow is a subclass of
SysUpdateError so callers can report it and move on to the next application.
"""


class SysUpdateError(Exception):
    """Base exception for all sysupdate errors."""


class MalformedVersionError(SysUpdateError):
    """Raised when version text contains no numeric segment."""

    def __init__(self, text: str) -> None:
        super().__init__(f"Malformed version: {text!r}")
        self.text = text


class LocalVersionUnavailableError(SysUpdateError):
    """Raised when the installed version of an application cannot be determined.

    Attributes:
        app: Application name.
        reason: Short human-readable reason ("not installed", ...).
    """

    def __init__(self, app: str, reason: str) -> None:
        super().__init__(f"{app}: {reason}")
        self.app = app
        self.reason = reason

    @property
    def not_installed(self) -> bool:
        """Check if the application is missing from the system."""
        return self.reason == "not installed"


class MissingDependencyError(SysUpdateError):
    """Raised when a program the application depends on is not installed.

    Attributes:
        app: Application name.
        dependency: Name of the missing dependency.
        install_help: Installation hint for the dependency, if any.
    """

    def __init__(self, app: str, dependency: str, install_help: str | None = None) -> None:
        super().__init__(f"{app}: requires {dependency}")
        self.app = app
        self.dependency = dependency
        self.install_help = install_help


class RemoteVersionError(SysUpdateError):
    """Base exception for remote version lookups."""


class NetworkError(RemoteVersionError):
    """Raised on connectivity failures and timeouts."""


class NotFoundError(RemoteVersionError):
    """Raised when the remote source has no published version."""


class ResponseParseError(RemoteVersionError):
    """Raised when the remote response lacks a version field."""


class RemoteVersionUnavailableError(SysUpdateError):
    """Raised by the decision engine when the latest version cannot be resolved.

    Attributes:
        app: Application name.
        cause: The underlying RemoteVersionError.
    """

    def __init__(self, app: str, cause: RemoteVersionError) -> None:
        super().__init__(f"{app}: {cause}")
        self.app = app
        self.cause = cause


class OperationCancelledError(SysUpdateError):
    """Raised when the caller cancelled an in-flight operation."""


class UpdateActionFailedError(SysUpdateError):
    """Raised when a configured update action exits unsuccessfully.

    Attributes:
        returncode: Exit status of the action (None for callbacks).
        output: Captured output of the action.
    """

    def __init__(self, message: str, returncode: int | None = None, output: str = "") -> None:
        super().__init__(message)
        self.returncode = returncode
        self.output = output


class DescriptorError(SysUpdateError):
    """Base exception for application descriptor errors."""


class DescriptorNotFoundError(DescriptorError):
    """Raised when a descriptor file or name is not found."""


class DescriptorParseError(DescriptorError):
    """Raised when a descriptor file cannot be parsed."""


class DescriptorValidationError(DescriptorError):
    """Raised when descriptor content is invalid."""


class SettingsError(SysUpdateError):
    """Raised when the settings file cannot be read or written."""


def describe_failure(exc: BaseException) -> str:
    """Return the user-facing failure category for an exception.

    The categories tell the user which kind of action is needed:
    installing the application, checking connectivity, or inspecting
    the update output.

    Args:
        exc: Exception raised during a check or update.

    Returns:
        Short category string.
    """
    if isinstance(exc, OperationCancelledError):
        return "cancelled"
    if isinstance(exc, LocalVersionUnavailableError):
        return "not installed" if exc.not_installed else "local version unknown"
    if isinstance(exc, MissingDependencyError):
        return "missing dependency"
    if isinstance(exc, RemoteVersionUnavailableError | RemoteVersionError):
        return "remote lookup failed"
    if isinstance(exc, MalformedVersionError):
        return "malformed version"
    if isinstance(exc, UpdateActionFailedError):
        return "update failed"
    return "error"
