"""Update actions.

An update action is what runs after the user confirms an update. The
engine never interprets the action, it only looks at success or failure.
Three kinds exist: a shell snippet from the descriptor, an upgrade through
the detected system package manager, and a named Python callback.
"""

from __future__ import annotations

import logging
import subprocess
import tempfile
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING

from sysupdate.core.errors import DescriptorValidationError, UpdateActionFailedError
from sysupdate.utils.shell import CommandResult, command_exists, run_command, run_shell

if TYPE_CHECKING:
    from sysupdate.models.descriptor import ApplicationDescriptor

logger = logging.getLogger(__name__)

# Callback signature: returns captured output, raises UpdateActionFailedError on failure
UpdateCallback = Callable[[], str]

# Upgrade commands per package manager, in detection order
PACKAGE_MANAGER_COMMANDS: dict[str, list[list[str]]] = {
    "apt": [
        ["sudo", "apt-get", "update"],
        ["sudo", "apt-get", "install", "--only-upgrade", "-y", "{package}"],
    ],
    "brew": [["brew", "upgrade", "{package}"]],
    "dnf": [["sudo", "dnf", "upgrade", "-y", "{package}"]],
    "yum": [["sudo", "yum", "update", "-y", "{package}"]],
    "pacman": [["sudo", "pacman", "-Syu", "--noconfirm", "{package}"]],
}


def detect_package_manager() -> str | None:
    """Return the first available package manager, or None."""
    for name in PACKAGE_MANAGER_COMMANDS:
        if command_exists(name):
            return name
    return None


class UpdateAction(ABC):
    """Abstract base class for update actions."""

    @property
    @abstractmethod
    def description(self) -> str:
        """Short description shown before the action runs."""

    @abstractmethod
    def run(self) -> str:
        """Execute the action.

        Returns:
            Captured output (possibly truncated).

        Raises:
            UpdateActionFailedError: If the action failed.
        """


class ShellCommandAction(UpdateAction):
    """Runs a descriptor-supplied shell snippet with bash.

    When use_temp_dir is set the snippet runs inside a scratch directory
    that is removed on every exit path.
    """

    def __init__(
        self,
        command: str,
        *,
        output_lines: int = 20,
        use_temp_dir: bool = False,
        timeout: float = 1800.0,
        app_name: str = "update",
    ) -> None:
        self._command = command
        self._output_lines = output_lines
        self._use_temp_dir = use_temp_dir
        self._timeout = timeout
        self._app_name = app_name

    @property
    def description(self) -> str:
        """Return the shell snippet."""
        return self._command

    def run(self) -> str:
        """Run the snippet.

        Returns:
            Last output_lines lines of combined output.

        Raises:
            UpdateActionFailedError: On non-zero exit, timeout or launch failure.
        """
        if self._use_temp_dir:
            with tempfile.TemporaryDirectory(prefix=f"sysupdate-{self._app_name}-") as workdir:
                logger.debug("Running update in %s", workdir)
                result = self._execute(workdir)
        else:
            result = self._execute(None)

        output = result.tail(self._output_lines)
        if not result.success:
            raise UpdateActionFailedError(
                f"Update command exited with code {result.returncode}",
                returncode=result.returncode,
                output=output,
            )
        return output

    def _execute(self, cwd: str | None) -> CommandResult:
        try:
            return run_shell(self._command, timeout=self._timeout, cwd=cwd)
        except subprocess.TimeoutExpired as e:
            raise UpdateActionFailedError(
                f"Update command timed out after {self._timeout:.0f} seconds"
            ) from e
        except OSError as e:
            raise UpdateActionFailedError(f"Failed to run update command: {e}") from e


class PackageManagerAction(UpdateAction):
    """Upgrades a single package through the system package manager."""

    def __init__(
        self,
        package: str,
        *,
        output_lines: int = 20,
        timeout: float = 1800.0,
        manager: str | None = None,
    ) -> None:
        self._package = package
        self._output_lines = output_lines
        self._timeout = timeout
        self._manager = manager

    @property
    def description(self) -> str:
        """Return the package name and manager."""
        return f"upgrade {self._package} via {self._manager or 'system package manager'}"

    def run(self) -> str:
        """Run the upgrade commands of the detected package manager.

        Returns:
            Last output_lines lines of the final command's output.

        Raises:
            UpdateActionFailedError: If no package manager is found or a
                command fails.
        """
        manager = self._manager or detect_package_manager()
        if manager is None:
            raise UpdateActionFailedError("No supported package manager found")

        logger.info("Using %s package manager for %s", manager, self._package)

        output = ""
        for template in PACKAGE_MANAGER_COMMANDS[manager]:
            args = [part.format(package=self._package) for part in template]
            try:
                result = run_command(args, timeout=self._timeout)
            except subprocess.TimeoutExpired as e:
                raise UpdateActionFailedError(
                    f"{' '.join(args)} timed out after {self._timeout:.0f} seconds"
                ) from e
            except OSError as e:
                raise UpdateActionFailedError(f"Failed to run {args[0]}: {e}") from e

            output = result.tail(self._output_lines)
            if not result.success:
                raise UpdateActionFailedError(
                    f"{' '.join(args)} exited with code {result.returncode}",
                    returncode=result.returncode,
                    output=output,
                )
        return output


class CallbackAction(UpdateAction):
    """Runs a named Python callback."""

    def __init__(self, name: str, callback: UpdateCallback) -> None:
        self._name = name
        self._callback = callback

    @property
    def description(self) -> str:
        """Return the callback name."""
        return f"callback {self._name}"

    def run(self) -> str:
        """Invoke the callback.

        Returns:
            Output returned by the callback.

        Raises:
            UpdateActionFailedError: If the callback fails.
        """
        try:
            return self._callback()
        except UpdateActionFailedError:
            raise
        except Exception as e:
            raise UpdateActionFailedError(f"Callback {self._name} failed: {e}") from e


def _required(descriptor: ApplicationDescriptor, value: str | None, field_name: str) -> str:
    # Descriptors built with model_construct skip the method validator
    if not value:
        msg = (
            f"{descriptor.name}: update method '{descriptor.update.method}' "
            f"requires '{field_name}'"
        )
        raise DescriptorValidationError(msg)
    return value


def build_action(
    descriptor: ApplicationDescriptor,
    callbacks: Mapping[str, UpdateCallback] | None = None,
) -> UpdateAction:
    """Create the update action configured by a descriptor.

    Args:
        descriptor: Application descriptor.
        callbacks: Registered callbacks for the callback method.

    Returns:
        UpdateAction ready to run.

    Raises:
        DescriptorValidationError: If the field the method needs is empty.
        KeyError: If the descriptor names an unregistered callback.
    """
    update = descriptor.update

    if update.method == "package-manager":
        return PackageManagerAction(
            _required(descriptor, update.package, "package"),
            output_lines=update.output_lines,
            timeout=float(update.timeout_seconds),
        )

    if update.method == "callback":
        name = _required(descriptor, update.callback, "callback")
        registry = callbacks or {}
        if name not in registry:
            msg = f"Unknown update callback '{name}' for {descriptor.name}"
            raise KeyError(msg)
        return CallbackAction(name, registry[name])

    return ShellCommandAction(
        _required(descriptor, update.command, "command"),
        output_lines=update.output_lines,
        use_temp_dir=update.use_temp_dir,
        timeout=float(update.timeout_seconds),
        app_name=descriptor.name,
    )
