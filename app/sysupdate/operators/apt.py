"""APT package operator implementation.

Runs package list refreshes, upgrades and targeted installs using apt-get,
and policy lookups using apt-cache.
"""

import logging
import subprocess

from sysupdate.utils.shell import CommandResult, command_exists, run_command

logger = logging.getLogger(__name__)


class AptOperator:
    """Operator for APT/dpkg packages.

    Uses apt-get for state-changing commands, which requires sudo
    privileges, and apt-cache for read-only queries. APT holds an exclusive
    lock, so commands on one operator must never run concurrently.

    Attributes:
        dry_run: If True, uses apt-get --dry-run to simulate actions.
    """

    # Timeout for apt operations (30 minutes)
    _APT_TIMEOUT: float = 1800.0

    # Timeout for read-only apt-cache queries
    _QUERY_TIMEOUT: float = 30.0

    def __init__(self, dry_run: bool = False) -> None:
        """Initialize the operator.

        Args:
            dry_run: If True, only simulate actions without executing them.
        """
        self._dry_run = dry_run

    @property
    def dry_run(self) -> bool:
        """Check if operator is in dry-run mode."""
        return self._dry_run

    def is_available(self) -> bool:
        """Check if apt-get and apt-cache are available."""
        return command_exists("apt-get") and command_exists("apt-cache")

    def _require_available(self) -> None:
        if not self.is_available():
            msg = "APT package manager is not available on this system"
            raise RuntimeError(msg)

    def update_lists(self) -> CommandResult:
        """Refresh package lists with apt-get update.

        Returns:
            CommandResult of the apt-get run.

        Raises:
            RuntimeError: If apt-get is not available.
        """
        self._require_available()
        return self._run_apt_get(["update"])

    def upgrade(self) -> CommandResult:
        """Upgrade installed packages with apt-get upgrade.

        Returns:
            CommandResult of the apt-get run. Its output is the input of the
            kept-back analysis.

        Raises:
            RuntimeError: If apt-get is not available.
        """
        self._require_available()
        return self._run_apt_get(["upgrade", "-y"])

    def install(self, packages: list[str]) -> CommandResult | None:
        """Install packages with apt-get install.

        Installing a kept-back package by name lets APT pull in the new
        dependencies that a plain upgrade refuses to add.

        Args:
            packages: List of package names to install.

        Returns:
            CommandResult of the apt-get run, or None for an empty list.

        Raises:
            RuntimeError: If apt-get is not available.
        """
        self._require_available()

        if not packages:
            return None

        return self._run_apt_get(["install", "-y", *packages])

    def policy(self, package: str) -> str | None:
        """Query apt-cache policy for a package.

        Args:
            package: Package name.

        Returns:
            Raw policy output, or None if the query failed.
        """
        try:
            result = run_command(["apt-cache", "policy", package], timeout=self._QUERY_TIMEOUT)
        except (subprocess.TimeoutExpired, OSError) as e:
            logger.warning("apt-cache policy %s failed: %s", package, e)
            return None

        if not result.success:
            logger.debug("apt-cache policy %s exited with %d", package, result.returncode)
            return None
        return result.stdout

    def _run_apt_get(self, command: list[str]) -> CommandResult:
        args = ["sudo", "apt-get", *command]

        if self.dry_run:
            args.append("--dry-run")

        logger.info("Executing: %s (dry_run=%s)", " ".join(args), self.dry_run)

        try:
            return run_command(args, timeout=self._APT_TIMEOUT)
        except subprocess.TimeoutExpired as e:
            return CommandResult(
                stdout="",
                stderr=f"apt-get timed out after {e.timeout} seconds",
                returncode=124,
            )
