"""Update decision engine.

This module provides the UpdateDecisionEngine that determines, for each
managed application, whether an update is available by comparing the
installed version with the latest published one.
"""

from __future__ import annotations

import logging
import subprocess
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING

from sysupdate.core.compare import VersionComparator, truncated_compare
from sysupdate.core.errors import (
    LocalVersionUnavailableError,
    MissingDependencyError,
    OperationCancelledError,
    RemoteVersionError,
    RemoteVersionUnavailableError,
    SysUpdateError,
)
from sysupdate.core.settings import Settings
from sysupdate.models.decision import CheckResult, Decision
from sysupdate.models.version import VersionString, extract_version
from sysupdate.resolvers.base import check_cancelled
from sysupdate.utils.shell import command_exists, run_command, split_command

if TYPE_CHECKING:
    from sysupdate.models.descriptor import ApplicationDescriptor
    from sysupdate.resolvers.base import Resolver

logger = logging.getLogger(__name__)

# Timeout for local --version style commands
_VERSION_COMMAND_TIMEOUT = 15.0


class UpdateDecisionEngine:
    """Engine computing update decisions for application descriptors.

    Version checks are read-only, so check_all fans them out over a bounded
    thread pool. Update execution is not part of the engine.

    Example:
        >>> engine = UpdateDecisionEngine(get_resolvers(settings), settings)
        >>> decision = engine.decide(descriptor)
        >>> decision.status
        <VersionStatus.UPDATE_AVAILABLE: 'update'>
    """

    def __init__(
        self,
        resolvers: dict[str, Resolver],
        settings: Settings | None = None,
        comparator: VersionComparator | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            resolvers: Mapping of source kind to resolver.
            settings: Run settings.
            comparator: Version comparator. Built from settings if None.
        """
        self._resolvers = resolvers
        self._settings = settings or Settings()
        self._comparator = comparator or VersionComparator(
            use_system=self._settings.use_system_comparator,
            suffix_order=self._settings.suffix_order,
        )

    def check_dependencies(self, descriptor: ApplicationDescriptor) -> None:
        """Verify that every declared dependency is on PATH.

        Raises:
            MissingDependencyError: For the first dependency that is missing.
        """
        for dependency in descriptor.dependencies:
            if not command_exists(dependency.command):
                raise MissingDependencyError(descriptor.name, dependency.name, dependency.help)

    def local_version(self, descriptor: ApplicationDescriptor) -> str:
        """Extract the installed version of an application.

        Args:
            descriptor: Application descriptor.

        Returns:
            Installed version text.

        Raises:
            LocalVersionUnavailableError: If the application is not installed
                or its version cannot be extracted.
        """
        name = descriptor.name
        if not command_exists(descriptor.application.command):
            raise LocalVersionUnavailableError(name, "not installed")

        args = split_command(descriptor.version.command)
        try:
            result = run_command(args, timeout=_VERSION_COMMAND_TIMEOUT)
        except FileNotFoundError as e:
            raise LocalVersionUnavailableError(name, "not installed") from e
        except subprocess.TimeoutExpired as e:
            raise LocalVersionUnavailableError(name, "version command timed out") from e
        except OSError as e:
            raise LocalVersionUnavailableError(name, f"version command failed: {e}") from e

        # Some tools print their version on stderr
        output = result.stdout if result.stdout.strip() else result.stderr
        if not result.success and not output.strip():
            raise LocalVersionUnavailableError(
                name, f"version command exited with code {result.returncode}"
            )

        version = extract_version(output, descriptor.version.regex)
        if version is None:
            raise LocalVersionUnavailableError(name, "no version in command output")
        return version

    def latest_version(
        self,
        descriptor: ApplicationDescriptor,
        cancel: threading.Event | None = None,
    ) -> str:
        """Resolve the latest published version of an application.

        Args:
            descriptor: Application descriptor.
            cancel: Optional cancellation event.

        Returns:
            Latest version text.

        Raises:
            RemoteVersionUnavailableError: If the lookup fails.
            OperationCancelledError: If cancel is set.
        """
        resolver = self._resolvers.get(descriptor.source.kind)
        if resolver is None:
            msg = f"No resolver for source kind '{descriptor.source.kind}'"
            raise RuntimeError(msg)

        try:
            return resolver.resolve(descriptor.source, cancel=cancel)
        except RemoteVersionError as e:
            raise RemoteVersionUnavailableError(descriptor.name, e) from e

    def decide(
        self,
        descriptor: ApplicationDescriptor,
        cancel: threading.Event | None = None,
    ) -> Decision:
        """Compute the update decision for one application.

        Dependencies are checked first, then the local version. When either
        is missing no remote lookup is made.

        Args:
            descriptor: Application descriptor.
            cancel: Optional cancellation event.

        Returns:
            Decision with both versions and the comparison status.

        Raises:
            MissingDependencyError: If a declared dependency is missing.
            LocalVersionUnavailableError: If the installed version is unknown.
            RemoteVersionUnavailableError: If the latest version is unknown.
            MalformedVersionError: If a version cannot be parsed.
            OperationCancelledError: If cancel is set.
        """
        check_cancelled(cancel)
        self.check_dependencies(descriptor)
        current_text = self.local_version(descriptor)
        latest_text = self.latest_version(descriptor, cancel=cancel)

        logger.debug("%s: current=%s latest=%s", descriptor.name, current_text, latest_text)

        current = VersionString.parse(current_text)
        latest = VersionString.parse(latest_text)

        if descriptor.version.comparison == "truncated":
            status = truncated_compare(current.raw, latest.raw)
        else:
            status = self._comparator.status(current, latest)

        return Decision(name=descriptor.name, current=current, latest=latest, status=status)

    def check(
        self,
        descriptor: ApplicationDescriptor,
        cancel: threading.Event | None = None,
    ) -> CheckResult:
        """Compute a decision, capturing per-application failures.

        Args:
            descriptor: Application descriptor.
            cancel: Optional cancellation event.

        Returns:
            CheckResult holding either the decision or the error.

        Raises:
            OperationCancelledError: If cancel is set.
        """
        try:
            return CheckResult(name=descriptor.name, decision=self.decide(descriptor, cancel))
        except OperationCancelledError:
            raise
        except SysUpdateError as e:
            logger.info("Check of %s failed: %s", descriptor.name, e)
            return CheckResult(name=descriptor.name, error=e)

    def check_all(
        self,
        descriptors: list[ApplicationDescriptor],
        cancel: threading.Event | None = None,
    ) -> list[CheckResult]:
        """Check many applications in parallel.

        Results keep the order of descriptors. A failing application never
        stops the others.

        Args:
            descriptors: Applications to check.
            cancel: Optional cancellation event. Created internally if None.

        Returns:
            One CheckResult per descriptor.

        Raises:
            OperationCancelledError: If the run was cancelled.
        """
        if not descriptors:
            return []

        cancel = cancel or threading.Event()
        workers = min(self._settings.max_workers, len(descriptors))

        executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="sysupdate-check")
        try:
            futures = [executor.submit(self.check, d, cancel) for d in descriptors]
            return [f.result() for f in futures]
        except KeyboardInterrupt as e:
            cancel.set()
            raise OperationCancelledError("Version checks cancelled") from e
        finally:
            executor.shutdown(wait=not cancel.is_set(), cancel_futures=True)
