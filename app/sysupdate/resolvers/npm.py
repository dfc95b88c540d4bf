"""npm registry resolver.

Asks the npm CLI for the latest published version of a package.
"""

import logging
import subprocess
import threading

from sysupdate.core.errors import NetworkError, NotFoundError, ResponseParseError
from sysupdate.models.descriptor import NpmSource
from sysupdate.resolvers.base import Resolver, check_cancelled
from sysupdate.utils.shell import command_exists, run_command

logger = logging.getLogger(__name__)


class NpmResolver(Resolver):
    """Resolver for packages published on the npm registry."""

    @property
    def kind(self) -> str:
        """Return npm as the source kind."""
        return "npm"

    def resolve(self, source: NpmSource, cancel: threading.Event | None = None) -> str:
        """Fetch the latest version with ``npm view <package> version``.

        Args:
            source: npm package name.
            cancel: Optional cancellation event.

        Returns:
            Latest published version text.

        Raises:
            NetworkError: If npm is missing, times out or fails.
            NotFoundError: If the package does not exist.
            ResponseParseError: If npm prints no version.
            OperationCancelledError: If cancel is set.
        """
        check_cancelled(cancel)

        if not command_exists("npm"):
            raise NetworkError("npm is not available to query the registry")

        logger.debug("Fetching npm latest version for package: %s", source.package)
        try:
            result = run_command(
                ["npm", "view", source.package, "version"],
                timeout=self._timeout,
            )
        except subprocess.TimeoutExpired as exc:
            raise NetworkError(f"npm view timed out after {self._timeout}s") from exc
        except OSError as exc:
            raise NetworkError(f"Failed to run npm: {exc}") from exc

        if not result.success:
            if "E404" in result.stderr or "404" in result.stderr:
                raise NotFoundError(f"npm package not found: {source.package}")
            raise NetworkError(result.stderr.strip() or "npm view failed")

        lines = [line.strip() for line in result.stdout.splitlines() if line.strip()]
        if not lines:
            raise ResponseParseError(f"npm printed no version for {source.package}")
        return lines[-1].strip("'\"")
