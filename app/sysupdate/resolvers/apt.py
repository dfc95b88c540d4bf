"""APT candidate resolver.

Reads the candidate version of a package from ``apt-cache policy`` and
drops the trailing Debian revision (``141.0.7390.76-1`` becomes
``141.0.7390.76``) so it compares against the application's own version
output.
"""

import re
import subprocess
import threading

from sysupdate.apt.kept_back import parse_policy
from sysupdate.core.errors import NetworkError, NotFoundError, ResponseParseError
from sysupdate.models.descriptor import AptSource
from sysupdate.resolvers.base import Resolver, check_cancelled
from sysupdate.utils.shell import command_exists, run_command

_REVISION_RE = re.compile(r"-\d+$")


class AptResolver(Resolver):
    """Resolver for APT package candidates."""

    @property
    def kind(self) -> str:
        """Return apt as the source kind."""
        return "apt"

    def resolve(self, source: AptSource, cancel: threading.Event | None = None) -> str:
        """Fetch the candidate version of an APT package.

        Args:
            source: APT package name.
            cancel: Optional cancellation event.

        Returns:
            Candidate version without its Debian revision.

        Raises:
            NetworkError: If apt-cache is missing, times out or fails.
            NotFoundError: If the package has no candidate.
            ResponseParseError: If the policy output has no Candidate line.
            OperationCancelledError: If cancel is set.
        """
        check_cancelled(cancel)

        if not command_exists("apt-cache"):
            raise NetworkError("apt-cache is not available on this system")

        try:
            result = run_command(["apt-cache", "policy", source.package], timeout=self._timeout)
        except subprocess.TimeoutExpired as exc:
            raise NetworkError(f"apt-cache policy timed out after {self._timeout}s") from exc
        except OSError as exc:
            raise NetworkError(f"Failed to run apt-cache: {exc}") from exc

        if not result.success:
            raise NetworkError(result.stderr.strip() or "apt-cache policy failed")
        if not result.stdout.strip():
            raise NotFoundError(f"Unknown APT package: {source.package}")

        versions = parse_policy(result.stdout, require_installed=False)
        if versions is None:
            raise ResponseParseError(f"No Candidate line for {source.package}")

        candidate = versions[1]
        if candidate is None:
            raise NotFoundError(f"No installation candidate for {source.package}")
        return _REVISION_RE.sub("", candidate)
