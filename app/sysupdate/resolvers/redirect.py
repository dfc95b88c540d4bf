"""Download-redirect resolver.

Some vendors publish no release API, but their "latest" download URL
redirects to a file name that embeds the version (for example
``code-insiders_1.96.0-1732118645_amd64.deb``). This resolver issues a
HEAD request without following redirects and matches the Location header.
"""

import logging
import re
import threading

import requests

from sysupdate.core.errors import NetworkError, ResponseParseError
from sysupdate.models.descriptor import RedirectSource
from sysupdate.resolvers.base import Resolver, ThreadLocalSession, check_cancelled

logger = logging.getLogger(__name__)


class RedirectResolver(Resolver):
    """Resolver reading versions from download redirects."""

    def __init__(self, timeout: float = 15.0, session: requests.Session | None = None) -> None:
        super().__init__(timeout=timeout)
        self._sessions = ThreadLocalSession(session)

    @property
    def kind(self) -> str:
        """Return redirect as the source kind."""
        return "redirect"

    def resolve(self, source: RedirectSource, cancel: threading.Event | None = None) -> str:
        """Fetch the version embedded in the redirect target.

        Args:
            source: Download URL and Location regex.
            cancel: Optional cancellation event.

        Returns:
            Version text captured by the regex.

        Raises:
            NetworkError: On connection failure or timeout.
            ResponseParseError: If there is no Location header or no match.
            OperationCancelledError: If cancel is set.
        """
        check_cancelled(cancel)

        try:
            resp = self._sessions.get().head(
                source.url, allow_redirects=False, timeout=self._timeout
            )
        except requests.Timeout as exc:
            raise NetworkError(f"Request timed out after {self._timeout}s: {source.url}") from exc
        except requests.RequestException as exc:
            raise NetworkError(f"Connection failed: {exc}") from exc

        location = resp.headers.get("Location", "").strip()
        logger.debug("HEAD %s -> %s %s", source.url, resp.status_code, location)
        if not location:
            raise ResponseParseError(f"No redirect from {source.url} (HTTP {resp.status_code})")

        match = re.search(source.regex, location)
        if match is None:
            raise ResponseParseError(f"Redirect target does not contain a version: {location}")
        return match.group(1) if match.groups() else match.group(0)
