"""GitHub latest-release resolver.

Queries https://api.github.com/repos/{owner}/{repo}/releases/latest and
returns the release tag without its leading ``v``.

Rate limits
-----------
Unauthenticated requests are limited to 60 per hour. HTTP 429 and 5xx
answers are retried with a linear backoff; everything else fails at once.
"""

import logging
import threading
import time

import requests

from sysupdate import __version__
from sysupdate.core.errors import NetworkError, NotFoundError, ResponseParseError
from sysupdate.models.descriptor import GitHubSource
from sysupdate.resolvers.base import (
    Resolver,
    ThreadLocalSession,
    check_cancelled,
    strip_tag_prefix,
)

logger = logging.getLogger(__name__)

API_BASE = "https://api.github.com"

# Seconds to wait before retrying a 429/5xx answer, multiplied by the attempt
_BACKOFF = 2.0


class GitHubResolver(Resolver):
    """Resolver for GitHub releases.

    Attributes:
        timeout: Request timeout in seconds.
        retries: Attempts per lookup on 429/5xx answers.
    """

    def __init__(
        self,
        timeout: float = 15.0,
        retries: int = 2,
        session: requests.Session | None = None,
    ) -> None:
        super().__init__(timeout=timeout)
        self._retries = max(1, retries)
        self._sessions = ThreadLocalSession(
            session,
            headers={
                "Accept": "application/vnd.github+json",
                "User-Agent": f"sysupdate/{__version__}",
            },
        )

    @property
    def kind(self) -> str:
        """Return github as the source kind."""
        return "github"

    def resolve(self, source: GitHubSource, cancel: threading.Event | None = None) -> str:
        """Fetch the latest release tag of a repository.

        Args:
            source: GitHub owner and repository.
            cancel: Optional cancellation event.

        Returns:
            Release tag without a leading ``v``.

        Raises:
            NetworkError: On connection failure, timeout or an HTTP error.
            NotFoundError: If the repository has no releases.
            ResponseParseError: If the response has no tag_name.
            OperationCancelledError: If cancel is set.
        """
        url = f"{API_BASE}/repos/{source.owner}/{source.repo}/releases/latest"

        for attempt in range(self._retries):
            check_cancelled(cancel)
            try:
                resp = self._sessions.get().get(url, timeout=self._timeout)
            except requests.Timeout as exc:
                raise NetworkError(f"Request timed out after {self._timeout}s: {url}") from exc
            except requests.RequestException as exc:
                raise NetworkError(f"Connection failed: {exc}") from exc

            logger.debug("GET %s -> %s", url, resp.status_code)

            if resp.status_code == 429 or resp.status_code >= 500:
                if attempt + 1 < self._retries:
                    wait = _BACKOFF * (attempt + 1)
                    logger.info(
                        "GitHub answered %s, retrying in %.1fs (attempt %d/%d)",
                        resp.status_code,
                        wait,
                        attempt + 1,
                        self._retries,
                    )
                    time.sleep(wait)
                    continue
                raise NetworkError(f"GitHub answered HTTP {resp.status_code} for {url}")

            if resp.status_code == 404:
                raise NotFoundError(f"No releases found for {source.owner}/{source.repo}")

            if not resp.ok:
                raise NetworkError(f"GitHub answered HTTP {resp.status_code} for {url}")

            return self._parse_tag(resp, source)

        raise NetworkError(f"GitHub request failed: {url}")

    def _parse_tag(self, resp: requests.Response, source: GitHubSource) -> str:
        try:
            body = resp.json()
        except ValueError as exc:
            raise ResponseParseError(f"Invalid JSON from GitHub for {source.repo}") from exc

        tag = body.get("tag_name") if isinstance(body, dict) else None
        if not isinstance(tag, str) or not tag.strip():
            raise ResponseParseError(f"Release of {source.owner}/{source.repo} has no tag_name")

        return strip_tag_prefix(tag)
