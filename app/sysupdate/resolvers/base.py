"""Abstract base class for remote version resolvers.

This module defines the Resolver interface that every remote version
source must implement.
"""

import threading
from abc import ABC, abstractmethod
from typing import Any

import requests

from sysupdate.core.errors import OperationCancelledError


def check_cancelled(cancel: threading.Event | None) -> None:
    """Raise OperationCancelledError if the cancel event is set.

    Args:
        cancel: Optional cancellation event supplied by the caller.

    Raises:
        OperationCancelledError: If cancellation was requested.
    """
    if cancel is not None and cancel.is_set():
        raise OperationCancelledError("Operation cancelled")


def strip_tag_prefix(tag: str) -> str:
    """Strip a leading ``v`` from a release tag."""
    tag = tag.strip()
    if tag[:1] in ("v", "V") and tag[1:2].isdigit():
        return tag[1:]
    return tag


class ThreadLocalSession:
    """One requests.Session per thread.

    check_all resolves versions from a worker pool and sessions are never
    shared between its threads. An injected session is used as is by every
    thread.

    Args:
        session: Session to use instead of per-thread ones.
        headers: Headers set on every session.
    """

    def __init__(
        self,
        session: requests.Session | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        self._shared = session
        self._headers = dict(headers or {})
        self._local = threading.local()
        if session is not None and self._headers:
            session.headers.update(self._headers)

    def get(self) -> requests.Session:
        """Return the session of the calling thread."""
        if self._shared is not None:
            return self._shared
        session: requests.Session | None = getattr(self._local, "session", None)
        if session is None:
            session = requests.Session()
            session.headers.update(self._headers)
            self._local.session = session
        return session

class Resolver(ABC):
    """Abstract base class for all remote version resolvers.

    Resolvers fetch the latest published version text for one kind of
    remote source. Every call is bounded by the resolver's timeout.

    Attributes:
        timeout: Timeout in seconds for a single lookup.

    Example:
        >>> resolver = GitHubResolver(timeout=10.0)
        >>> resolver.resolve(GitHubSource(owner="tmux", repo="tmux"))
        '3.5a'
    """

    def __init__(self, timeout: float = 15.0) -> None:
        """Initialize the resolver.

        Args:
            timeout: Timeout in seconds for a single lookup.
        """
        self._timeout = timeout

    @property
    def timeout(self) -> float:
        """Timeout in seconds for a single lookup."""
        return self._timeout

    @property
    @abstractmethod
    def kind(self) -> str:
        """Return the source kind this resolver handles.

        Returns:
            Source kind ("github", "npm", "apt" or "redirect").
        """

    @abstractmethod
    def resolve(self, source: Any, cancel: threading.Event | None = None) -> str:
        """Fetch the latest version text for a source.

        Args:
            source: Source model matching this resolver's kind.
            cancel: Optional cancellation event.

        Returns:
            Latest version text.

        Raises:
            NetworkError: On connectivity failure or timeout.
            NotFoundError: If nothing has been published.
            ResponseParseError: If the response lacks a version.
            OperationCancelledError: If cancel is set before the lookup.
        """
