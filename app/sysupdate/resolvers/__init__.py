"""Remote version resolvers.

This module provides the Resolver interface and one implementation per
remote source kind (GitHub releases, npm registry, APT candidates and
download redirects).
"""

from sysupdate.core.settings import Settings
from sysupdate.resolvers.apt import AptResolver
from sysupdate.resolvers.base import Resolver
from sysupdate.resolvers.github import GitHubResolver
from sysupdate.resolvers.npm import NpmResolver
from sysupdate.resolvers.redirect import RedirectResolver


def get_resolvers(settings: Settings | None = None) -> dict[str, Resolver]:
    """Create one resolver per source kind.

    Args:
        settings: Run settings providing timeout and retry values.

    Returns:
        Mapping of source kind to resolver.
    """
    settings = settings or Settings()
    resolvers: list[Resolver] = [
        GitHubResolver(
            timeout=settings.timeout_seconds,
            retries=settings.github_retries,
        ),
        NpmResolver(timeout=settings.timeout_seconds),
        AptResolver(timeout=settings.timeout_seconds),
        RedirectResolver(timeout=settings.timeout_seconds),
    ]
    return {r.kind: r for r in resolvers}


__all__ = [
    "AptResolver",
    "GitHubResolver",
    "NpmResolver",
    "RedirectResolver",
    "Resolver",
    "get_resolvers",
]
