"""Version comparison.

Provides the segment-wise comparison algorithm, the truncated comparison
used for date-stamped builds, and a wrapper around ``dpkg --compare-versions``
for Debian-style version ordering.
"""

import logging
import re
import subprocess
from itertools import zip_longest

from sysupdate.models.version import (
    Ordering,
    SuffixOrder,
    VersionSegment,
    VersionStatus,
    VersionString,
)
from sysupdate.utils.shell import command_exists, run_command

logger = logging.getLogger(__name__)

_PAD = VersionSegment(number=0, suffix="", has_digits=False)

# Epoch ("1:") or Debian revision ("-1")
_DEBIAN_SYNTAX_RE = re.compile(r"^\d+:|-")

ORDERING_TO_STATUS: dict[Ordering, VersionStatus] = {
    Ordering.EQUAL: VersionStatus.EQUAL,
    Ordering.GREATER: VersionStatus.LOCAL_AHEAD,
    Ordering.LESS: VersionStatus.UPDATE_AVAILABLE,
}


def _compare_suffix(a: str, b: str, suffix_order: SuffixOrder) -> Ordering:
    if a == b:
        return Ordering.EQUAL
    if not a or not b:
        # Exactly one side is bare
        bare_first = Ordering.LESS if not a else Ordering.GREATER
        if suffix_order == SuffixOrder.SUFFIX_OLDER:
            return bare_first.reverse()
        return bare_first
    return Ordering.GREATER if a > b else Ordering.LESS


def compare_versions(
    a: VersionString,
    b: VersionString,
    suffix_order: SuffixOrder = SuffixOrder.SUFFIX_NEWER,
) -> Ordering:
    """Compare two parsed versions segment by segment.

    Numeric parts are compared as integers with the shorter version padded
    with zeros, so ``3.4`` equals ``3.4.0`` and ``3.10`` is greater than
    ``3.9``. When the numbers of a segment tie, suffixes decide: with
    SUFFIX_NEWER a bare segment is older than a suffixed one (``3.6`` <
    ``3.6a``), and two suffixes compare lexicographically.

    Args:
        a: Left-hand version.
        b: Right-hand version.
        suffix_order: Ordering rule for bare versus suffixed segments.

    Returns:
        Ordering of a relative to b.
    """
    for left, right in zip_longest(a.segments, b.segments, fillvalue=_PAD):
        if left.number != right.number:
            return Ordering.GREATER if left.number > right.number else Ordering.LESS
        order = _compare_suffix(left.suffix, right.suffix, suffix_order)
        if order != Ordering.EQUAL:
            return order
    return Ordering.EQUAL


def split_build_stamp(text: str) -> tuple[str, str | None]:
    """Split text at the last ``-`` into (prefix, build stamp).

    Returns:
        The stripped text and None when there is no ``-``.
    """
    head, sep, tail = text.strip().rpartition("-")
    return (head, tail) if sep else (text.strip(), None)


def truncated_compare(current: str, latest: str) -> VersionStatus:
    """Compare date-stamped builds by their truncated prefixes.

    Builds such as ``1.96.0-insider-1732118645`` carry a trailing stamp that
    changes on every release. Both sides are truncated at the last ``-`` and
    any difference in the prefixes counts as an available update; prefixes
    are not ordered. When the prefixes match, two different numeric stamps
    still mean a new build, while a non-numeric tail such as the
    ``-insider`` printed by ``code-insiders --version`` is ignored.

    Args:
        current: Installed version text.
        latest: Latest published version text.

    Returns:
        EQUAL when the builds match, UPDATE_AVAILABLE otherwise.
    """
    current_head, current_stamp = split_build_stamp(current)
    latest_head, latest_stamp = split_build_stamp(latest)

    if current_head != latest_head:
        return VersionStatus.UPDATE_AVAILABLE
    if (
        current_stamp is not None
        and latest_stamp is not None
        and current_stamp.isdigit()
        and latest_stamp.isdigit()
        and current_stamp != latest_stamp
    ):
        return VersionStatus.UPDATE_AVAILABLE
    return VersionStatus.EQUAL


class DpkgComparator:
    """Debian version ordering via ``dpkg --compare-versions``.

    Understands epochs, upstream versions and Debian revisions. Returns None
    whenever dpkg is missing or does not give an answer, letting the caller
    fall back to the built-in algorithm.
    """

    _TIMEOUT: float = 5.0

    def is_available(self) -> bool:
        """Check if dpkg is available."""
        return command_exists("dpkg")

    def compare(self, a: str, b: str) -> Ordering | None:
        """Compare two raw version texts with dpkg.

        Args:
            a: Left-hand version text.
            b: Right-hand version text.

        Returns:
            Ordering of a relative to b, or None if undecided.
        """
        if not self.is_available():
            return None

        for operator, ordering in (
            ("eq", Ordering.EQUAL),
            ("gt", Ordering.GREATER),
            ("lt", Ordering.LESS),
        ):
            try:
                result = run_command(
                    ["dpkg", "--compare-versions", a, operator, b],
                    timeout=self._TIMEOUT,
                )
            except (subprocess.TimeoutExpired, OSError) as e:
                logger.debug("dpkg --compare-versions failed: %s", e)
                return None
            if result.success:
                return ordering
        return None


class VersionComparator:
    """Compares installed and published versions.

    Identical texts are always equal. dpkg is only consulted for texts with
    Debian syntax (an epoch or a revision) and only with the default suffix
    order; plain versions such as ``3.4`` and ``3.4.0`` always go through
    the segment algorithm, which pads with zeros and honours suffix_order.

    Example:
        >>> comparator = VersionComparator(use_system=False)
        >>> comparator.status("3.3", "3.4")
        <VersionStatus.UPDATE_AVAILABLE: 'update'>
    """

    def __init__(
        self,
        use_system: bool = True,
        suffix_order: SuffixOrder = SuffixOrder.SUFFIX_NEWER,
        system: DpkgComparator | None = None,
    ) -> None:
        self._use_system = use_system
        self._suffix_order = suffix_order
        self._system = system or DpkgComparator()

    def compare(self, a: str | VersionString, b: str | VersionString) -> Ordering:
        """Compare two versions.

        Args:
            a: Left-hand version (text or parsed).
            b: Right-hand version (text or parsed).

        Returns:
            Ordering of a relative to b.

        Raises:
            MalformedVersionError: If the fallback has to parse invalid text.
        """
        left = a if isinstance(a, VersionString) else VersionString.parse(a)
        right = b if isinstance(b, VersionString) else VersionString.parse(b)

        if left.raw == right.raw:
            return Ordering.EQUAL

        if self._wants_system(left.raw, right.raw):
            ordering = self._system.compare(left.raw, right.raw)
            if ordering is not None:
                return ordering
            logger.debug("System comparator unavailable, using built-in comparison")

        return compare_versions(left, right, self._suffix_order)

    def _wants_system(self, a: str, b: str) -> bool:
        if not self._use_system or self._suffix_order != SuffixOrder.SUFFIX_NEWER:
            return False
        return bool(_DEBIAN_SYNTAX_RE.search(a) or _DEBIAN_SYNTAX_RE.search(b))

    def status(
        self, current: str | VersionString, latest: str | VersionString
    ) -> VersionStatus:
        """Derive the update status of an installed version.

        Args:
            current: Installed version.
            latest: Latest published version.

        Returns:
            VersionStatus for the pair.
        """
        return ORDERING_TO_STATUS[self.compare(current, latest)]
