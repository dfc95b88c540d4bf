"""Version models.

This module defines the parsed representation of loosely formatted
version strings and the enums describing comparison outcomes.
"""

import re
from dataclasses import dataclass
from enum import Enum

from sysupdate.core.errors import MalformedVersionError

_SEGMENT_RE = re.compile(r"^(\d*)(.*)$", re.DOTALL)


class Ordering(Enum):
    """Ordering of two versions."""

    LESS = -1
    EQUAL = 0
    GREATER = 1

    def reverse(self) -> "Ordering":
        """Return the ordering seen from the other side."""
        return Ordering(-self.value)


class VersionStatus(Enum):
    """Semantic status of an installed version against the latest release.

    Attributes:
        EQUAL: Installed version is the latest.
        LOCAL_AHEAD: Installed version is newer than the latest release.
        UPDATE_AVAILABLE: A newer release exists.
    """

    EQUAL = "equal"
    LOCAL_AHEAD = "ahead"
    UPDATE_AVAILABLE = "update"


class SuffixOrder(str, Enum):
    """How a bare numeric segment orders against the same segment with a suffix.

    Attributes:
        SUFFIX_NEWER: ``3.6`` < ``3.6a`` (suffixed segments are newer).
        SUFFIX_OLDER: ``1.0rc1`` < ``1.0`` (suffixes mark pre-releases).
    """

    SUFFIX_NEWER = "suffix-newer"
    SUFFIX_OLDER = "suffix-older"


@dataclass(frozen=True, slots=True)
class VersionSegment:
    """One dot-separated part of a version.

    Attributes:
        number: Leading numeric value (0 when the segment has no digits).
        suffix: Remaining characters after the digits.
        has_digits: Whether the segment started with at least one digit.
    """

    number: int
    suffix: str = ""
    has_digits: bool = True


@dataclass(frozen=True, slots=True)
class VersionString:
    """Immutable parsed version.

    Attributes:
        raw: The text the version was parsed from.
        segments: Parsed segments, in order.

    Example:
        >>> VersionString.parse("3.4a").segments
        (VersionSegment(number=3, suffix='', has_digits=True),
         VersionSegment(number=4, suffix='a', has_digits=True))
    """

    raw: str
    segments: tuple[VersionSegment, ...]

    @classmethod
    def parse(cls, text: str) -> "VersionString":
        """Parse version text into segments.

        Args:
            text: Version text such as "3.4", "8.14" or "1.96.0-insider-1".

        Returns:
            Parsed VersionString.

        Raises:
            MalformedVersionError: If no segment contains a digit.
        """
        raw = text.strip()
        segments: list[VersionSegment] = []
        for part in raw.split("."):
            match = _SEGMENT_RE.match(part)
            digits, suffix = (match.group(1), match.group(2)) if match else ("", part)
            segments.append(
                VersionSegment(
                    number=int(digits) if digits else 0,
                    suffix=suffix,
                    has_digits=bool(digits),
                )
            )

        if not raw or not any(s.has_digits for s in segments):
            raise MalformedVersionError(text)

        return cls(raw=raw, segments=tuple(segments))

    @property
    def numbers(self) -> tuple[int, ...]:
        """Numeric parts of all segments."""
        return tuple(s.number for s in self.segments)

    def __str__(self) -> str:
        return self.raw


def extract_version(output: str, pattern: str) -> str | None:
    """Extract a version substring from command output.

    The pattern is applied to the first non-empty line; if that line does
    not match, the whole output is searched.

    Args:
        output: Raw command output.
        pattern: Regular expression whose first capture group is the version.

    Returns:
        Extracted version text, or None if nothing matched.
    """
    regex = re.compile(pattern)
    lines = [line for line in output.splitlines() if line.strip()]
    candidates = [lines[0], output] if lines else []

    for text in candidates:
        match = regex.search(text)
        if match is None:
            continue
        value = match.group(1) if regex.groups else match.group(0)
        if value and value.strip():
            return value.strip()
    return None
