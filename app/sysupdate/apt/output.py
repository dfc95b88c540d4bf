"""Classification of apt-get output lines.

Maps each line of apt-get output to a closed set of categories through an
ordered marker table, so the display layer can style lines without
matching free text itself.
"""

import re
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum


class LineCategory(Enum):
    """Category of one apt-get output line."""

    READING = "reading"
    UPGRADE_LIST = "upgrade-list"
    KEPT_BACK = "kept-back"
    NEW_PACKAGES = "new-packages"
    REMOVALS = "removals"
    SUMMARY = "summary"
    DOWNLOAD = "download"
    DISK = "disk"
    UNPACK = "unpack"
    SETUP = "setup"
    TRIGGERS = "triggers"
    ERROR = "error"
    WARNING = "warning"
    BLANK = "blank"
    OTHER = "other"


# First matching marker wins; order matters ("kept back" before "error").
_MARKERS: tuple[tuple[str, LineCategory], ...] = (
    ("Reading package lists", LineCategory.READING),
    ("Building dependency tree", LineCategory.READING),
    ("Reading state information", LineCategory.READING),
    ("Calculating upgrade", LineCategory.READING),
    ("The following packages will be upgraded:", LineCategory.UPGRADE_LIST),
    ("The following packages have been kept back:", LineCategory.KEPT_BACK),
    ("The following NEW packages will be installed:", LineCategory.NEW_PACKAGES),
    ("The following packages will be REMOVED:", LineCategory.REMOVALS),
    ("upgraded,", LineCategory.SUMMARY),
    ("newly installed,", LineCategory.SUMMARY),
    ("Need to get", LineCategory.DOWNLOAD),
    ("Get:", LineCategory.DOWNLOAD),
    ("Fetched", LineCategory.DOWNLOAD),
    ("After this operation", LineCategory.DISK),
    ("Unpacking", LineCategory.UNPACK),
    ("Setting up", LineCategory.SETUP),
    ("Processing triggers", LineCategory.TRIGGERS),
)

_ERROR_RE = re.compile(r"\berror\b", re.IGNORECASE)
_WARNING_RE = re.compile(r"\bwarning\b", re.IGNORECASE)

_SUMMARY_RE = re.compile(
    r"(\d+) upgraded, (\d+) newly installed, (\d+) to remove and (\d+) not upgraded"
)


def classify_line(line: str) -> LineCategory:
    """Return the category of one output line.

    Args:
        line: A single line of apt-get output.

    Returns:
        Matching LineCategory, OTHER when no marker applies.
    """
    if not line.strip():
        return LineCategory.BLANK

    for marker, category in _MARKERS:
        if marker in line:
            return category

    if line.startswith("E:"):
        return LineCategory.ERROR
    if line.startswith("W:"):
        return LineCategory.WARNING

    if _ERROR_RE.search(line):
        return LineCategory.ERROR
    if _WARNING_RE.search(line):
        return LineCategory.WARNING
    return LineCategory.OTHER


def iter_classified(output: str) -> Iterator[tuple[LineCategory, str]]:
    """Yield classified lines, skipping consecutive duplicates.

    Args:
        output: Raw apt-get output.

    Yields:
        Tuples of (category, line).
    """
    previous: str | None = None
    for line in output.splitlines():
        if line == previous:
            continue
        previous = line
        yield classify_line(line), line


@dataclass(frozen=True, slots=True)
class UpgradeSummary:
    """Counts from the apt-get summary line.

    Attributes:
        upgraded: Packages upgraded.
        newly_installed: Packages newly installed.
        to_remove: Packages removed.
        not_upgraded: Packages not upgraded (kept back among them).
    """

    upgraded: int
    newly_installed: int
    to_remove: int
    not_upgraded: int

    @property
    def nothing_changed(self) -> bool:
        """Check if the run neither upgraded nor installed anything."""
        return self.upgraded == 0 and self.newly_installed == 0


def parse_upgrade_summary(output: str) -> UpgradeSummary | None:
    """Parse the "N upgraded, M newly installed, ..." summary line.

    Args:
        output: Raw apt-get output.

    Returns:
        UpgradeSummary, or None if no summary line is present.
    """
    match = _SUMMARY_RE.search(output)
    if match is None:
        return None
    upgraded, installed, removed, held = (int(g) for g in match.groups())
    return UpgradeSummary(
        upgraded=upgraded,
        newly_installed=installed,
        to_remove=removed,
        not_upgraded=held,
    )
