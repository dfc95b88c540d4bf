"""Kept-back package analysis.

Parses the output of ``apt-get upgrade`` for the "kept back" block, looks up
installed and candidate versions with ``apt-cache policy``, and optionally
retries the packages with a targeted ``apt-get install``.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from sysupdate.models.kept_back import KeptBackEntry, KeptBackReport

if TYPE_CHECKING:
    from sysupdate.core.session import UserPrompter
    from sysupdate.core.settings import Settings
    from sysupdate.operators.apt import AptOperator

logger = logging.getLogger(__name__)

_MARKER_RE = re.compile(r"kept back:(.*)$", re.IGNORECASE)
_INSTALLED_RE = re.compile(r"Installed:\s*(\S+)")
_CANDIDATE_RE = re.compile(r"Candidate:\s*(\S+)")

# apt-cache prints "(none)" for missing versions
_NONE = "(none)"

# Callable returning raw policy text for a package, or None on failure
PolicyQuery = Callable[[str], str | None]


def parse_kept_back(output: str) -> list[str]:
    """Extract kept-back package names from upgrade output.

    APT prints the marker line followed by indented lines of package names.
    Names given on the marker line itself are accepted as well.

    Args:
        output: Raw output of an upgrade run.

    Returns:
        Package names in listed order without duplicates; empty if there is
        no kept-back marker.
    """
    names: list[str] = []
    in_block = False

    for line in output.splitlines():
        if in_block:
            if line[:1].isspace() and line.strip():
                names.extend(line.split())
                continue
            in_block = False

        match = _MARKER_RE.search(line)
        if match is not None:
            names.extend(match.group(1).split())
            in_block = True

    return list(dict.fromkeys(names))


def parse_policy(
    text: str,
    *,
    require_installed: bool = True,
) -> tuple[str | None, str | None] | None:
    """Parse installed and candidate versions from apt-cache policy output.

    Args:
        text: Raw policy output.
        require_installed: Treat output without an Installed line as unusable.

    Returns:
        Tuple of (installed, candidate) with "(none)" mapped to None, or None
        when the required line is missing.
    """
    installed = _INSTALLED_RE.search(text)
    candidate = _CANDIDATE_RE.search(text)

    if require_installed and installed is None:
        return None
    if not require_installed and candidate is None:
        return None

    def _value(match: re.Match[str] | None) -> str | None:
        if match is None or match.group(1) == _NONE:
            return None
        return match.group(1)

    return _value(installed), _value(candidate)


class KeptBackAnalyzer:
    """Builds kept-back reports from upgrade output.

    Example:
        >>> analyzer = KeptBackAnalyzer(AptOperator().policy)
        >>> report = analyzer.analyze(upgrade_result.output)
        >>> for entry in report.detailed:
        ...     print(f"{entry.name}: {entry.installed} -> {entry.candidate}")
    """

    def __init__(self, policy_query: PolicyQuery) -> None:
        """Initialize the analyzer.

        Args:
            policy_query: Callable returning policy text for a package.
        """
        self._policy_query = policy_query

    def analyze(self, output: str) -> KeptBackReport:
        """Analyze upgrade output.

        Every kept-back package is listed; packages whose policy lookup
        fails or lacks an Installed line carry no version details.

        Args:
            output: Raw output of an upgrade run.

        Returns:
            KeptBackReport, empty when nothing was kept back.
        """
        entries: list[KeptBackEntry] = []

        for name in parse_kept_back(output):
            policy_text = self._policy_query(name)
            versions = parse_policy(policy_text) if policy_text else None
            if versions is None:
                logger.debug("No policy details for kept-back package %s", name)
                entries.append(KeptBackEntry(name=name))
                continue
            installed, candidate = versions
            entries.append(KeptBackEntry(name=name, installed=installed, candidate=candidate))

        return KeptBackReport(entries=tuple(entries))


@dataclass(frozen=True, slots=True)
class RemediationResult:
    """Outcome of retrying kept-back packages with apt-get install.

    Attributes:
        attempted: Whether the install was run.
        success: Whether the install succeeded.
        output: Captured output of the install.
    """

    attempted: bool
    success: bool = False
    output: str = ""


def remediate(
    report: KeptBackReport,
    operator: AptOperator,
    prompter: UserPrompter,
    settings: Settings,
) -> RemediationResult:
    """Offer a targeted install of kept-back packages.

    The install is a separate, explicitly confirmed step. In quiet mode it
    is never attempted.

    Args:
        report: Kept-back report of the upgrade run.
        operator: APT operator used for the install.
        prompter: Prompter asking for confirmation.
        settings: Run settings.

    Returns:
        RemediationResult describing what happened.
    """
    if report.is_empty or settings.quiet:
        return RemediationResult(attempted=False)

    question = f"Try upgrading {len(report)} kept back package(s) with individual install?"
    if not prompter.confirm(question, default=True):
        return RemediationResult(attempted=False)

    result = operator.install(report.names)
    if result is None:
        return RemediationResult(attempted=False)

    return RemediationResult(attempted=True, success=result.success, output=result.output)
