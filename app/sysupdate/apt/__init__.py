"""APT-specific analysis of upgrade runs.

This package classifies apt-get output lines and explains packages that
were kept back during an upgrade.
"""

from sysupdate.apt.kept_back import (
    KeptBackAnalyzer,
    RemediationResult,
    parse_kept_back,
    parse_policy,
    remediate,
)
from sysupdate.apt.output import (
    LineCategory,
    UpgradeSummary,
    classify_line,
    iter_classified,
    parse_upgrade_summary,
)

__all__ = [
    "KeptBackAnalyzer",
    "LineCategory",
    "RemediationResult",
    "UpgradeSummary",
    "classify_line",
    "iter_classified",
    "parse_kept_back",
    "parse_policy",
    "parse_upgrade_summary",
    "remediate",
]
