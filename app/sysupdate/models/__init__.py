"""Data models for sysupdate.

This module exports the core data structures used throughout the application.
"""

from sysupdate.models.decision import CheckResult, Decision, SessionOutcome, SessionState
from sysupdate.models.descriptor import ApplicationDescriptor
from sysupdate.models.kept_back import KeptBackEntry, KeptBackReport
from sysupdate.models.version import (
    Ordering,
    SuffixOrder,
    VersionSegment,
    VersionStatus,
    VersionString,
)

__all__ = [
    "ApplicationDescriptor",
    "CheckResult",
    "Decision",
    "KeptBackEntry",
    "KeptBackReport",
    "Ordering",
    "SessionOutcome",
    "SessionState",
    "SuffixOrder",
    "VersionSegment",
    "VersionStatus",
    "VersionString",
]
