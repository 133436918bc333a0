"""Snapshot diffing."""

from .engine import diff_snapshots, has_diff, severity_summary
from .models import RuleOptionChange, RuleSeverityChange, SnapshotDiff, WorkspaceMembershipChange

__all__ = [
    "RuleOptionChange",
    "RuleSeverityChange",
    "SnapshotDiff",
    "WorkspaceMembershipChange",
    "diff_snapshots",
    "has_diff",
    "severity_summary",
]
