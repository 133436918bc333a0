"""Data models for snapshot diffing: rule, severity, option and membership deltas."""

from dataclasses import dataclass, field
from typing import Any, List


@dataclass
class RuleSeverityChange:
    """Severity summary of a rule moved between baseline and current."""

    rule: str
    before: str  # e.g. "warn" or "error|off"
    after: str


@dataclass
class RuleOptionChange:
    """Same severities, different variants; carries both entries in full."""

    rule: str
    before: Any
    after: Any


@dataclass
class WorkspaceMembershipChange:
    added: List[str] = field(default_factory=list)
    removed: List[str] = field(default_factory=list)


@dataclass
class SnapshotDiff:
    """Complete diff between a stored baseline and a freshly computed snapshot.

    Every list is sorted; whether anything changed is read off the lists
    themselves (see ``has_diff``), there is no separate flag.
    """

    introduced_rules: List[str] = field(default_factory=list)
    removed_rules: List[str] = field(default_factory=list)
    severity_changes: List[RuleSeverityChange] = field(default_factory=list)
    option_changes: List[RuleOptionChange] = field(default_factory=list)
    workspace_membership_changes: WorkspaceMembershipChange = field(
        default_factory=WorkspaceMembershipChange
    )

    def to_dict(self) -> dict:
        return {
            "introducedRules": list(self.introduced_rules),
            "removedRules": list(self.removed_rules),
            "severityChanges": [
                {"rule": c.rule, "before": c.before, "after": c.after} for c in self.severity_changes
            ],
            "optionChanges": [
                {"rule": c.rule, "before": c.before, "after": c.after} for c in self.option_changes
            ],
            "workspaceMembershipChanges": {
                "added": list(self.workspace_membership_changes.added),
                "removed": list(self.workspace_membership_changes.removed),
            },
        }
