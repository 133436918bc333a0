"""Diff engine: classifies every change between two group snapshots.

Per rule name present on either side:
  1. Only in ``after`` is introduced, only in ``before`` is removed.
  2. Otherwise the severity summaries (distinct severities, ``error|warn|off``
     order) are compared; a difference is one severity change.
  3. Same summary but a different variant set is an option change, except
     when both sides are entirely ``off``: dropping the options payload reads
     as removed and gaining one reads as introduced.
"""

from typing import List

from ..core import SEVERITIES, canonical_json_text, sort_unique
from ..snapshot.models import AggregatedRuleEntry, Snapshot, entry_variants
from .models import RuleOptionChange, RuleSeverityChange, SnapshotDiff, WorkspaceMembershipChange


def severity_summary(entry: AggregatedRuleEntry) -> str:
    present = {variant[0] for variant in entry_variants(entry)}
    return "|".join(severity for severity in reversed(SEVERITIES) if severity in present)


def _variant_keys(entry: AggregatedRuleEntry) -> List[str]:
    return sorted(canonical_json_text(variant) for variant in entry_variants(entry))


def _has_options(entry: AggregatedRuleEntry) -> bool:
    return any(len(variant) > 1 for variant in entry_variants(entry))


def _classify_all_off(before: AggregatedRuleEntry, after: AggregatedRuleEntry) -> str:
    """Return "removed", "introduced" or "options" for a rule disabled on both sides."""
    before_options = _has_options(before)
    after_options = _has_options(after)
    if before_options and not after_options:
        return "removed"
    if after_options and not before_options:
        return "introduced"

    before_count = len(entry_variants(before))
    after_count = len(entry_variants(after))
    if after_count < before_count:
        return "removed"
    if after_count > before_count:
        return "introduced"
    return "options"


def diff_snapshots(before: Snapshot, after: Snapshot) -> SnapshotDiff:
    """Compare a baseline snapshot with a current one.

    Args:
        before: Stored baseline
        after: Freshly computed snapshot

    Returns:
        SnapshotDiff with every list sorted
    """
    before_rules = before.rules
    after_rules = after.rules

    introduced = [name for name in after_rules if name not in before_rules]
    removed = [name for name in before_rules if name not in after_rules]
    severity_changes: List[RuleSeverityChange] = []
    option_changes: List[RuleOptionChange] = []

    for name in sorted(set(before_rules) & set(after_rules)):
        old_entry = before_rules[name]
        new_entry = after_rules[name]

        old_summary = severity_summary(old_entry)
        new_summary = severity_summary(new_entry)
        if old_summary != new_summary:
            severity_changes.append(RuleSeverityChange(rule=name, before=old_summary, after=new_summary))
            continue

        if _variant_keys(old_entry) == _variant_keys(new_entry):
            continue

        if old_summary == "off":
            outcome = _classify_all_off(old_entry, new_entry)
            if outcome == "removed":
                removed.append(name)
                continue
            if outcome == "introduced":
                introduced.append(name)
                continue

        option_changes.append(RuleOptionChange(rule=name, before=old_entry, after=new_entry))

    before_workspaces = sort_unique(before.workspaces)
    after_workspaces = sort_unique(after.workspaces)

    return SnapshotDiff(
        introduced_rules=sorted(set(introduced)),
        removed_rules=sorted(set(removed)),
        severity_changes=severity_changes,
        option_changes=option_changes,
        workspace_membership_changes=WorkspaceMembershipChange(
            added=[ws for ws in after_workspaces if ws not in before_workspaces],
            removed=[ws for ws in before_workspaces if ws not in after_workspaces],
        ),
    )


def has_diff(diff: SnapshotDiff) -> bool:
    return bool(
        diff.introduced_rules
        or diff.removed_rules
        or diff.severity_changes
        or diff.option_changes
        or diff.workspace_membership_changes.added
        or diff.workspace_membership_changes.removed
    )
