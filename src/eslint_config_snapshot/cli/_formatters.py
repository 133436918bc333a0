"""Plain-text renderings of diffs, snapshots and configuration.

Everything here returns strings; the commands decide where they go and
whether they get colour.
"""

import json
from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, Sequence

from ..diff import RuleOptionChange, SnapshotDiff
from ..snapshot import Snapshot, is_variant_list, primary_severity

_ADDED_HEADERS = ("introduced rules:", "workspaces added:")
_REMOVED_HEADERS = ("removed rules:", "workspaces removed:")
_CHANGED_HEADERS = ("severity changed:", "options changed:")


@dataclass
class ChangeSummary:
    introduced: int = 0
    removed: int = 0
    severity: int = 0
    options: int = 0
    workspace: int = 0


@dataclass
class SnapshotSummary:
    groups: int = 0
    rules: int = 0
    error: int = 0
    warn: int = 0
    off: int = 0


def _json(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def _list_section(lines: List[str], title: str, values: Sequence[str]) -> None:
    if not values:
        return
    lines.append(f"{title}:")
    lines.extend(f"  - {value}" for value in values)


def display_option_changes(diff: SnapshotDiff) -> List[RuleOptionChange]:
    """Option changes worth showing: not for removed rules or rules already listed as severity changes."""
    removed = set(diff.removed_rules)
    severity_changed = {change.rule for change in diff.severity_changes}
    return [
        change
        for change in diff.option_changes
        if change.rule not in removed and change.rule not in severity_changed
    ]


def format_diff(group_id: str, diff: SnapshotDiff) -> str:
    lines = [f"group: {group_id}"]
    _list_section(lines, "introduced rules", diff.introduced_rules)
    _list_section(lines, "removed rules", diff.removed_rules)

    if diff.severity_changes:
        lines.append("severity changed:")
        for change in diff.severity_changes:
            lines.append(f"  - {change.rule}: {change.before} -> {change.after}")

    option_changes = display_option_changes(diff)
    if option_changes:
        lines.append("options changed:")
        for change in option_changes:
            lines.append(f"  - {change.rule}: {_json(change.before)} -> {_json(change.after)}")

    _list_section(lines, "workspaces added", diff.workspace_membership_changes.added)
    _list_section(lines, "workspaces removed", diff.workspace_membership_changes.removed)
    return "\n".join(lines)


def diff_line_style(line: str) -> str:
    """Rich style name for one ``format_diff`` line ("" for no style)."""
    if line.startswith(_ADDED_HEADERS):
        return "green"
    if line.startswith(_REMOVED_HEADERS):
        return "red"
    if line.startswith(_CHANGED_HEADERS):
        return "yellow"
    return ""


def summarize_changes(diffs: Iterable[SnapshotDiff]) -> ChangeSummary:
    summary = ChangeSummary()
    for diff in diffs:
        summary.introduced += len(diff.introduced_rules)
        summary.removed += len(diff.removed_rules)
        summary.severity += len(diff.severity_changes)
        summary.options += len(display_option_changes(diff))
        summary.workspace += len(diff.workspace_membership_changes.added) + len(
            diff.workspace_membership_changes.removed
        )
    return summary


def summarize_snapshots(snapshots: Mapping[str, Snapshot]) -> SnapshotSummary:
    """Group count plus the severity mix of every rule entry, counted per group."""
    summary = SnapshotSummary(groups=len(snapshots))
    for snapshot in snapshots.values():
        for entry in snapshot.rules.values():
            summary.rules += 1
            severity = primary_severity(entry)
            setattr(summary, severity, getattr(summary, severity) + 1)
    return summary


def count_unique_workspaces(snapshots: Mapping[str, Snapshot]) -> int:
    return len({ws for snapshot in snapshots.values() for ws in snapshot.workspaces})


def format_short_print(snapshots: Iterable[Snapshot]) -> str:
    lines: List[str] = []
    for snapshot in sorted(snapshots, key=lambda s: s.group_id):
        counts = {"error": 0, "warn": 0, "off": 0}
        for entry in snapshot.rules.values():
            counts[primary_severity(entry)] += 1

        workspaces = ", ".join(snapshot.workspaces) if snapshot.workspaces else "(none)"
        lines.append(f"group: {snapshot.group_id}")
        lines.append(f"workspaces ({len(snapshot.workspaces)}): {workspaces}")
        lines.append(
            f"rules ({len(snapshot.rules)}): error {counts['error']}, warn {counts['warn']}, off {counts['off']}"
        )

        for rule_name in sorted(snapshot.rules):
            entry = snapshot.rules[rule_name]
            if is_variant_list(entry):
                lines.append(f"{rule_name}: {_json(entry)}")
            elif len(entry) > 1:
                lines.append(f"{rule_name}: {entry[0]} {_json(entry[1])}")
            else:
                lines.append(f"{rule_name}: {entry[0]}")

    return "\n".join(lines) + "\n"


def format_short_config(payload: Mapping[str, Any]) -> str:
    """One-screen view of the payload built by the ``config`` command."""
    grouping = payload["grouping"]
    workspaces = payload["workspaces"]
    lines = [
        f"source: {payload['source']}",
        f"workspaces ({len(workspaces)}): {', '.join(workspaces) or '(none)'}",
        f"grouping mode: {grouping['mode']} (allow empty: {str(grouping['allowEmptyGroups']).lower()})",
    ]
    for group in grouping["groups"]:
        members = group["workspaces"]
        lines.append(f"group {group['name']} ({len(members)}): {', '.join(members) or '(none)'}")
    lines.append(f"workspaceInput: {_json(payload['workspaceInput'])}")
    lines.append(f"sampling: {_json(payload['sampling'])}")
    lines.append(f"conflict policy: {payload['aggregation']['conflict_policy']}")
    return "\n".join(lines) + "\n"


def format_skipped_hint(workspaces: Sequence[str]) -> str:
    """Declaration entries that take skipped workspaces out of discovery."""
    negations = ", ".join(f'"!{workspace}"' for workspace in workspaces)
    return (
        "Tip: if these workspaces are intentionally out of scope, add these entries to the "
        f"workspaces list in package.json or pnpm-workspace.yaml: {negations}"
    )
