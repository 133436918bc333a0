"""Workspace-to-group assignment.

Workspaces are scanned in sorted order and each one is offered to the group
definitions in configuration order. The first group whose positive patterns
match (and whose ``!`` patterns do not) takes the workspace; later groups
never see it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Sequence

from ..config import GroupDefinition, GroupingConfig
from ..core import sort_unique
from ..exceptions import EmptyGroupsError, UnmatchedWorkspacesError
from ..logging_config import get_logger
from .patterns import matches_any

logger = get_logger(__name__)


@dataclass
class GroupAssignment:
    """Resolved membership of one group."""

    name: str
    workspaces: List[str] = field(default_factory=list)


def matches_workspace(workspace: str, patterns: Sequence[str]) -> bool:
    positives = [pattern for pattern in patterns if not pattern.startswith("!")]
    negatives = [pattern[1:] for pattern in patterns if pattern.startswith("!")]

    if not matches_any(workspace, positives):
        return False
    return not matches_any(workspace, negatives)


def assign_groups_by_match(
    workspaces: Sequence[str],
    groups: Sequence[GroupDefinition],
) -> List[GroupAssignment]:
    """Assign every workspace to the first matching group.

    Returns:
        One assignment per group definition, in definition order.

    Raises:
        UnmatchedWorkspacesError: Listing every workspace no group matched.
    """
    assignments: Dict[str, List[str]] = {group.name: [] for group in groups}
    unmatched: List[str] = []

    for workspace in sort_unique(workspaces):
        for group in groups:
            if matches_workspace(workspace, group.match):
                assignments[group.name].append(workspace)
                break
        else:
            unmatched.append(workspace)

    if unmatched:
        raise UnmatchedWorkspacesError(unmatched)

    return [GroupAssignment(name=group.name, workspaces=assignments[group.name]) for group in groups]


def assign_standalone(workspaces: Sequence[str]) -> List[GroupAssignment]:
    """Every workspace becomes its own group, named after its path."""
    return [GroupAssignment(name=workspace, workspaces=[workspace]) for workspace in sort_unique(workspaces)]


def resolve_groups(workspaces: Sequence[str], grouping: GroupingConfig) -> List[GroupAssignment]:
    """Apply the configured grouping mode and the empty-group policy."""
    if grouping.mode == "standalone":
        assignments = assign_standalone(workspaces)
    else:
        assignments = assign_groups_by_match(workspaces, grouping.effective_groups)

    empty = [group.name for group in assignments if not group.workspaces]
    if empty:
        if not grouping.allow_empty_groups:
            raise EmptyGroupsError(empty)
        logger.debug("empty groups permitted: %s", ", ".join(empty))

    for group in assignments:
        logger.debug("group=%s workspaces=%s", group.name, group.workspaces)
    return assignments
