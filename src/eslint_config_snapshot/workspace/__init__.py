"""Workspace layer: discovery, glob matching and group assignment."""

from .discovery import WorkspaceDiscovery, discover_workspaces
from .grouping import (
    GroupAssignment,
    assign_groups_by_match,
    assign_standalone,
    matches_workspace,
    resolve_groups,
)

__all__ = [
    "GroupAssignment",
    "WorkspaceDiscovery",
    "assign_groups_by_match",
    "assign_standalone",
    "discover_workspaces",
    "matches_workspace",
    "resolve_groups",
]
