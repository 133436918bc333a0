"""Grouping exceptions: workspaces without a group and groups without workspaces.

Both errors carry the complete list of offenders so a single run reports
everything that needs fixing.
"""

from typing import List, Sequence

from .base import SnapshotterError


class GroupingError(SnapshotterError):
    """Base class for workspace-to-group assignment errors."""

    pass


class UnmatchedWorkspacesError(GroupingError):
    """Raised when one or more workspaces match no group definition."""

    def __init__(self, workspaces: Sequence[str]):
        self.workspaces: List[str] = list(workspaces)
        super().__init__(f"Unmatched workspaces: {', '.join(self.workspaces)}")


class EmptyGroupsError(GroupingError):
    """Raised when groups received no workspace and empty groups are not allowed."""

    def __init__(self, groups: Sequence[str]):
        self.groups: List[str] = list(groups)
        super().__init__(f"Empty groups are not allowed: {', '.join(self.groups)}")
