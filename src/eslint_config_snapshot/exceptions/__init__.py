"""Exception hierarchy for eslint-config-snapshot."""

from .base import SnapshotterError
from .config import ConfigFileError, ConfigurationError, InvalidConfigError
from .extraction import (
    InvalidRuleConfigError,
    NoSnapshotsError,
    RuleQueryError,
    RuleQueryFatalError,
    RuleQueryRecoverableError,
    WorkspaceExtractionError,
)
from .grouping import EmptyGroupsError, GroupingError, UnmatchedWorkspacesError
from .snapshot import SnapshotFormatError

__all__ = [
    "SnapshotterError",
    "ConfigurationError",
    "ConfigFileError",
    "InvalidConfigError",
    "GroupingError",
    "UnmatchedWorkspacesError",
    "EmptyGroupsError",
    "RuleQueryError",
    "RuleQueryRecoverableError",
    "RuleQueryFatalError",
    "InvalidRuleConfigError",
    "WorkspaceExtractionError",
    "NoSnapshotsError",
    "SnapshotFormatError",
]
