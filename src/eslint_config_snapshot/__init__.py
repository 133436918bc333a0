"""
eslint-config-snapshot - effective ESLint rule snapshots for multi-package repositories

Groups workspaces, samples representative files, asks each workspace's own
ESLint which rules apply, aggregates the answers per group into a canonical
JSON snapshot, and reports drift against the stored baseline.
"""

__version__ = "0.1.0"

from .config import SnapshotConfig, load_config
from .diff import SnapshotDiff, diff_snapshots, has_diff
from .pipeline import SnapshotRun, compare_snapshot_maps, compute_current_snapshots
from .snapshot import ConflictPolicy, Snapshot, aggregate_rules, decode_snapshot, encode_snapshot

__all__ = [
    "compute_current_snapshots",  # Main entry point
    "compare_snapshot_maps",
    "load_config",
    "SnapshotConfig",
    "SnapshotRun",
    "Snapshot",
    "SnapshotDiff",
    "ConflictPolicy",
    "aggregate_rules",
    "diff_snapshots",
    "has_diff",
    "encode_snapshot",
    "decode_snapshot",
]
