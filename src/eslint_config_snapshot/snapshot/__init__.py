"""Snapshot layer: aggregation, canonical encoding and the baseline store."""

from .aggregate import ConflictPolicy, aggregate_rules, build_snapshot, compare_variants, sort_variants
from .codec import decode_snapshot, encode_snapshot, snapshot_from_dict, snapshot_to_dict
from .models import (
    SNAPSHOT_FORMAT_VERSION,
    AggregatedRuleEntry,
    Snapshot,
    empty_snapshot,
    entry_variants,
    is_variant_list,
    primary_severity,
)
from .store import (
    load_stored_snapshots,
    read_snapshot_file,
    snapshot_path,
    write_snapshot_file,
    write_snapshots,
)

__all__ = [
    "SNAPSHOT_FORMAT_VERSION",
    "AggregatedRuleEntry",
    "ConflictPolicy",
    "Snapshot",
    "aggregate_rules",
    "build_snapshot",
    "compare_variants",
    "decode_snapshot",
    "empty_snapshot",
    "encode_snapshot",
    "entry_variants",
    "is_variant_list",
    "load_stored_snapshots",
    "primary_severity",
    "read_snapshot_file",
    "snapshot_from_dict",
    "snapshot_path",
    "snapshot_to_dict",
    "sort_variants",
    "write_snapshot_file",
    "write_snapshots",
]
