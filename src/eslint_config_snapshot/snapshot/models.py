"""Data model for group snapshots: the persisted record of a group's rules."""

from dataclasses import dataclass, field
from typing import Dict, List, Union

from ..extract.normalize import RuleVariant

SNAPSHOT_FORMAT_VERSION = 1

# A single variant, or a sorted list of distinct variants
AggregatedRuleEntry = Union[RuleVariant, List[RuleVariant]]


@dataclass(frozen=True)
class Snapshot:
    """Canonical rule state of one group.

    ``workspaces`` is sorted and unique, ``rules`` is keyed in ascending rule
    name order. Two snapshots are the same baseline iff their encoded JSON is
    byte-identical; the codec guarantees that value equality implies it.
    """

    group_id: str
    workspaces: List[str] = field(default_factory=list)
    rules: Dict[str, AggregatedRuleEntry] = field(default_factory=dict)
    format_version: int = SNAPSHOT_FORMAT_VERSION


def empty_snapshot(group_id: str) -> Snapshot:
    return Snapshot(group_id=group_id)


def is_variant_list(entry: AggregatedRuleEntry) -> bool:
    """True for the multi-variant form ``[[sev, ...], [sev, ...]]``."""
    return bool(entry) and isinstance(entry[0], list)


def entry_variants(entry: AggregatedRuleEntry) -> List[RuleVariant]:
    """Every variant of an entry, whatever its form."""
    if is_variant_list(entry):
        return list(entry)
    return [entry]


def primary_severity(entry: AggregatedRuleEntry) -> str:
    """The strongest severity among an entry's variants."""
    severities = {variant[0] for variant in entry_variants(entry)}
    for severity in ("error", "warn"):
        if severity in severities:
            return severity
    return "off"
