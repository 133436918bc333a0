"""Merge rule observations of a group into one rule table.

Every distinct canonical variant seen for a rule is kept. One variant is
stored as-is; several are stored as a list ordered by severity (error, warn,
off) and then by canonical JSON text. A rule configured differently across
sampled files is itself worth reviewing, so ambiguity is surfaced as data
instead of being resolved silently.
"""

from __future__ import annotations

from enum import Enum
from functools import cmp_to_key
from typing import Dict, Iterable, List, Mapping, Sequence

from ..core import SEVERITY_RANK, canonical_json_text, canonicalize_json, sort_unique
from ..extract.normalize import RuleVariant
from ..logging_config import get_logger
from .models import AggregatedRuleEntry, Snapshot, entry_variants

logger = get_logger(__name__)


class ConflictPolicy(Enum):
    """How distinct variants of one rule are reduced.

    SURFACE_ALL keeps every distinct variant. HIGHEST_SEVERITY keeps only the
    variants carrying the strongest observed severity.
    """

    SURFACE_ALL = "surface-all"
    HIGHEST_SEVERITY = "highest-severity"


def compare_variants(a: RuleVariant, b: RuleVariant) -> int:
    severity_order = SEVERITY_RANK[b[0]] - SEVERITY_RANK[a[0]]
    if severity_order != 0:
        return severity_order
    a_text = canonical_json_text(a)
    b_text = canonical_json_text(b)
    return (a_text > b_text) - (a_text < b_text)


def sort_variants(variants: Iterable[RuleVariant]) -> List[RuleVariant]:
    return sorted(variants, key=cmp_to_key(compare_variants))


def aggregate_rules(
    observations: Iterable[Mapping[str, RuleVariant]],
    policy: ConflictPolicy = ConflictPolicy.SURFACE_ALL,
) -> Dict[str, AggregatedRuleEntry]:
    """Aggregate observations into a rule-name-sorted mapping.

    Args:
        observations: One ``{rule: variant}`` mapping per queried file
        policy: Conflict policy for rules with several distinct variants

    Returns:
        ``{rule: variant}`` or ``{rule: [variant, ...]}``, keys ascending.
    """
    variants_by_rule: Dict[str, Dict[str, RuleVariant]] = {}
    observation_count = 0

    for observation in observations:
        observation_count += 1
        for rule_name, variant in observation.items():
            canonical = canonicalize_json(variant)
            variants_by_rule.setdefault(rule_name, {})[canonical_json_text(canonical)] = canonical

    aggregated: Dict[str, AggregatedRuleEntry] = {}
    for rule_name in sorted(variants_by_rule):
        variants = sort_variants(variants_by_rule[rule_name].values())
        if policy is ConflictPolicy.HIGHEST_SEVERITY:
            strongest = variants[0][0]
            variants = [variant for variant in variants if variant[0] == strongest]
        aggregated[rule_name] = variants[0] if len(variants) == 1 else variants

    logger.debug("aggregated observations=%d rules=%d", observation_count, len(aggregated))
    return aggregated


def build_snapshot(
    group_id: str,
    workspaces: Sequence[str],
    rules: Mapping[str, AggregatedRuleEntry],
) -> Snapshot:
    """Assemble a snapshot in canonical form: sorted workspaces, sorted rules."""
    canonical_rules: Dict[str, AggregatedRuleEntry] = {}
    for rule_name in sorted(rules):
        variants = sort_variants(canonicalize_json(variant) for variant in entry_variants(rules[rule_name]))
        canonical_rules[rule_name] = variants[0] if len(variants) == 1 else variants

    return Snapshot(group_id=group_id, workspaces=sort_unique(workspaces), rules=canonical_rules)
