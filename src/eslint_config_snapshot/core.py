"""Value helpers shared by every stage: path normalization, canonical JSON, severities.

Everything here is a pure function. Determinism of the snapshot output rests
on these helpers: sorted unique path lists, recursively key-sorted option
payloads, and exactly three severity strings.
"""

from __future__ import annotations

import json
import re
from typing import Any, Iterable, List

from .exceptions import InvalidRuleConfigError

SEVERITIES = ("off", "warn", "error")
SEVERITY_RANK = {"off": 0, "warn": 1, "error": 2}

_NUMERIC_SEVERITIES = {0: "off", 1: "warn", 2: "error"}
_REPEATED_SLASHES = re.compile(r"/+")


def normalize_path(value: str) -> str:
    """Forward slashes, no repeated or trailing slash; empty means the root ``.``."""
    with_slashes = value.replace("\\", "/")
    collapsed = _REPEATED_SLASHES.sub("/", with_slashes)
    if collapsed.endswith("/"):
        collapsed = collapsed[:-1]
    return collapsed or "."


def sort_unique(values: Iterable[str]) -> List[str]:
    """Normalize, deduplicate and sort path-like strings."""
    return sorted({normalize_path(value) for value in values})


def canonicalize_json(value: Any) -> Any:
    """Rebuild ``value`` with every mapping's keys sorted, recursively."""
    if isinstance(value, dict):
        return {key: canonicalize_json(value[key]) for key in sorted(value)}
    if isinstance(value, (list, tuple)):
        return [canonicalize_json(entry) for entry in value]
    return value


def canonical_json_text(value: Any) -> str:
    """Compact JSON text of the canonical form; the identity of a variant."""
    return json.dumps(canonicalize_json(value), separators=(",", ":"), ensure_ascii=False)


def normalize_severity(value: Any) -> str:
    # bool is an int subclass; True must not read as "warn"
    if isinstance(value, bool):
        raise InvalidRuleConfigError(f"Unsupported severity: {value!r}")
    if isinstance(value, int) and value in _NUMERIC_SEVERITIES:
        return _NUMERIC_SEVERITIES[value]
    if isinstance(value, str) and value in SEVERITY_RANK:
        return value
    raise InvalidRuleConfigError(f"Unsupported severity: {value!r}")


def compare_severity(a: str, b: str) -> int:
    return SEVERITY_RANK[a] - SEVERITY_RANK[b]
