"""Canonical JSON encoding of snapshots.

The on-disk record holds exactly ``formatVersion, groupId, workspaces, rules``
in that order, pretty-printed with two-space indentation and one trailing
newline. No timestamps, hashes, versions or absolute paths are written, so
the file only changes when the rule state changes.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional

from ..core import SEVERITY_RANK
from ..exceptions import SnapshotFormatError
from .models import SNAPSHOT_FORMAT_VERSION, Snapshot

_KEYS = ("formatVersion", "groupId", "workspaces", "rules")


def snapshot_to_dict(snapshot: Snapshot) -> Dict[str, Any]:
    return {
        "formatVersion": snapshot.format_version,
        "groupId": snapshot.group_id,
        "workspaces": list(snapshot.workspaces),
        "rules": dict(snapshot.rules),
    }


def encode_snapshot(snapshot: Snapshot) -> str:
    return json.dumps(snapshot_to_dict(snapshot), indent=2, ensure_ascii=False) + "\n"


def decode_snapshot(text: str, path: Optional[Path] = None) -> Snapshot:
    """Parse and validate a stored snapshot.

    Raises:
        SnapshotFormatError: If the text is not JSON or has the wrong shape
    """
    try:
        data = json.loads(text)
    except ValueError as e:
        raise SnapshotFormatError(f"invalid JSON: {e}", path) from e
    return snapshot_from_dict(data, path)


def snapshot_from_dict(data: Any, path: Optional[Path] = None) -> Snapshot:
    if not isinstance(data, dict):
        raise SnapshotFormatError("expected a JSON object", path)

    missing = [key for key in _KEYS if key not in data]
    if missing:
        raise SnapshotFormatError(f"missing keys: {', '.join(missing)}", path)
    extra = sorted(set(data) - set(_KEYS))
    if extra:
        raise SnapshotFormatError(f"unexpected keys: {', '.join(extra)}", path)

    version = data["formatVersion"]
    # bool is an int subclass and 1.0 == 1; only the integer itself is valid
    if type(version) is not int or version != SNAPSHOT_FORMAT_VERSION:
        raise SnapshotFormatError(f"unsupported formatVersion: {version!r}", path)
    if not isinstance(data["groupId"], str) or not data["groupId"]:
        raise SnapshotFormatError("groupId must be a non-empty string", path)

    workspaces = data["workspaces"]
    if not isinstance(workspaces, list) or not all(isinstance(entry, str) for entry in workspaces):
        raise SnapshotFormatError("workspaces must be a list of strings", path)

    rules = data["rules"]
    if not isinstance(rules, dict):
        raise SnapshotFormatError("rules must be an object", path)
    for rule_name, entry in rules.items():
        _validate_entry(rule_name, entry, path)

    return Snapshot(
        group_id=data["groupId"],
        workspaces=list(workspaces),
        rules=dict(rules),
        format_version=version,
    )


def _validate_entry(rule_name: str, entry: Any, path: Optional[Path]) -> None:
    if not isinstance(entry, list) or not entry:
        raise SnapshotFormatError(f"rule {rule_name} has no variants", path)
    variants = entry if isinstance(entry[0], list) else [entry]
    for variant in variants:
        if not isinstance(variant, list) or len(variant) not in (1, 2):
            raise SnapshotFormatError(f"rule {rule_name} has a malformed variant", path)
        if variant[0] not in SEVERITY_RANK:
            raise SnapshotFormatError(f"rule {rule_name} has unknown severity {variant[0]!r}", path)
