"""Baseline store: one ``<groupId>.json`` file per group under a snapshot directory.

Group ids may contain ``/`` (standalone mode names groups after workspace
paths), so writes create parent directories and reads walk the tree.
"""

from pathlib import Path
from typing import Dict, Mapping

from ..exceptions import SnapshotFormatError
from ..logging_config import get_logger
from .codec import decode_snapshot, encode_snapshot
from .models import Snapshot

logger = get_logger(__name__)


def snapshot_path(snapshot_dir: Path, group_id: str) -> Path:
    return snapshot_dir / f"{group_id}.json"


def write_snapshot_file(snapshot_dir: Path, snapshot: Snapshot) -> Path:
    file_path = snapshot_path(snapshot_dir, snapshot.group_id)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    file_path.write_text(encode_snapshot(snapshot), encoding="utf-8")
    return file_path


def read_snapshot_file(file_path: Path) -> Snapshot:
    try:
        text = file_path.read_text(encoding="utf-8")
    except OSError as e:
        raise SnapshotFormatError(f"unreadable: {e}", file_path) from e
    return decode_snapshot(text, file_path)


def load_stored_snapshots(snapshot_dir: Path) -> Dict[str, Snapshot]:
    """Every stored snapshot keyed by group id; empty when the directory is missing."""
    if not snapshot_dir.is_dir():
        return {}

    snapshots: Dict[str, Snapshot] = {}
    for file_path in sorted(snapshot_dir.rglob("*.json"), key=lambda p: p.as_posix()):
        snapshot = read_snapshot_file(file_path)
        snapshots[snapshot.group_id] = snapshot

    logger.debug("loaded %d stored snapshot(s) from %s", len(snapshots), snapshot_dir)
    return snapshots


def write_snapshots(snapshot_dir: Path, snapshots: Mapping[str, Snapshot], prune: bool = True) -> None:
    """Write every snapshot; with ``prune``, delete baselines of groups no longer produced."""
    snapshot_dir.mkdir(parents=True, exist_ok=True)
    written = set()
    for group_id in sorted(snapshots):
        written.add(write_snapshot_file(snapshot_dir, snapshots[group_id]).resolve())

    if not prune:
        return
    for file_path in sorted(snapshot_dir.rglob("*.json")):
        if file_path.resolve() not in written:
            logger.info("Removing stale baseline %s", file_path)
            file_path.unlink()
