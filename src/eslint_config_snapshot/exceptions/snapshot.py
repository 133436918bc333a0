"""Snapshot persistence exceptions."""

from pathlib import Path
from typing import Optional

from .base import SnapshotterError


class SnapshotFormatError(SnapshotterError):
    """Raised when a stored snapshot does not have the expected shape."""

    def __init__(self, reason: str, path: Optional[Path] = None):
        details = {"reason": reason}
        if path is not None:
            details["path"] = str(path)
        super().__init__("Malformed snapshot", details=details)
        self.path = path
        self.reason = reason
