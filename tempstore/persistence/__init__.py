from __future__ import annotations

from .disk_store import DiskSnapshotFile, inspect_snapshot
from .interfaces import SnapshotFile
from .locks import SNAPSHOT_PATH_LOCKS, SnapshotPathLocks
from .paths import resolve_snapshot_path

__all__ = [
    "DiskSnapshotFile",
    "inspect_snapshot",
    "SnapshotFile",
    "SNAPSHOT_PATH_LOCKS",
    "SnapshotPathLocks",
    "resolve_snapshot_path",
]
