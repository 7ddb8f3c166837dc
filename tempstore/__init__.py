from __future__ import annotations

from .aio import AsyncKeyValueStore, AsyncStore
from .errors import (
    CorruptSnapshotError,
    DuplicateNameError,
    InstanceNotFoundError,
    SnapshotIOError,
    StoreError,
)
from .persistence import inspect_snapshot
from .registry import DEFAULT_STORE_NAME, StoreRegistry
from .snapshot_codec import SnapshotHeader
from .store import ABSENT, Store

__all__ = [
    "ABSENT",
    "AsyncKeyValueStore",
    "AsyncStore",
    "CorruptSnapshotError",
    "DEFAULT_STORE_NAME",
    "DuplicateNameError",
    "InstanceNotFoundError",
    "SnapshotHeader",
    "SnapshotIOError",
    "Store",
    "StoreError",
    "StoreRegistry",
    "inspect_snapshot",
]
