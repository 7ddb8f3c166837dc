from __future__ import annotations

import contextlib
import os
import threading
from pathlib import Path
from typing import Iterator


class SnapshotPathLocks:
    """
    Hands out one lock per normalized snapshot path so that two store instances
    saving or loading the same file inside this process take turns.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        # Never pruned: grows by one lock per distinct path ever saved or loaded.
        self._locks: dict[str, threading.Lock] = {}

    def lock_for(self, path: Path) -> threading.Lock:
        key = os.path.normcase(str(path.resolve()))
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._locks[key] = lock
            return lock

    @contextlib.contextmanager
    def holding(self, path: Path) -> Iterator[None]:
        with self.lock_for(path):
            yield


SNAPSHOT_PATH_LOCKS = SnapshotPathLocks()
