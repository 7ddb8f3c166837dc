"""
Single-table key-value store driven by one worker thread.

Every operation is put on the instance's inbox and applied by the worker in
arrival order, so no two operations on the same table ever overlap. ``set`` does
not wait for its turn; ``get``, ``save`` and ``load`` block on a future that the
worker resolves once the operation has run.
"""

from __future__ import annotations

import copy
import logging
import queue
import threading
from concurrent.futures import Future
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable

from .errors import InstanceNotFoundError
from .persistence import DiskSnapshotFile, SnapshotFile, resolve_snapshot_path
from .persistence.paths import SnapshotName
from .snapshot_codec import decode_table, encode_table

logger = logging.getLogger(__name__)


class _AbsentType:
    """
    Result of ``get`` for a key with no value. Distinct from None and every other storable value.

    Storing ABSENT itself as a value is allowed, but such a key then reads back
    exactly like one that was never set.
    """

    _instance: _AbsentType | None = None

    def __new__(cls) -> _AbsentType:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False

    def __copy__(self) -> _AbsentType:
        return self

    def __deepcopy__(self, memo: dict[int, Any]) -> _AbsentType:
        return self


ABSENT = _AbsentType()

SnapshotFileFactory = Callable[[Path], SnapshotFile]


@dataclass(frozen=True)
class _Request:
    handler: Callable[..., Any]
    args: tuple[Any, ...]
    reply: Future[Any] | None


class Store:
    def __init__(
        self,
        name: str,
        *,
        snapshot_dir: Path | None = None,
        copy_values: bool = True,
        file_factory: SnapshotFileFactory = DiskSnapshotFile,
    ):
        self._name = name
        self._snapshot_dir = snapshot_dir
        self._copy_values = copy_values
        self._file_factory = file_factory

        # Only the worker thread touches the table.
        self._table: dict[Any, Any] = {}

        self._inbox: queue.SimpleQueue[_Request | None] = queue.SimpleQueue()
        self._state_lock = threading.Lock()
        self._running = True
        self._worker = threading.Thread(target=self._run, name=f"tempstore-{name}", daemon=True)
        self._worker.start()
        logger.info("STORE START: %s", name)

    def __repr__(self) -> str:
        state = "running" if self.is_running else "terminated"
        return f"<Store {self._name!r} {state}>"

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_running(self) -> bool:
        with self._state_lock:
            return self._running

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def set(self, key: Any, value: Any) -> None:
        """
        Queue ``key -> value`` and return without waiting for it to be applied.

        Failures while applying are logged, never raised. A set against a
        terminated instance is dropped. Values that cannot be deep-copied are
        stored by reference.
        """
        # unhashable keys fail here, not on the worker
        hash(key)
        request = _Request(self._apply_set, (key, self._private_copy(value, op="SET")), None)
        with self._state_lock:
            if not self._running:
                logger.debug("STORE SET: %s is terminated, dropping write for %r", self._name, key)
                return
            self._inbox.put(request)

    def get(self, key: Any) -> Any:
        """
        Return the value for ``key`` once every earlier operation has been applied, or ABSENT.
        """
        hash(key)
        return self._call(self._apply_get, key)

    def save(self, filename: SnapshotName) -> None:
        """
        Write the whole table to ``filename``, replacing any file already there.

        Raises SnapshotIOError. The table is never modified.
        """
        path = resolve_snapshot_path(filename, self._snapshot_dir)
        self._call(self._apply_save, path)

    def load(self, filename: SnapshotName) -> None:
        """
        Replace the whole table with the snapshot stored at ``filename``.

        Raises SnapshotIOError, or CorruptSnapshotError for undecodable bytes.
        On failure the current table stays exactly as it was.

        Snapshots are unpickled, so only load files from a trusted source: the
        checksum catches corruption, not tampering.
        """
        path = resolve_snapshot_path(filename, self._snapshot_dir)
        self._call(self._apply_load, path)

    def terminate(self, timeout: float | None = None) -> None:
        """
        Stop accepting operations and wait for the worker to drain what was already queued.
        """
        with self._state_lock:
            if self._running:
                self._running = False
                self._inbox.put(None)
                logger.info("STORE TERMINATE: %s", self._name)
        if threading.current_thread() is not self._worker:
            self._worker.join(timeout)

    # ------------------------------------------------------------------
    # Queue plumbing
    # ------------------------------------------------------------------

    def _call(self, handler: Callable[..., Any], *args: Any) -> Any:
        reply: Future[Any] = Future()
        with self._state_lock:
            if not self._running:
                raise InstanceNotFoundError(f"store '{self._name}' has terminated")
            self._inbox.put(_Request(handler, args, reply))
        return reply.result()

    def _run(self) -> None:
        while True:
            request = self._inbox.get()
            if request is None:
                break
            try:
                result = request.handler(*request.args)
            except Exception as e:
                if request.reply is None:
                    logger.warning("STORE %s: dropped failed write: %r", self._name, e)
                else:
                    request.reply.set_exception(e)
                continue
            if request.reply is not None:
                request.reply.set_result(result)
        logger.debug("STORE STOP: %s worker exited", self._name)

    def _private_copy(self, value: Any, *, op: str) -> Any:
        if not self._copy_values:
            return value
        try:
            return copy.deepcopy(value)
        except Exception as e:
            logger.warning(
                "STORE %s: %s cannot copy %s value, keeping a reference: %r",
                op,
                self._name,
                type(value).__name__,
                e,
            )
            return value

    # ------------------------------------------------------------------
    # Handlers, run on the worker thread only
    # ------------------------------------------------------------------

    def _apply_set(self, key: Any, value: Any) -> None:
        self._table[key] = value

    def _apply_get(self, key: Any) -> Any:
        value = self._table.get(key, ABSENT)
        if value is ABSENT:
            return ABSENT
        return self._private_copy(value, op="GET")

    def _apply_save(self, path: Path) -> None:
        try:
            data = encode_table(self._table, store_name=self._name)
            self._file_factory(path).write_bytes(data)
        except Exception as e:
            logger.warning("STORE SAVE: %s failed to write %s: %r", self._name, path, e)
            raise
        logger.info("STORE SAVE: %s wrote %d entries to %s", self._name, len(self._table), path)

    def _apply_load(self, path: Path) -> None:
        try:
            table = decode_table(self._file_factory(path).read_bytes())
        except Exception as e:
            logger.warning("STORE LOAD: %s failed to load %s: %r", self._name, path, e)
            raise
        self._table = table
        logger.info("STORE LOAD: %s replaced table with %d entries from %s", self._name, len(table), path)
