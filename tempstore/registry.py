from __future__ import annotations

import logging
import threading
from pathlib import Path
from types import TracebackType
from typing import Any

from .errors import DuplicateNameError, InstanceNotFoundError
from .persistence.paths import SnapshotName
from .store import Store

logger = logging.getLogger(__name__)

DEFAULT_STORE_NAME = "tempstore"


class StoreRegistry:
    """
    Owns every Store instance in the process, addressed by name.

    The composition root builds one registry and hands it to whoever needs a
    store. Passing ``name=None`` to any lookup addresses the default instance.
    """

    def __init__(
        self,
        *,
        default_name: str | None = DEFAULT_STORE_NAME,
        snapshot_dir: Path | None = None,
        copy_values: bool = True,
    ) -> None:
        self._guard = threading.Lock()
        self._stores: dict[str, Store] = {}
        self._default_name = default_name
        self._snapshot_dir = snapshot_dir
        self._copy_values = copy_values
        if default_name is not None:
            self.create(default_name)

    def __enter__(self) -> StoreRegistry:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def __contains__(self, name: object) -> bool:
        with self._guard:
            return name in self._stores

    @property
    def default_name(self) -> str | None:
        return self._default_name

    def create(self, name: str) -> Store:
        _check_name(name)
        with self._guard:
            if name in self._stores:
                raise DuplicateNameError(f"store '{name}' is already registered")
            store = Store(name, snapshot_dir=self._snapshot_dir, copy_values=self._copy_values)
            self._stores[name] = store
        return store

    def lookup(self, name: str | None = None) -> Store:
        target = self._default_name if name is None else name
        with self._guard:
            store = self._stores.get(target) if target is not None else None
        if store is None:
            raise InstanceNotFoundError(f"no store registered under {target!r}")
        return store

    def names(self) -> list[str]:
        with self._guard:
            return sorted(self._stores)

    def terminate(self, name: str, timeout: float | None = None) -> None:
        with self._guard:
            store = self._stores.pop(name, None)
        if store is None:
            raise InstanceNotFoundError(f"no store registered under {name!r}")
        store.terminate(timeout)

    def close(self, timeout: float | None = None) -> None:
        with self._guard:
            stores = list(self._stores.values())
            self._stores.clear()
        for store in stores:
            store.terminate(timeout)
        logger.debug("REGISTRY CLOSE: terminated %d store(s)", len(stores))

    # Name-addressed shortcuts; every one resolves the name synchronously first.

    def set(self, key: Any, value: Any, *, name: str | None = None) -> None:
        self.lookup(name).set(key, value)

    def get(self, key: Any, *, name: str | None = None) -> Any:
        return self.lookup(name).get(key)

    def save(self, filename: SnapshotName, *, name: str | None = None) -> None:
        self.lookup(name).save(filename)

    def load(self, filename: SnapshotName, *, name: str | None = None) -> None:
        self.lookup(name).load(filename)


def _check_name(name: Any) -> None:
    if not isinstance(name, str):
        raise TypeError(f"store name must be a str, got {type(name).__name__}")
    if not name.strip():
        raise ValueError("store name must not be empty")
