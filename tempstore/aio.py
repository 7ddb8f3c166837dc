from __future__ import annotations

import asyncio
from typing import Any, Protocol

from .persistence.paths import SnapshotName
from .store import Store


class AsyncKeyValueStore(Protocol):
    @property
    def name(self) -> str: ...

    def set(self, key: Any, value: Any) -> None: ...
    async def get(self, key: Any) -> Any: ...

    async def save(self, filename: SnapshotName) -> None: ...
    async def load(self, filename: SnapshotName) -> None: ...


class AsyncStore(AsyncKeyValueStore):
    """
    Async wrapper around a Store.
    Uses asyncio.to_thread so waiting for the store's turn never blocks the event loop.

    ``set`` stays synchronous: it only enqueues, so there is nothing to await.
    """

    def __init__(self, store: Store) -> None:
        self._store = store

    @property
    def name(self) -> str:
        return self._store.name

    @property
    def store(self) -> Store:
        return self._store

    def set(self, key: Any, value: Any) -> None:
        self._store.set(key, value)

    async def get(self, key: Any) -> Any:
        return await asyncio.to_thread(self._store.get, key)

    async def save(self, filename: SnapshotName) -> None:
        await asyncio.to_thread(self._store.save, filename)

    async def load(self, filename: SnapshotName) -> None:
        await asyncio.to_thread(self._store.load, filename)
