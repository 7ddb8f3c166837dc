from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from tempstore import ABSENT, AsyncStore, CorruptSnapshotError


def test_async_store_basic_flow(store, snapshot_path: Path):
    async def _run():
        astore = AsyncStore(store)
        assert astore.name == store.name

        assert await astore.get(123) is ABSENT
        astore.set(123, 456)
        assert await astore.get(123) == 456

        await astore.save(snapshot_path)
        astore.set(123, "changed")
        await astore.load(snapshot_path)
        assert await astore.get(123) == 456

    asyncio.run(_run())


def test_async_store_concurrent_tasks_see_ordered_writes(store):
    async def _run():
        astore = AsyncStore(store)

        async def _task(tid: int) -> object:
            for i in range(50):
                astore.set(("task", tid), i)
            return await astore.get(("task", tid))

        results = await asyncio.gather(*(_task(tid) for tid in range(10)))
        assert results == [49] * 10

    asyncio.run(_run())


def test_async_store_failed_load_propagates(store, snapshot_path: Path):
    snapshot_path.write_bytes(b"corrupt")

    async def _run():
        astore = AsyncStore(store)
        astore.set("k", "v")
        with pytest.raises(CorruptSnapshotError):
            await astore.load(snapshot_path)
        assert await astore.get("k") == "v"

    asyncio.run(_run())
