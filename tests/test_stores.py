from __future__ import annotations

import asyncio
import json

import pytest

from kvfacade.disk_store import DiskCollection
from kvfacade.errors import StoreError
from kvfacade.stores import AsyncDiskDocumentStore


def test_store_upsert_update_delete_flow(store):
    async def _run():
        # upsert on a missing key inserts and reports no previous document
        prev = await store.find_one_and_update({"key": "a"}, {"$set": {"value": [1, 2, 1, 3]}}, upsert=True)
        assert prev is None
        rec = await store.find_one({"key": "a"})
        assert rec is not None
        assert rec.id == 1
        assert rec.value == [1, 2, 1, 3]

        # without upsert nothing is created
        assert await store.find_one_and_update({"key": "b"}, {"$set": {"value": 1}}) is None
        assert await store.find_one({"key": "b"}) is None

        # $pull removes every equal element; the pre-update document is returned
        prev = await store.find_one_and_update({"key": "a"}, {"$pull": {"value": [1]}})
        assert prev is not None
        assert prev.value == [1, 2, 1, 3]
        rec = await store.find_one({"key": "a"})
        assert rec.value == [2, 3]
        assert rec.updated_at >= rec.created_at

        deleted = await store.find_one_and_delete({"key": "a"})
        assert deleted is not None
        assert deleted.key == "a"
        assert await store.find_one_and_delete({"key": "a"}) is None
        assert await store.list_all() == []

    asyncio.run(_run())


def test_store_ids_keep_increasing_after_delete(store):
    async def _run():
        await store.find_one_and_update({"key": "a"}, {"$set": {"value": 1}}, upsert=True)
        await store.find_one_and_delete({"key": "a"})
        await store.find_one_and_update({"key": "b"}, {"$set": {"value": 2}}, upsert=True)
        [rec] = await store.list_all()
        assert rec.id == 2

    asyncio.run(_run())


def test_store_rejects_bad_updates(store):
    async def _run():
        await store.find_one_and_update({"key": "a"}, {"$set": {"value": "text"}}, upsert=True)
        with pytest.raises(StoreError, match="unsupported update operator"):
            await store.find_one_and_update({"key": "a"}, {"$inc": {"value": 1}})
        with pytest.raises(StoreError, match="non-array"):
            await store.find_one_and_update({"key": "a"}, {"$pull": {"value": ["t"]}})
        with pytest.raises(StoreError, match="cannot be updated"):
            await store.find_one_and_update({"key": "a"}, {"$set": {"id": 9}})
        with pytest.raises(StoreError, match="cannot be updated"):
            await store.find_one_and_update({"key": "a"}, {"$set": {"key": "b"}})
        assert [r.key for r in await store.list_all()] == ["a"]

    asyncio.run(_run())


def test_disk_store_persists_across_instances(sandbox_project):
    async def _run():
        path = sandbox_project / "data" / "core.json"
        first = AsyncDiskDocumentStore(path)
        await first.find_one_and_update({"key": "k"}, {"$set": {"value": {"x": 1}}}, upsert=True)

        second = AsyncDiskDocumentStore(path)
        rec = await second.find_one({"key": "k"})
        assert rec is not None
        assert rec.value == {"x": 1}

        on_disk = json.loads(path.read_text(encoding="utf-8"))
        assert on_disk["next_id"] == 2
        assert on_disk["records"][0]["key"] == "k"

    asyncio.run(_run())


def test_disk_collection_treats_invalid_json_as_empty(sandbox_project):
    path = sandbox_project / "data" / "broken.json"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("{not json", encoding="utf-8")

    collection = DiskCollection(path)
    assert collection.list_all() == []
    collection.find_one_and_update({"key": "k"}, {"$set": {"value": 1}}, upsert=True)
    assert [r.key for r in collection.list_all()] == ["k"]


def test_store_pull_matches_by_json_type(store):
    async def _run():
        await store.find_one_and_update({"key": "l"}, {"$set": {"value": [1, True, 0, False, 1.0, [1], [True]]}}, upsert=True)
        await store.find_one_and_update({"key": "l"}, {"$pull": {"value": [True]}})
        rec = await store.find_one({"key": "l"})
        assert rec.value == [1, 0, False, 1.0, [1], [True]]
        assert [type(v) for v in rec.value[:4]] == [int, int, bool, float]

        await store.find_one_and_update({"key": "l"}, {"$pull": {"value": [1, [True]]}})
        rec = await store.find_one({"key": "l"})
        assert rec.value == [0, False, [1]]
        assert type(rec.value[1]) is bool

    asyncio.run(_run())


def test_store_paging_ignores_negative_skip(store):
    async def _run():
        for key in ("a", "b", "c"):
            await store.find_one_and_update({"key": key}, {"$set": {"value": key}}, upsert=True)
        assert [r.key for r in await store.list_all(skip=-2)] == ["a", "b", "c"]

    asyncio.run(_run())
