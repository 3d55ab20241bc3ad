from __future__ import annotations

import asyncio
import copy
from pathlib import Path
from typing import Any, Mapping

from .disk_store import DiskCollection
from .interfaces import DocumentStore
from .operators import apply_update, matches, new_record, page
from .records import Record


class AsyncDiskDocumentStore(DocumentStore):
    """
    Async wrapper around the disk-backed collection.
    Uses asyncio.to_thread to avoid blocking the event loop on file I/O.
    """

    def __init__(self, path: Path) -> None:
        self._collection = DiskCollection(path)

    @property
    def path(self) -> Path:
        return self._collection.path

    async def find_one(self, filter: Mapping[str, Any]) -> Record | None:
        return await asyncio.to_thread(self._collection.find_one, filter)

    async def find_one_and_update(
        self,
        filter: Mapping[str, Any],
        update: Mapping[str, Any],
        *,
        upsert: bool = False,
    ) -> Record | None:
        return await asyncio.to_thread(self._collection.find_one_and_update, filter, update, upsert=upsert)

    async def find_one_and_delete(self, filter: Mapping[str, Any]) -> Record | None:
        return await asyncio.to_thread(self._collection.find_one_and_delete, filter)

    async def list_all(self, *, limit: int | None = None, skip: int | None = None) -> list[Record]:
        return await asyncio.to_thread(self._collection.list_all, limit=limit, skip=skip)


def _as_json(record: Record) -> Record:
    return Record.model_validate(record.model_dump(mode="json"))


class InMemoryDocumentStore(DocumentStore):
    """
    Process-local collection. Records are stored in their JSON form, the same
    shape the disk store reads back, and copied out so callers never share
    mutable values with the store.
    """

    def __init__(self) -> None:
        self._records: list[Record] = []
        self._next_id = 1
        self._lock = asyncio.Lock()

    async def find_one(self, filter: Mapping[str, Any]) -> Record | None:
        async with self._lock:
            found = next((r for r in self._records if matches(r, filter)), None)
            return found.model_copy(deep=True) if found is not None else None

    async def find_one_and_update(
        self,
        filter: Mapping[str, Any],
        update: Mapping[str, Any],
        *,
        upsert: bool = False,
    ) -> Record | None:
        update = copy.deepcopy(dict(update))
        async with self._lock:
            for i, record in enumerate(self._records):
                if matches(record, filter):
                    self._records[i] = _as_json(apply_update(record, update))
                    return record
            if not upsert:
                return None
            self._records.append(_as_json(new_record(self._next_id, filter, update)))
            self._next_id += 1
            return None

    async def find_one_and_delete(self, filter: Mapping[str, Any]) -> Record | None:
        async with self._lock:
            for i, record in enumerate(self._records):
                if matches(record, filter):
                    return self._records.pop(i)
            return None

    async def list_all(self, *, limit: int | None = None, skip: int | None = None) -> list[Record]:
        async with self._lock:
            return [r.model_copy(deep=True) for r in page(self._records, limit=limit, skip=skip)]
