from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping

from .json_store import atomic_write_json, read_json
from .locks import GLOBAL_PATH_LOCKS
from .operators import apply_update, matches, new_record, page
from .records import CollectionDoc, Record

logger = logging.getLogger(__name__)


class DiskCollection:
    """
    Synchronous record collection persisted as one JSON document.

    Every operation is a load/modify/save cycle under the path lock, so
    concurrent threads never observe a half-applied write.
    """

    def __init__(self, path: Path):
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> CollectionDoc:
        raw = read_json(self._path)
        return CollectionDoc.from_disk_doc(raw if isinstance(raw, dict) else {})

    def _save(self, doc: CollectionDoc) -> None:
        atomic_write_json(self._path, doc.to_disk_doc())

    def find_one(self, filter: Mapping[str, Any]) -> Record | None:
        with GLOBAL_PATH_LOCKS.lock_for(self.path):
            doc = self._load()
        return next((r for r in doc.records if matches(r, filter)), None)

    def find_one_and_update(
        self,
        filter: Mapping[str, Any],
        update: Mapping[str, Any],
        *,
        upsert: bool = False,
    ) -> Record | None:
        with GLOBAL_PATH_LOCKS.lock_for(self.path):
            doc = self._load()
            for i, record in enumerate(doc.records):
                if matches(record, filter):
                    doc.records[i] = apply_update(record, update)
                    self._save(doc)
                    logger.debug("updated record %s in %s", record.key, self.path)
                    return record
            if not upsert:
                return None
            inserted = new_record(doc.next_id, filter, update)
            doc.next_id += 1
            doc.records.append(inserted)
            self._save(doc)
            logger.debug("inserted record %s (id=%d) in %s", inserted.key, inserted.id, self.path)
            return None

    def find_one_and_delete(self, filter: Mapping[str, Any]) -> Record | None:
        with GLOBAL_PATH_LOCKS.lock_for(self.path):
            doc = self._load()
            for i, record in enumerate(doc.records):
                if matches(record, filter):
                    del doc.records[i]
                    self._save(doc)
                    logger.debug("deleted record %s from %s", record.key, self.path)
                    return record
            return None

    def list_all(self, *, limit: int | None = None, skip: int | None = None) -> list[Record]:
        with GLOBAL_PATH_LOCKS.lock_for(self.path):
            doc = self._load()
        return page(doc.records, limit=limit, skip=skip)
