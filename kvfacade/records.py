from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Mapping

from pydantic import BaseModel, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Record(BaseModel):
    id: int
    key: str
    value: Any = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class CollectionDoc(BaseModel):
    """
    Mirrors the on-disk <collection>.json schema:
      {
        "next_id": 3,
        "records": [ { "id": 1, "key": "...", "value": ..., "created_at": "...", "updated_at": "..." }, ... ]
      }
    """

    next_id: int = 1
    records: list[Record] = Field(default_factory=list)

    @classmethod
    def from_disk_doc(cls, doc: Mapping[str, Any]) -> "CollectionDoc":
        return cls.model_validate(doc)

    def to_disk_doc(self) -> dict[str, Any]:
        return self.model_dump(mode="json")
