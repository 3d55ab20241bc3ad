from __future__ import annotations

from typing import Any, Mapping, Protocol

from .records import Record


class DocumentStore(Protocol):
    """
    Minimal document-collection interface the facade is written against.

    Filters are equality matches on top-level record fields. Updates use
    `$set` and `$pull` operators.
    """

    async def find_one(self, filter: Mapping[str, Any]) -> Record | None:
        """Return the first matching record, or None."""
        ...

    async def find_one_and_update(
        self,
        filter: Mapping[str, Any],
        update: Mapping[str, Any],
        *,
        upsert: bool = False,
    ) -> Record | None:
        """Apply `update` to the first match and return it as it was before the update.

        With `upsert=True` a missing record is inserted and None is returned.
        """
        ...

    async def find_one_and_delete(self, filter: Mapping[str, Any]) -> Record | None:
        """Remove the first matching record and return it, or None."""
        ...

    async def list_all(self, *, limit: int | None = None, skip: int | None = None) -> list[Record]:
        """Return records in insertion order, paged by skip/limit."""
        ...
