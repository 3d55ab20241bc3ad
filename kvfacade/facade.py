"""Key-value operations on top of a document store.

Each operation validates its arguments, makes one or a few calls to the
store and normalizes the result. Compound operations (delete, add/sub,
push/pull) read then write; without ``serialize_keys`` concurrent calls on
the same key can interleave between those steps and lose updates.
"""

from __future__ import annotations

import contextlib
import logging
from typing import Any, AsyncIterator, Iterator

from ._version import __version__
from .errors import KVError, StoreError, ValidationError, ValueTypeError
from .interfaces import DocumentStore
from .locks import KeyLockRegistry
from .records import Record

logger = logging.getLogger(__name__)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_blank(value: Any) -> bool:
    """
    Values that read as "no record": None, False, "" and numeric zero.
    Empty lists and dicts are real values.
    """
    if value is None or value is False:
        return True
    if isinstance(value, str):
        return value == ""
    return _is_number(value) and value == 0


def _check_key(key: Any) -> None:
    if not key:
        raise ValidationError("key is required")
    if not isinstance(key, str):
        raise ValidationError("key must be a string")


def _check_value(value: Any) -> None:
    if value is None:
        raise ValidationError("value is required")


def _check_amount(value: Any) -> None:
    _check_value(value)
    if not _is_number(value):
        raise ValidationError("value must be a number")


def _check_page(name: str, value: Any) -> None:
    if value is not None and (not isinstance(value, int) or isinstance(value, bool)):
        raise ValidationError(f"{name} must be an integer")
    if value is not None and value < 0:
        raise ValidationError(f"{name} must not be negative")


@contextlib.contextmanager
def _store_errors(op: str, key: str | None = None) -> Iterator[None]:
    try:
        yield
    except KVError as e:
        logger.debug("%s(%r) failed: %s", op, key, e)
        raise
    except Exception as e:
        logger.debug("%s(%r) failed in store: %r", op, key, e)
        raise StoreError(str(e)) from e


class KeyValueFacade:
    """
    Key-value API over a DocumentStore.

    Usage:
        kv = KeyValueFacade(InMemoryDocumentStore())
        await kv.set("greeting", "hello")
        await kv.get("greeting")        # "hello"
        await kv.push("tags", "a")      # ["a"]

    Pass ``serialize_keys=True`` to hold a per-key asyncio lock for the whole
    of each operation, which makes concurrent read-modify-write calls on one
    key exact within this facade instance.
    """

    version = __version__

    def __init__(self, store: DocumentStore, *, serialize_keys: bool = False) -> None:
        self._store = store
        self._serialize_keys = serialize_keys
        self._key_locks = KeyLockRegistry()

    @property
    def store(self) -> DocumentStore:
        return self._store

    @property
    def serialize_keys(self) -> bool:
        return self._serialize_keys

    @contextlib.asynccontextmanager
    async def _guard(self, key: str) -> AsyncIterator[None]:
        if not self._serialize_keys:
            yield
            return
        async with self._key_locks.lock_for(key):
            yield

    # -- store calls (no validation, no locking) --

    async def _get(self, key: str) -> Any:
        record = await self._store.find_one({"key": key})
        if record is None:
            return None
        return record.value

    async def _set(self, key: str, value: Any) -> Any:
        await self._store.find_one_and_update({"key": key}, {"$set": {"value": value}}, upsert=True)
        return await self._get(key)

    async def _accumulate(self, op: str, key: str, value: int | float, sign: int) -> int | float:
        _check_key(key)
        _check_amount(value)
        async with self._guard(key):
            with _store_errors(op, key):
                current = await self._get(key)
                if _is_blank(current):
                    # Absent keys take the raw amount, also for subtraction.
                    return await self._set(key, value)
                if not _is_number(current):
                    raise ValueTypeError("stored value must be a number")
                new_value = current + sign * value
                await self._set(key, new_value)
                return new_value

    # -- public API --

    async def set(self, key: str, value: Any) -> Any:
        """Store ``value`` under ``key``, replacing any previous value. Returns the stored value."""
        _check_key(key)
        async with self._guard(key):
            with _store_errors("set", key):
                return await self._set(key, value)

    async def get(self, key: str) -> Any:
        """Return the value stored under ``key`` or None."""
        _check_key(key)
        with _store_errors("get", key):
            return await self._get(key)

    async def fetch(self, key: str) -> Any:
        return await self.get(key)

    async def has(self, key: str) -> bool:
        """
        True when ``key`` holds a value.

        Stored 0, False and "" count as missing.
        """
        _check_key(key)
        with _store_errors("has", key):
            return not _is_blank(await self._get(key))

    async def delete(self, key: str) -> bool:
        """Remove ``key``. Returns False when there was nothing to remove."""
        _check_key(key)
        async with self._guard(key):
            with _store_errors("delete", key):
                if _is_blank(await self._get(key)):
                    return False
                await self._store.find_one_and_delete({"key": key})
                return True

    async def type(self, key: str) -> str | None:
        """Python type name of the stored value ("str", "int", "list", ...), or None."""
        _check_key(key)
        with _store_errors("type", key):
            current = await self._get(key)
        if _is_blank(current):
            return None
        return type(current).__name__

    async def add(self, key: str, value: int | float) -> int | float:
        return await self._accumulate("add", key, value, 1)

    async def sub(self, key: str, value: int | float) -> int | float:
        return await self._accumulate("sub", key, value, -1)

    inc = add
    dec = sub

    async def all(self, *, limit: int | None = None, skip: int | None = None) -> list[Record]:
        """All records in store order, optionally paged."""
        _check_page("limit", limit)
        _check_page("skip", skip)
        with _store_errors("all"):
            return await self._store.list_all(limit=limit, skip=skip)

    async def fetch_all(self, *, limit: int | None = None, skip: int | None = None) -> list[Record]:
        return await self.all(limit=limit, skip=skip)

    fetchAll = fetch_all

    async def push(self, key: str, value: Any) -> list[Any]:
        """
        Append to the list stored under ``key``.

        A missing key becomes ``[value]``, even when ``value`` is itself a list.
        For an existing list, a list ``value`` is appended element by element.
        """
        _check_key(key)
        _check_value(value)
        async with self._guard(key):
            with _store_errors("push", key):
                current = await self._get(key)
                if _is_blank(current):
                    return await self._set(key, [value])
                if not isinstance(current, list):
                    raise ValueTypeError("stored value must be an array")
                if isinstance(value, list):
                    current.extend(value)
                else:
                    current.append(value)
                await self._set(key, current)
                return current

    async def pull(self, key: str, value: Any) -> list[Any] | None:
        """
        Remove every element equal to ``value`` (or to any element of a list
        ``value``) from the list stored under ``key``. Returns None if the key
        is missing.

        A list ``value`` is pulled with one store update per element; a
        failure part-way leaves the earlier removals in place.
        """
        _check_key(key)
        _check_value(value)
        async with self._guard(key):
            with _store_errors("pull", key):
                current = await self._get(key)
                if _is_blank(current):
                    return None
                if not isinstance(current, list):
                    raise ValueTypeError("stored value must be an array")
                items = value if isinstance(value, list) else [value]
                for item in items:
                    await self._store.find_one_and_update({"key": key}, {"$pull": {"value": [item]}})
                return await self._get(key)
