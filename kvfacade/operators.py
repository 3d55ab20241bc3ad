from __future__ import annotations

from typing import Any, Mapping

from .errors import StoreError
from .records import Record, utcnow

UPDATABLE_FIELDS = ("value",)


def same_value(a: Any, b: Any) -> bool:
    """
    JSON equality: booleans never equal numbers, ints and floats compare by
    value, lists and dicts compare element-wise.
    """
    if isinstance(a, bool) or isinstance(b, bool):
        return type(a) is type(b) and a == b
    if isinstance(a, (int, float)) and isinstance(b, (int, float)):
        return a == b
    if isinstance(a, list) and isinstance(b, list):
        return len(a) == len(b) and all(same_value(x, y) for x, y in zip(a, b))
    if isinstance(a, dict) and isinstance(b, dict):
        return a.keys() == b.keys() and all(same_value(v, b[k]) for k, v in a.items())
    return type(a) is type(b) and a == b


def matches(record: Record, filter: Mapping[str, Any]) -> bool:
    """Equality match on top-level record fields."""
    for field, expected in filter.items():
        if getattr(record, field, None) != expected:
            return False
    return True


def apply_update(record: Record, update: Mapping[str, Any]) -> Record:
    """
    Return a new record with the update document applied.

    Supported operators:
      {"$set":  {"value": <any>}}
      {"$pull": {"value": [<v1>, <v2>, ...]}}   removes every element equal to any vN
    """
    changes: dict[str, Any] = {}
    for op, fields in update.items():
        if not isinstance(fields, Mapping):
            raise StoreError(f"{op} expects a mapping of fields")
        for field, operand in fields.items():
            if field not in UPDATABLE_FIELDS:
                raise StoreError(f"field {field!r} cannot be updated")
            if op == "$set":
                changes[field] = operand
            elif op == "$pull":
                current = changes.get(field, getattr(record, field))
                if not isinstance(current, list):
                    raise StoreError(f"cannot apply $pull to a non-array field {field!r}")
                targets = operand if isinstance(operand, list) else [operand]
                changes[field] = [item for item in current if not any(same_value(item, t) for t in targets)]
            else:
                raise StoreError(f"unsupported update operator {op!r}")
    changes["updated_at"] = utcnow()
    return record.model_copy(update=changes, deep=True)


def new_record(record_id: int, filter: Mapping[str, Any], update: Mapping[str, Any]) -> Record:
    """Build the record inserted by an upsert: filter fields first, then the update."""
    key = filter.get("key")
    if not isinstance(key, str):
        raise StoreError("upsert requires a string 'key' in the filter")
    base = Record(id=record_id, key=key, value=None)
    return apply_update(base, {op: fields for op, fields in update.items() if op == "$set"})


def page(records: list[Record], *, limit: int | None = None, skip: int | None = None) -> list[Record]:
    start = max(skip or 0, 0)
    if limit is None or limit <= 0:
        return records[start:]
    return records[start : start + limit]
