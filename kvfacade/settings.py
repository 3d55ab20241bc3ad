from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

BACKENDS = ("disk", "memory")


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    # Store
    backend: str
    data_dir: Path | None
    collection: str

    # Concurrency
    serialize_keys: bool


def get_settings() -> Settings:
    backend = os.getenv("KV_BACKEND", "disk").strip().lower()
    if backend not in BACKENDS:
        raise ValueError(f"KV_BACKEND must be one of {', '.join(BACKENDS)}, got {backend!r}")

    # Unset means <project root>/data, resolved lazily by the factory.
    raw_dir = os.getenv("KV_DATA_DIR", "").strip()
    data_dir = Path(raw_dir).expanduser() if raw_dir else None

    collection = os.getenv("KV_COLLECTION", "core").strip() or "core"

    serialize_keys = _env_bool("KV_SERIALIZE_KEYS", False)

    return Settings(
        backend=backend,
        data_dir=data_dir,
        collection=collection,
        serialize_keys=serialize_keys,
    )
