from __future__ import annotations

from pathlib import Path


def project_root() -> Path:
    # kvfacade/paths.py -> kvfacade -> project root
    return Path(__file__).resolve().parents[1]


def data_dir() -> Path:
    return ensure_dir(project_root() / "data")


def ensure_dir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


def collection_path(data_dir: Path, collection: str) -> Path:
    name = (collection.strip() or "core").replace("/", "_").lstrip("@")
    return ensure_dir(data_dir) / f"{name}.json"
