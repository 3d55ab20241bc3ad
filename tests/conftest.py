from __future__ import annotations

from pathlib import Path
import sys


import pytest


# Ensure the repository root (parent of ./tests) is importable during pytest collection.
# This avoids ModuleNotFoundError for `import kvfacade` under pytest import modes
# that don't automatically prepend the cwd/rootdir to sys.path.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


@pytest.fixture
def sandbox_project(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """
    Redirect data paths to a temp project directory so tests never touch real ./data.
    """
    import kvfacade.paths as paths

    def _project_root() -> Path:
        return tmp_path

    def _data_dir() -> Path:
        p = tmp_path / "data"
        p.mkdir(parents=True, exist_ok=True)
        return p

    monkeypatch.setattr(paths, "project_root", _project_root)
    monkeypatch.setattr(paths, "data_dir", _data_dir)
    for name in ("KV_BACKEND", "KV_DATA_DIR", "KV_COLLECTION", "KV_SERIALIZE_KEYS"):
        monkeypatch.delenv(name, raising=False)
    return tmp_path


@pytest.fixture(params=["memory", "disk"])
def store(request: pytest.FixtureRequest, sandbox_project: Path):
    """Each facade test runs once per shipped store."""
    from kvfacade.stores import AsyncDiskDocumentStore, InMemoryDocumentStore

    if request.param == "memory":
        return InMemoryDocumentStore()
    return AsyncDiskDocumentStore(sandbox_project / "data" / "core.json")


@pytest.fixture
def kv(store):
    from kvfacade.facade import KeyValueFacade

    return KeyValueFacade(store)
