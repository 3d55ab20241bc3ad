from __future__ import annotations

import logging

from dotenv import load_dotenv

from . import paths
from .facade import KeyValueFacade
from .interfaces import DocumentStore
from .settings import Settings, get_settings
from .stores import AsyncDiskDocumentStore, InMemoryDocumentStore

logger = logging.getLogger(__name__)


def create_store(settings: Settings) -> DocumentStore:
    if settings.backend == "memory":
        return InMemoryDocumentStore()
    base = settings.data_dir if settings.data_dir is not None else paths.data_dir()
    path = paths.collection_path(base, settings.collection)
    logger.debug("using disk collection at %s", path)
    return AsyncDiskDocumentStore(path)


def open_facade(settings: Settings | None = None, *, env_file: str = "local.env") -> KeyValueFacade:
    """
    Build a facade from settings, reading them from the environment (and
    `env_file`, when present) if none are given.
    """
    if settings is None:
        load_dotenv(env_file)
        settings = get_settings()
    return KeyValueFacade(create_store(settings), serialize_keys=settings.serialize_keys)
