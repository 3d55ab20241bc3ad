from __future__ import annotations

from ._version import __version__
from .errors import KVError, StoreError, ValidationError, ValueTypeError
from .facade import KeyValueFacade
from .factory import create_store, open_facade
from .interfaces import DocumentStore
from .records import Record
from .settings import Settings, get_settings
from .stores import AsyncDiskDocumentStore, InMemoryDocumentStore

__all__ = [
    "__version__",
    "KVError",
    "StoreError",
    "ValidationError",
    "ValueTypeError",
    "KeyValueFacade",
    "create_store",
    "open_facade",
    "DocumentStore",
    "Record",
    "Settings",
    "get_settings",
    "AsyncDiskDocumentStore",
    "InMemoryDocumentStore",
]
