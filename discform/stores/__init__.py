"""Store implementations for responses, statuses and results."""

from discform.stores.base import PersistenceError
from discform.stores.files import (
    FileStores,
    JsonlResponseStore,
    JsonResultStore,
    JsonStatusStore,
)
from discform.stores.memory import (
    InMemoryResponseStore,
    InMemoryResultStore,
    InMemoryStatusStore,
)

__all__ = [
    "FileStores",
    "InMemoryResponseStore",
    "InMemoryResultStore",
    "InMemoryStatusStore",
    "JsonResultStore",
    "JsonStatusStore",
    "JsonlResponseStore",
    "PersistenceError",
]
