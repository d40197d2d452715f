"""Collection store implementations."""

from .json_store import JsonFileCollectionStore
from .memory_store import InMemoryCollectionStore
from .sqlmodel_store import SQLModelCollectionStore

__all__ = [
    "InMemoryCollectionStore",
    "JsonFileCollectionStore",
    "SQLModelCollectionStore",
]
