"""
StateKeeper Storage Module.

Provides the stores that hold persisted property values per tracking key.
"""

__all__ = [
    "Store",
    "StoreFactory",
    "MemoryStore",
    "MemoryStoreFactory",
    "JsonFileStore",
    "JsonFileStoreFactory",
    "StoreRecord",
]

from statekeeper.storage.base import MemoryStore, MemoryStoreFactory, Store, StoreFactory
from statekeeper.storage.json_file import JsonFileStore, JsonFileStoreFactory, StoreRecord
