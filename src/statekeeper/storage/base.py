"""
Store interfaces - the durable backend behind tracking configurations.

A store holds one logical record: a mapping from persisted property
name to its last persisted value. Store factories hand out one store
per tracking key.
"""

import copy
from abc import ABC, abstractmethod
from typing import Any


class Store(ABC):
    """
    Key/value record for a single tracked object.

    Values are cached in memory after the first read; ``set`` and
    ``remove`` only touch the cache until ``commit`` writes it back.
    """

    def __init__(self, key: str):
        self._key = key
        self._values: dict[str, Any] | None = None

    @property
    def key(self) -> str:
        """Key of the record this store reads and writes."""
        return self._key

    @property
    def _cache(self) -> dict[str, Any]:
        if self._values is None:
            self._values = self._load()
        return self._values

    @abstractmethod
    def _load(self) -> dict[str, Any]:
        """Read the record from the backend. Missing records load as empty."""

    @abstractmethod
    def _save(self, values: dict[str, Any]) -> None:
        """Write the record to the backend."""

    def contains(self, name: str) -> bool:
        """Check if a value is stored for a property."""
        return name in self._cache

    def get(self, name: str, default: Any = None) -> Any:
        """Get the stored value for a property."""
        return self._cache.get(name, default)

    def set(self, name: str, value: Any) -> None:
        """Set the value for a property (pending until commit)."""
        self._cache[name] = value

    def remove(self, name: str) -> None:
        """Remove a property from the record (pending until commit)."""
        self._cache.pop(name, None)

    def values(self) -> dict[str, Any]:
        """Return a copy of all stored values."""
        return dict(self._cache)

    def commit(self) -> None:
        """Write pending changes to the backend."""
        self._save(dict(self._cache))

    def reload(self) -> None:
        """Discard the cache so the next read goes to the backend."""
        self._values = None


class StoreFactory(ABC):
    """Creates the store for a tracking key."""

    @abstractmethod
    def create_store(self, key: str) -> Store:
        """Create a store bound to the record for ``key``."""

    @abstractmethod
    def list_keys(self) -> list[str]:
        """List keys that have a persisted record."""

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Delete the record for ``key``. Returns False if there was none."""


class MemoryStore(Store):
    """Store backed by a dict shared through its factory."""

    def __init__(self, key: str, records: dict[str, dict[str, Any]]):
        super().__init__(key)
        self._records = records

    def _load(self) -> dict[str, Any]:
        return copy.deepcopy(self._records.get(self._key, {}))

    def _save(self, values: dict[str, Any]) -> None:
        self._records[self._key] = copy.deepcopy(values)


class MemoryStoreFactory(StoreFactory):
    """
    In-process store factory.

    Records live only as long as the factory; useful for tests and for
    applications that persist to another layer themselves.
    """

    def __init__(self):
        self.records: dict[str, dict[str, Any]] = {}

    def create_store(self, key: str) -> MemoryStore:
        return MemoryStore(key, self.records)

    def list_keys(self) -> list[str]:
        return sorted(self.records)

    def delete(self, key: str) -> bool:
        return self.records.pop(key, None) is not None
