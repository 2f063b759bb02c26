"""
JSON File Store - one JSON document per tracking key.

Records are stored in a directory as:
- {key}.json for keys that are already safe file names
- {sanitized-key}-{hash}.json for everything else
"""

import hashlib
import json
import logging
import os
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from statekeeper.core.exceptions import StoreError
from statekeeper.storage.base import Store, StoreFactory

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]")


class StoreRecord(BaseModel):
    """Persisted record for a single tracking key."""

    key: str
    values: dict[str, Any] = Field(default_factory=dict)
    updated_at: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())


def record_filename(key: str) -> str:
    """Map a tracking key to a file name inside the store directory."""
    safe = _UNSAFE_CHARS.sub("_", key)
    if safe == key and key not in (".", ".."):
        return f"{key}.json"
    digest = hashlib.sha256(key.encode()).hexdigest()[:8]
    return f"{safe}-{digest}.json"


def read_record(path: Path) -> StoreRecord | None:
    """Load a record file, returning None if it is missing or malformed."""
    if not path.exists():
        return None
    try:
        data = json.loads(path.read_text())
        return StoreRecord(**data)
    except (json.JSONDecodeError, ValueError, TypeError) as e:
        logger.warning(f"Ignoring malformed store record {path}: {e}")
        return None


class JsonFileStore(Store):
    """Store that keeps its record in a single JSON file."""

    def __init__(self, key: str, path: Path):
        super().__init__(key)
        self._path = path

    @property
    def path(self) -> Path:
        """File backing this store."""
        return self._path

    def _load(self) -> dict[str, Any]:
        record = read_record(self._path)
        return dict(record.values) if record else {}

    def _save(self, values: dict[str, Any]) -> None:
        """Persist the record atomically using write-replace pattern."""
        temp_path = self._path.with_name(f"{self._path.name}.tmp")
        try:
            content = StoreRecord(key=self._key, values=values).model_dump_json(indent=2)
        except (TypeError, ValueError) as e:
            raise StoreError(
                f"Values for '{self._key}' cannot be serialized: {e}",
                key=self._key,
                operation="commit",
            ) from e

        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            temp_path.write_text(content)
            os.replace(temp_path, self._path)
        except OSError as e:
            temp_path.unlink(missing_ok=True)
            raise StoreError(
                f"Failed to write record for '{self._key}'",
                key=self._key,
                path=str(self._path),
                operation="commit",
            ) from e


class JsonFileStoreFactory(StoreFactory):
    """
    Store factory writing JSON records under a directory.

    The directory is created on first commit, not on construction.
    """

    def __init__(self, directory: Path | None = None):
        self._directory = directory or Path("var/statekeeper")

    @property
    def directory(self) -> Path:
        """Directory holding the record files."""
        return self._directory

    def path_for(self, key: str) -> Path:
        """Get file path for a key's record."""
        return self._directory / record_filename(key)

    def create_store(self, key: str) -> JsonFileStore:
        return JsonFileStore(key, self.path_for(key))

    def list_keys(self) -> list[str]:
        if not self._directory.is_dir():
            return []
        keys = []
        for path in sorted(self._directory.glob("*.json")):
            record = read_record(path)
            if record:
                keys.append(record.key)
        return keys

    def read(self, key: str) -> StoreRecord | None:
        """Read the full record for a key without creating a store."""
        return read_record(self.path_for(key))

    def delete(self, key: str) -> bool:
        path = self.path_for(key)
        if not path.exists():
            return False
        path.unlink()
        return True
