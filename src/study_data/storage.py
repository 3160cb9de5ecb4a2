"""
Persistence backends for the study document.

The store only needs a single key-value slot holding one serialized JSON
string. Backends implement the `StorageBackend` protocol:

- JSONFileStorage: one `<key>.json` file per key in a directory (default
  ~/.study-data/), written via temp file + rename
- MemoryStorage: dict-backed slot for tests and embedding hosts
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Protocol

from loguru import logger

DEFAULT_STORAGE_DIR = Path.home() / ".study-data"


class StorageBackend(Protocol):
    """Synchronous key-value slot for serialized documents."""

    def read(self, key: str) -> str | None:
        """Return the stored string, or None if the key is absent."""
        ...

    def write(self, key: str, raw: str) -> None:
        """Replace the stored string."""
        ...

    def remove(self, key: str) -> None:
        """Delete the key if present."""
        ...


class JSONFileStorage:
    """
    File-backed storage.

    Documents are stored as JSON files with naming: {key}.json
    """

    def __init__(self, storage_dir: Path | None = None):
        """
        Initialize file storage.

        Args:
            storage_dir: Directory for document files (defaults to ~/.study-data)
        """
        self.storage_dir = storage_dir or DEFAULT_STORAGE_DIR
        self.storage_dir.mkdir(parents=True, exist_ok=True)

    def path_for(self, key: str) -> Path:
        return self.storage_dir / f"{key}.json"

    def read(self, key: str) -> str | None:
        filepath = self.path_for(key)
        if not filepath.exists():
            return None
        with open(filepath, "r", encoding="utf-8") as f:
            return f.read()

    def write(self, key: str, raw: str) -> None:
        filepath = self.path_for(key)
        tmp_path = filepath.with_suffix(".json.tmp")
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                f.write(raw)
            os.replace(tmp_path, filepath)
        except Exception:
            tmp_path.unlink(missing_ok=True)
            raise

    def remove(self, key: str) -> None:
        filepath = self.path_for(key)
        if filepath.exists():
            filepath.unlink()
            logger.debug(f"Removed {filepath}")


class MemoryStorage:
    """In-memory storage slot."""

    def __init__(self, initial: dict[str, str] | None = None):
        self.slots: dict[str, str] = dict(initial or {})

    def read(self, key: str) -> str | None:
        return self.slots.get(key)

    def write(self, key: str, raw: str) -> None:
        self.slots[key] = raw

    def remove(self, key: str) -> None:
        self.slots.pop(key, None)
