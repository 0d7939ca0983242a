"""
Key-Value Storage for Mood Mosaic Records.

Each record collection is stored whole under a single key. There is
no append format and no schema versioning: every mutation rewrites
the full collection.
"""

import logging
import os
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional, Union

logger = logging.getLogger(__name__)


class KeyValueStore(ABC):
    """Minimal load/save interface for encoded record collections."""

    @abstractmethod
    def get(self, key: str) -> Optional[bytes]:
        """Return the stored value, or None if the key has never been set."""

    @abstractmethod
    def set(self, key: str, value: bytes) -> None:
        """Store value under key, replacing any previous value."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove key if present."""


class InMemoryKeyValueStore(KeyValueStore):
    """Process-local store, used by tests and short-lived sessions."""

    def __init__(self, initial: Optional[Dict[str, bytes]] = None):
        self._data: Dict[str, bytes] = dict(initial or {})
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[bytes]:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: bytes) -> None:
        with self._lock:
            self._data[key] = value

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def keys(self):
        with self._lock:
            return list(self._data.keys())


class FileKeyValueStore(KeyValueStore):
    """
    Store that keeps one JSON file per key inside a directory.

    Writes go to a temporary file that is then renamed over the
    target, so a reader never sees a half-written collection.
    """

    def __init__(self, directory: Union[str, Path]):
        """
        Initialize the file store.

        Args:
            directory: Directory holding the <key>.json files (created on demand)
        """
        self.directory = Path(directory)
        logger.info(f"[STORE] Using file store at {self.directory}")

    def _path_for(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get(self, key: str) -> Optional[bytes]:
        path = self._path_for(key)
        if not path.exists():
            return None
        return path.read_bytes()

    def set(self, key: str, value: bytes) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self._path_for(key)
        tmp_path = path.with_suffix(".json.tmp")
        tmp_path.write_bytes(value)
        os.replace(tmp_path, path)
        logger.debug(f"[STORE] Wrote {len(value)} bytes to {path.name}")

    def delete(self, key: str) -> None:
        path = self._path_for(key)
        if path.exists():
            path.unlink()
