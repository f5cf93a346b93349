"""
Helios Intel - Storage Layer

Synchronous string key-value persistence behind the Local Object Stores.
Each store owns exactly one key holding a serialized JSON array or map.

Backends:
- InMemoryStorage: Process-local dict (default, zero dependencies)
- FileStorage: One JSON document on disk, replaced atomically on every write
- RedisStorage: Redis-backed storage for multi-process deployments

Usage:
    from storage import get_storage
    storage = get_storage()
    storage.set("helios_report_store", "[]")
    raw = storage.get("helios_report_store")
"""
import json
import os
import logging
import tempfile
from typing import Dict, List, Optional

from errors import StorageError, StorageQuotaExceeded

logger = logging.getLogger(__name__)


def _match(key: str, pattern: Optional[str]) -> bool:
    if not pattern or pattern == "*":
        return True
    if pattern.endswith("*"):
        return key.startswith(pattern[:-1])
    return key == pattern


class InMemoryStorage:
    """Process-local storage. Optional max_bytes emulates a browser quota."""

    def __init__(self, max_bytes: Optional[int] = None):
        self._data: Dict[str, str] = {}
        self._max_bytes = max_bytes

    def get(self, key: str) -> Optional[str]:
        """Get a value by key. Returns None if not found."""
        return self._data.get(key)

    def set(self, key: str, value: str):
        """Set a key to a string value. Raises StorageQuotaExceeded over quota."""
        if not isinstance(value, str):
            raise TypeError(f"Storage values must be str, got {type(value).__name__}")
        if self._max_bytes is not None:
            projected = self.size_bytes() - self._entry_size(key, self._data.get(key)) \
                + self._entry_size(key, value)
            if projected > self._max_bytes:
                raise StorageQuotaExceeded(
                    f"Writing {key} would use {projected} bytes (quota {self._max_bytes})"
                )
        self._data[key] = value

    def delete(self, key: str):
        """Delete a key."""
        self._data.pop(key, None)

    def clear(self):
        """Clear all entries."""
        self._data.clear()

    def keys(self, pattern: str = None) -> List[str]:
        """List keys, optionally filtered by prefix pattern."""
        return [k for k in self._data if _match(k, pattern)]

    def size_bytes(self) -> int:
        return sum(self._entry_size(k, v) for k, v in self._data.items())

    @staticmethod
    def _entry_size(key: str, value: Optional[str]) -> int:
        if value is None:
            return 0
        return len(key.encode("utf-8")) + len(value.encode("utf-8"))


class FileStorage(InMemoryStorage):
    """
    Storage persisted as a single JSON object on disk.

    The whole document is rewritten through a temp file and os.replace, so
    a crash mid-write leaves the previous document intact.
    """

    def __init__(self, path: str, max_bytes: Optional[int] = None):
        super().__init__(max_bytes=max_bytes)
        self._path = path
        self._load()

    @property
    def path(self) -> str:
        return self._path

    def _load(self):
        if not os.path.exists(self._path):
            return
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error("Storage file %s unreadable, starting empty: %s", self._path, e)
            return
        if not isinstance(data, dict):
            logger.error("Storage file %s is not a JSON object, starting empty", self._path)
            return
        self._data = {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _flush(self):
        directory = os.path.dirname(os.path.abspath(self._path))
        os.makedirs(directory, exist_ok=True)
        tmp_path = None
        try:
            with tempfile.NamedTemporaryFile(
                "w", encoding="utf-8", dir=directory, delete=False, suffix=".tmp"
            ) as tmp:
                tmp_path = tmp.name
                json.dump(self._data, tmp)
            os.replace(tmp_path, self._path)
        except OSError as e:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise StorageError(f"Failed to write {self._path}: {e}") from e

    def set(self, key: str, value: str):
        previous = self._data.get(key)
        super().set(key, value)
        try:
            self._flush()
        except StorageError:
            if previous is None:
                self._data.pop(key, None)
            else:
                self._data[key] = previous
            raise

    def delete(self, key: str):
        if key in self._data:
            super().delete(key)
            self._flush()

    def clear(self):
        super().clear()
        self._flush()


class RedisStorage:
    """Redis-backed storage."""

    def __init__(self, redis_url: str = "redis://localhost:6379/0", max_bytes: Optional[int] = None):
        import redis as redis_lib
        self._client = redis_lib.from_url(redis_url, decode_responses=True)
        self._max_bytes = max_bytes
        # Test the connection
        self._client.ping()

    def get(self, key: str) -> Optional[str]:
        """Get a value by key. Returns None if not found."""
        return self._client.get(key)

    def set(self, key: str, value: str):
        """Set a key to a string value."""
        if self._max_bytes is not None and len(value.encode("utf-8")) > self._max_bytes:
            raise StorageQuotaExceeded(
                f"Value for {key} exceeds quota of {self._max_bytes} bytes"
            )
        self._client.set(key, value)

    def delete(self, key: str):
        """Delete a key."""
        self._client.delete(key)

    def clear(self):
        """Delete every Helios key in the current database."""
        keys = self._client.keys("helios_*")
        if keys:
            self._client.delete(*keys)

    def keys(self, pattern: str = None) -> List[str]:
        """List keys matching a pattern (supports Redis glob patterns)."""
        if pattern:
            return self._client.keys(pattern)
        return self._client.keys("*")


def create_storage(backend: str = "memory", file_path: str = None,
                   redis_url: str = None, max_bytes: Optional[int] = None):
    """Build a storage backend by name ("memory", "file" or "redis")."""
    backend = (backend or "memory").lower()
    if backend == "file":
        path = file_path or "./data/helios_storage.json"
        logger.info("File storage initialized: %s", path)
        return FileStorage(path, max_bytes=max_bytes)
    if backend == "redis":
        url = redis_url or "redis://localhost:6379/0"
        try:
            storage = RedisStorage(url, max_bytes=max_bytes)
            logger.info("Redis storage initialized: %s", url)
            return storage
        except Exception as e:
            logger.warning("Redis unavailable, falling back to in-memory: %s", e)
            return InMemoryStorage(max_bytes=max_bytes)
    if backend != "memory":
        logger.warning("Unknown STORAGE_BACKEND %r, using in-memory storage", backend)
    return InMemoryStorage(max_bytes=max_bytes)


# Singleton
_storage_instance = None


def get_storage():
    """Get the singleton storage instance selected by STORAGE_BACKEND."""
    global _storage_instance
    if _storage_instance is None:
        max_bytes = os.environ.get("STORAGE_MAX_BYTES")
        _storage_instance = create_storage(
            backend=os.environ.get("STORAGE_BACKEND", "memory"),
            file_path=os.environ.get("STORAGE_FILE"),
            redis_url=os.environ.get("REDIS_URL"),
            max_bytes=int(max_bytes) if max_bytes else None,
        )
    return _storage_instance


def reset_storage():
    """Reset the singleton (used in tests)."""
    global _storage_instance
    _storage_instance = None
