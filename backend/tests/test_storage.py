"""
Helios Intel - Storage Layer Tests
Tests for InMemoryStorage quota handling, FileStorage persistence and the
get_storage singleton.
"""
import json
import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

pytestmark = pytest.mark.timeout(10)


# ==============================================================================
# InMemoryStorage Tests
# ==============================================================================

class TestInMemoryStorage:
    """Tests for the in-memory storage backend."""

    def test_set_and_get(self):
        from storage import InMemoryStorage
        storage = InMemoryStorage()
        storage.set("helios_key", "[1, 2]")
        assert storage.get("helios_key") == "[1, 2]"

    def test_get_missing_key(self):
        from storage import InMemoryStorage
        assert InMemoryStorage().get("nonexistent") is None

    def test_values_must_be_strings(self):
        from storage import InMemoryStorage
        with pytest.raises(TypeError):
            InMemoryStorage().set("helios_key", [1, 2])

    def test_delete(self):
        from storage import InMemoryStorage
        storage = InMemoryStorage()
        storage.set("to_delete", "value")
        storage.delete("to_delete")
        assert storage.get("to_delete") is None

    def test_delete_nonexistent(self):
        from storage import InMemoryStorage
        InMemoryStorage().delete("nonexistent")  # Should not raise

    def test_clear(self):
        from storage import InMemoryStorage
        storage = InMemoryStorage()
        storage.set("a", "1")
        storage.set("b", "2")
        storage.clear()
        assert storage.keys() == []

    def test_keys_with_prefix_pattern(self):
        from storage import InMemoryStorage
        storage = InMemoryStorage()
        storage.set("helios_reports", "[]")
        storage.set("helios_alerts", "[]")
        storage.set("other", "x")
        assert sorted(storage.keys("helios_*")) == ["helios_alerts", "helios_reports"]
        assert len(storage.keys()) == 3

    def test_quota_exceeded(self):
        from storage import InMemoryStorage
        from errors import StorageError, StorageQuotaExceeded
        storage = InMemoryStorage(max_bytes=20)
        storage.set("k", "small")
        with pytest.raises(StorageQuotaExceeded):
            storage.set("k", "x" * 50)
        # The previous value survives a rejected write
        assert storage.get("k") == "small"
        assert issubclass(StorageQuotaExceeded, StorageError)

    def test_quota_counts_replacement_not_sum(self):
        from storage import InMemoryStorage
        storage = InMemoryStorage(max_bytes=12)
        storage.set("k", "a" * 10)
        storage.set("k", "b" * 10)  # Same size, replaces in place
        assert storage.size_bytes() == 11


# ==============================================================================
# FileStorage Tests
# ==============================================================================

class TestFileStorage:
    """Tests for the JSON-file backend."""

    def test_survives_reopen(self, tmp_path):
        from storage import FileStorage
        path = str(tmp_path / "store.json")
        FileStorage(path).set("helios_reports", '[{"id": "1"}]')
        assert FileStorage(path).get("helios_reports") == '[{"id": "1"}]'

    def test_document_is_a_json_object(self, tmp_path):
        from storage import FileStorage
        path = tmp_path / "store.json"
        storage = FileStorage(str(path))
        storage.set("a", "1")
        storage.delete("a")
        storage.set("b", "2")
        assert json.loads(path.read_text(encoding="utf-8")) == {"b": "2"}

    def test_unreadable_file_starts_empty(self, tmp_path):
        from storage import FileStorage
        path = tmp_path / "store.json"
        path.write_text("not json", encoding="utf-8")
        storage = FileStorage(str(path))
        assert storage.keys() == []

    def test_creates_parent_directory(self, tmp_path):
        from storage import FileStorage
        path = tmp_path / "nested" / "dir" / "store.json"
        FileStorage(str(path)).set("a", "1")
        assert path.exists()

    def test_failed_replace_removes_temp_file(self, tmp_path, monkeypatch):
        import storage as storage_module
        from errors import StorageError
        path = tmp_path / "store.json"
        storage = storage_module.FileStorage(str(path))
        storage.set("a", "1")

        def broken_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr(storage_module.os, "replace", broken_replace)
        with pytest.raises(StorageError):
            storage.set("a", "2")

        assert list(tmp_path.glob("*.tmp")) == []
        assert storage.get("a") == "1"
        assert json.loads(path.read_text(encoding="utf-8")) == {"a": "1"}


# ==============================================================================
# Factory / Singleton Tests
# ==============================================================================

class TestStorageFactory:
    """Tests for create_storage and get_storage."""

    def test_unknown_backend_falls_back_to_memory(self):
        from storage import InMemoryStorage, create_storage
        assert isinstance(create_storage("carrier-pigeon"), InMemoryStorage)

    def test_file_backend(self, tmp_path):
        from storage import FileStorage, create_storage
        storage = create_storage("file", file_path=str(tmp_path / "s.json"))
        assert isinstance(storage, FileStorage)

    def test_get_storage_singleton(self, monkeypatch):
        from storage import InMemoryStorage, get_storage, reset_storage
        monkeypatch.setenv("STORAGE_BACKEND", "memory")
        reset_storage()
        try:
            first = get_storage()
            assert first is get_storage()
            assert isinstance(first, InMemoryStorage)
        finally:
            reset_storage()

    def test_get_storage_reads_quota(self, monkeypatch):
        from errors import StorageQuotaExceeded
        from storage import get_storage, reset_storage
        monkeypatch.setenv("STORAGE_BACKEND", "memory")
        monkeypatch.setenv("STORAGE_MAX_BYTES", "10")
        reset_storage()
        try:
            with pytest.raises(StorageQuotaExceeded):
                get_storage().set("key", "x" * 20)
        finally:
            reset_storage()
