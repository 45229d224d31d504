"""Tests for the CacheStore facade."""

from __future__ import annotations

import logging

import pytest

from kaocache.config import CacheSettings
from kaocache.services import CacheStore
from kaocache.shared.errors import ConfigInvalidError, DataKindInvalidError, KaoCacheWarning
from kaocache.shared.types import DataKind


class TestCacheStoreInit:
    """Test root validation."""

    def test_creates_missing_root(self, cache_root):
        store = CacheStore(CacheSettings(root_dir=cache_root / "deep" / "root"))

        assert store.root_dir.is_dir()
        assert store.root_dir.is_absolute()

    def test_default_settings_return_absolute_paths(self, tmp_path, monkeypatch, clock):
        monkeypatch.chdir(tmp_path)
        store = CacheStore(clock=clock)
        handle = store.handle("abc", DataKind.TEXT)

        path = store.write(handle, "x")

        assert store.root_dir == tmp_path.resolve() / "cache"
        assert path.is_absolute()
        assert path == store.root_dir / "files" / handle.identifier_hash / "20240101-120000.cache"

    def test_root_is_a_file(self, tmp_path):
        root = tmp_path / "occupied"
        root.write_text("file")

        with pytest.raises(ConfigInvalidError):
            CacheStore(CacheSettings(root_dir=root))

    def test_invalid_algorithm_uses_md5(self, cache_root):
        with pytest.warns(KaoCacheWarning):
            store = CacheStore(CacheSettings(root_dir=cache_root, hash_algorithm="nope"))

        assert store.hash("abc") == "f4c0128178a6a21b7a3dd76729725d91"

    def test_repr(self, store):
        assert "md5" in repr(store)


class TestHandles:
    """Test handle creation."""

    def test_invalid_kind_touches_nothing(self, store):
        with pytest.raises(DataKindInvalidError):
            store.handle("abc", "yaml")

        assert list(store.root_dir.iterdir()) == []

    def test_same_identifier_same_directory(self, store):
        text = store.handle("abc", DataKind.TEXT)
        structured = store.handle("abc", DataKind.STRUCTURED_JSON)

        assert text.generation_dir == structured.generation_dir

    def test_kind_mismatch_on_read_is_tolerated(self, store):
        writer = store.handle("abc", DataKind.STRUCTURED_JSON)
        store.write(writer, {"a": 1})

        assert store.read_latest(store.handle("abc", DataKind.TEXT)) == '{"a":1}'


class TestGetCacheInfo:
    """Test the on-disk summary."""

    def test_empty_identifier(self, store):
        info = store.get_cache_info(store.handle("abc", DataKind.TEXT))

        assert info["generation_count"] == 0
        assert info["total_size_bytes"] == 0
        assert info["oldest"] is None
        assert info["current"] is None
        assert info["pointer_stale"] is False

    def test_after_writes(self, store, clock):
        handle = store.handle("abc", DataKind.TEXT)
        store.write(handle, "12345")
        clock.advance(60)
        store.write(handle, "123")

        info = store.get_cache_info(handle)

        assert info["identifier_hash"] == handle.identifier_hash
        assert info["data_kind"] == "text"
        assert info["generation_count"] == 2
        assert info["total_size_bytes"] == 8
        assert info["oldest"] == "20240101-120000.cache"
        assert info["newest"] == "20240101-120100.cache"
        assert info["current"] == "20240101-120100.cache"
        assert info["pointer_stale"] is False

    def test_stale_pointer(self, store):
        handle = store.handle("abc", DataKind.TEXT)
        store.write(handle, "x").unlink()

        assert store.get_cache_info(handle)["pointer_stale"] is True


class TestOperationTiming:
    """Test the durations reported with successful operations."""

    def test_durations_are_measured(self, cache_root, clock, caplog):
        with caplog.at_level(logging.DEBUG, logger="kaocache"):
            store = CacheStore(CacheSettings(root_dir=cache_root), clock=clock)
            handle = store.handle("abc", DataKind.TEXT)
            store.write(handle, "x")
            store.get_cache_info(handle)
            store.prune_older_than(handle, 3600)
            store.erase_all(handle)

        durations = {
            record.operation: record.duration_ms
            for record in caplog.records
            if hasattr(record, "duration_ms")
        }
        assert set(durations) >= {
            "initialize_store",
            "write_generation",
            "get_cache_info",
            "prune_older_than",
            "erase_all",
        }
        for duration in durations.values():
            assert isinstance(duration, float)
            assert duration >= 0
