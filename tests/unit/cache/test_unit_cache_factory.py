# tests/unit/cache/test_unit_cache_factory.py — v1
"""Tests for cache/cache_factory.py."""

from __future__ import annotations

import pytest

from avidiag.cache.base_cache_store import NullCacheStore
from avidiag.cache.cache_factory import create_cache_store
from avidiag.cache.json_store import JsonCacheStore
from avidiag.cache.sqlite_store import SqliteCacheStore
from avidiag.config.settings import Settings


class TestCreateCacheStore:
    def test_sqlite_backend(self, tmp_path):
        s = Settings(_env_file=None, cache_backend="sqlite", cache_root=tmp_path)
        store = create_cache_store(s)
        try:
            assert isinstance(store, SqliteCacheStore)
            assert (tmp_path / "avidiag_cache.db").exists()
        finally:
            store.close()

    def test_json_backend(self, tmp_path):
        s = Settings(_env_file=None, cache_backend="json", cache_root=tmp_path)
        assert isinstance(create_cache_store(s), JsonCacheStore)

    def test_disabled(self, tmp_path):
        s = Settings(_env_file=None, cache_enabled=False, cache_root=tmp_path)
        assert isinstance(create_cache_store(s), NullCacheStore)

    def test_redis_missing_url(self):
        s = Settings(_env_file=None).model_copy(
            update={"cache_backend": "redis", "cache_redis_url": ""}
        )
        with pytest.raises(ValueError, match="CACHE_REDIS_URL"):
            create_cache_store(s)

    def test_unsupported_backend(self):
        s = Settings(_env_file=None).model_copy(update={"cache_backend": "memcached"})
        with pytest.raises(ValueError, match="Unsupported cache backend"):
            create_cache_store(s)
