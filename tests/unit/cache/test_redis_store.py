# tests/unit/cache/test_redis_store.py — v1
"""Tests for cache/redis_store.py — mocked Redis client."""

from __future__ import annotations

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from avidiag.cache.redis_store import RedisCacheStore


class _FakeRedis:
    """In-memory subset of the redis-py client used by the store."""

    def __init__(self):
        self.storage: dict[str, str] = {}
        self.zsets: dict[str, dict[str, float]] = {}
        self.closed = False

    def get(self, key):
        return self.storage.get(key)

    def set(self, key, value):
        self.storage[key] = value

    def zadd(self, key, mapping):
        self.zsets.setdefault(key, {}).update(mapping)

    def zrevrange(self, key, start, end):
        members = self.zsets.get(key, {})
        return sorted(members, key=members.get, reverse=True)

    def pipeline(self):
        pipe = MagicMock()
        pipe.set.side_effect = self.set
        pipe.zadd.side_effect = self.zadd
        return pipe

    def close(self):
        self.closed = True


@pytest.fixture
def fake_redis():
    return _FakeRedis()


@pytest.fixture
def store(fake_redis):
    s = RedisCacheStore.__new__(RedisCacheStore)
    s._client = fake_redis
    return s


class TestRedisCacheStore:
    def test_import_error_without_redis(self):
        """Clear ImportError when redis is not available."""
        import sys
        redis_mod = sys.modules.get("redis")
        sys.modules["redis"] = None  # type: ignore[assignment]
        try:
            with pytest.raises(ImportError, match="redis"):
                RedisCacheStore(redis_url="redis://localhost")
        finally:
            if redis_mod is not None:
                sys.modules["redis"] = redis_mod
            else:
                sys.modules.pop("redis", None)

    @pytest.mark.asyncio
    async def test_insert_and_lookup(self, store, sample_entry):
        await store.insert(sample_entry)
        result = await store.lookup(sample_entry.cache_key, "U1")
        assert result is not None
        assert result.id == "entry-001"

    @pytest.mark.asyncio
    async def test_requester_scoped(self, store, sample_entry):
        await store.insert(sample_entry)
        assert await store.lookup(sample_entry.cache_key, "U2") is None

    @pytest.mark.asyncio
    async def test_latest_insert_is_indexed(self, store, sample_entry):
        await store.insert(sample_entry)
        await store.insert(sample_entry.model_copy(update={"id": "entry-002"}))
        result = await store.lookup(sample_entry.cache_key, "U1")
        assert result.id == "entry-002"

    @pytest.mark.asyncio
    async def test_corrupt_payload_is_a_miss(self, store, fake_redis, sample_entry):
        await store.insert(sample_entry)
        fake_redis.storage["avidiag:analysis:entry-001"] = "garbage"
        assert await store.lookup(sample_entry.cache_key, "U1") is None

    @pytest.mark.asyncio
    async def test_list_entries_newest_first(self, store, sample_entry):
        for i, day in enumerate((2, 9, 4)):
            await store.insert(sample_entry.model_copy(update={
                "id": f"e{i}",
                "created_at": datetime(2026, 10, day, tzinfo=timezone.utc),
            }))
        entries = await store.list_entries("U1")
        assert [e.id for e in entries] == ["e1", "e2", "e0"]

    def test_close(self, store, fake_redis):
        store.close()
        assert fake_redis.closed
