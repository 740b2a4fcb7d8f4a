# src/cache/redis_store.py — v1
"""Redis-based cache store (CACHE_BACKEND=redis).

Requires 'redis' package: pip install redis.
Suitable for multi-instance deployments sharing one cache.

Layout:
    avidiag:analysis:<id>            entry JSON
    avidiag:lookup:<sha256>          id of the latest entry for (requester, key)
    avidiag:history:<requester_id>   sorted set of ids scored by creation time
"""

from __future__ import annotations

import hashlib
import logging

from avidiag.cache.base_cache_store import BaseCacheStore
from avidiag.cache.models import CacheEntry

logger = logging.getLogger(__name__)

_ENTRY_PREFIX = "avidiag:analysis:"
_LOOKUP_PREFIX = "avidiag:lookup:"
_HISTORY_PREFIX = "avidiag:history:"


def _lookup_key(cache_key: str, requester_id: str) -> str:
    digest = hashlib.sha256(f"{requester_id}\x00{cache_key}".encode("utf-8")).hexdigest()
    return f"{_LOOKUP_PREFIX}{digest}"


class RedisCacheStore(BaseCacheStore):
    """Redis-backed diagnosis cache."""

    def __init__(self, redis_url: str) -> None:
        try:
            import redis
        except ImportError as e:
            raise ImportError(
                "redis package required: pip install redis"
            ) from e

        self._client = redis.Redis.from_url(redis_url, decode_responses=True)

    async def lookup(self, cache_key: str, requester_id: str) -> CacheEntry | None:
        """Resolve the lookup index, then load the entry."""
        entry_id = self._client.get(_lookup_key(cache_key, requester_id))
        if entry_id is None:
            return None
        entry = self._load(entry_id)
        if entry is None or entry.requester_id != requester_id:
            return None
        return entry

    async def insert(self, entry: CacheEntry) -> CacheEntry:
        """Store entry, point the lookup index at it, append to history."""
        pipe = self._client.pipeline()
        pipe.set(f"{_ENTRY_PREFIX}{entry.id}", entry.model_dump_json())
        pipe.set(_lookup_key(entry.cache_key, entry.requester_id), entry.id)
        pipe.zadd(
            f"{_HISTORY_PREFIX}{entry.requester_id}",
            {entry.id: entry.created_at.timestamp()},
        )
        pipe.execute()
        return entry

    async def list_entries(self, requester_id: str) -> list[CacheEntry]:
        """All entries of a requester, newest first."""
        ids = self._client.zrevrange(f"{_HISTORY_PREFIX}{requester_id}", 0, -1)
        entries: list[CacheEntry] = []
        for entry_id in ids:
            entry = self._load(entry_id)
            if entry is not None:
                entries.append(entry)
        return entries

    def close(self) -> None:
        """Close the Redis connection."""
        self._client.close()

    def _load(self, entry_id: str) -> CacheEntry | None:
        data = self._client.get(f"{_ENTRY_PREFIX}{entry_id}")
        if data is None:
            return None
        try:
            return CacheEntry.model_validate_json(data)
        except ValueError as e:
            logger.warning("Failed to deserialize cache entry %s: %s", entry_id, e)
            return None
