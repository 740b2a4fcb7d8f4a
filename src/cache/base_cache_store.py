# src/cache/base_cache_store.py — v1
"""Abstract cache store interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from avidiag.cache.models import CacheEntry


class BaseCacheStore(ABC):
    """Unified interface for diagnosis cache backends."""

    @abstractmethod
    async def lookup(self, cache_key: str, requester_id: str) -> CacheEntry | None:
        """Most recent entry matching both key and requester, or None."""

    @abstractmethod
    async def insert(self, entry: CacheEntry) -> CacheEntry:
        """Persist a new entry and return it. Raises on storage failure."""

    @abstractmethod
    async def list_entries(self, requester_id: str) -> list[CacheEntry]:
        """All entries of one requester, newest first (analysis history)."""

    def close(self) -> None:
        """Release backend resources."""


class NullCacheStore(BaseCacheStore):
    """Store used when caching is disabled: always misses, drops writes."""

    async def lookup(self, cache_key: str, requester_id: str) -> CacheEntry | None:
        return None

    async def insert(self, entry: CacheEntry) -> CacheEntry:
        return entry

    async def list_entries(self, requester_id: str) -> list[CacheEntry]:
        return []
