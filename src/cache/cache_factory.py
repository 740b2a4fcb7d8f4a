# src/cache/cache_factory.py — v2
"""Factory for cache store instantiation."""

from __future__ import annotations

from avidiag.cache.base_cache_store import BaseCacheStore, NullCacheStore
from avidiag.config.settings import Settings

_SQLITE_FILENAME = "avidiag_cache.db"


def create_cache_store(settings: Settings | None = None) -> BaseCacheStore:
    """Instantiate the configured cache backend.

    Args:
        settings: Application settings. Defaults to the SQLite backend
            under ``~/.avidiag/cache``.

    Returns:
        Configured BaseCacheStore implementation.
    """
    settings = settings or Settings()

    if not settings.cache_enabled:
        return NullCacheStore()

    backend = settings.cache_backend

    if backend == "sqlite":
        from avidiag.cache.sqlite_store import SqliteCacheStore
        return SqliteCacheStore(db_path=settings.cache_root / _SQLITE_FILENAME)

    if backend == "json":
        from avidiag.cache.json_store import JsonCacheStore
        return JsonCacheStore(cache_root=settings.cache_root)

    if backend == "redis":
        from avidiag.cache.redis_store import RedisCacheStore
        if not settings.cache_redis_url:
            raise ValueError(
                "CACHE_REDIS_URL must be set when CACHE_BACKEND=redis"
            )
        return RedisCacheStore(redis_url=settings.cache_redis_url)

    raise ValueError(f"Unsupported cache backend: {backend!r}")
