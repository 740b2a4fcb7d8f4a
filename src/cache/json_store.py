# src/cache/json_store.py — v1
"""JSON file-based cache store (CACHE_BACKEND=json).

One JSON file per entry, grouped in a directory per requester so a lookup
only scans the caller's own entries.
"""

from __future__ import annotations

import hashlib
import logging
from pathlib import Path

from avidiag.cache.base_cache_store import BaseCacheStore
from avidiag.cache.models import CacheEntry

logger = logging.getLogger(__name__)


class JsonCacheStore(BaseCacheStore):
    """File-based cache store using JSON files."""

    def __init__(self, cache_root: Path | str) -> None:
        self._root = Path(cache_root).expanduser()
        self._root.mkdir(parents=True, exist_ok=True)

    async def lookup(self, cache_key: str, requester_id: str) -> CacheEntry | None:
        """Newest entry of the requester whose key matches."""
        for entry in await self.list_entries(requester_id):
            if entry.cache_key == cache_key:
                return entry
        return None

    async def insert(self, entry: CacheEntry) -> CacheEntry:
        """Write the entry; refuses to overwrite an existing id."""
        path = self._requester_dir(entry.requester_id) / f"{entry.id}.json"
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("x", encoding="utf-8") as fh:
            fh.write(entry.model_dump_json(indent=2))
        return entry

    async def list_entries(self, requester_id: str) -> list[CacheEntry]:
        """All entries of a requester, newest first."""
        directory = self._requester_dir(requester_id)
        entries: list[CacheEntry] = []
        if not directory.is_dir():
            return entries

        for path in directory.glob("*.json"):
            try:
                entry = CacheEntry.model_validate_json(path.read_text(encoding="utf-8"))
            except (OSError, ValueError) as e:
                logger.warning("Failed to read cache entry %s: %s", path.name, e)
                continue
            # Guards against hash collisions between requester directories
            if entry.requester_id == requester_id:
                entries.append(entry)

        entries.sort(key=lambda e: e.created_at, reverse=True)
        return entries

    def _requester_dir(self, requester_id: str) -> Path:
        digest = hashlib.sha256(requester_id.encode("utf-8")).hexdigest()[:16]
        return self._root / digest
