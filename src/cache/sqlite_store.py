# src/cache/sqlite_store.py — v1
"""SQLite-based cache store (CACHE_BACKEND=sqlite, default).

Uses stdlib sqlite3 — no external dependency. Rows live in the
``ai_health_analyses`` table with the full entry serialized in ``data`` and
the lookup columns indexed alongside it.
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path

from avidiag.cache.base_cache_store import BaseCacheStore
from avidiag.cache.models import CacheEntry

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS ai_health_analyses (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    lot_id TEXT,
    cache_key TEXT NOT NULL,
    data TEXT NOT NULL,
    created_at TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_cache_key_user
    ON ai_health_analyses(cache_key, user_id);
CREATE INDEX IF NOT EXISTS idx_user_created
    ON ai_health_analyses(user_id, created_at);
"""


class SqliteCacheStore(BaseCacheStore):
    """SQLite-backed diagnosis cache."""

    def __init__(self, db_path: Path | str) -> None:
        self._db_path = Path(db_path).expanduser()
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(str(self._db_path))
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.executescript(_SCHEMA)

    async def lookup(self, cache_key: str, requester_id: str) -> CacheEntry | None:
        """Newest entry for (cache_key, requester_id)."""
        cursor = self._conn.execute(
            """SELECT id, data FROM ai_health_analyses
               WHERE cache_key = ? AND user_id = ?
               ORDER BY created_at DESC LIMIT 1""",
            (cache_key, requester_id),
        )
        row = cursor.fetchone()
        if row is None:
            return None
        try:
            return CacheEntry.model_validate_json(row[1])
        except ValueError as e:
            logger.warning("Failed to deserialize cache entry %s: %s", row[0], e)
            return None

    async def insert(self, entry: CacheEntry) -> CacheEntry:
        """Insert a new row; duplicate ids raise sqlite3.IntegrityError."""
        self._conn.execute(
            """INSERT INTO ai_health_analyses
               (id, user_id, lot_id, cache_key, data, created_at)
               VALUES (?, ?, ?, ?, ?, ?)""",
            (
                entry.id,
                entry.requester_id,
                entry.subject_id,
                entry.cache_key,
                entry.model_dump_json(),
                entry.created_at.isoformat(),
            ),
        )
        self._conn.commit()
        return entry

    async def list_entries(self, requester_id: str) -> list[CacheEntry]:
        """All entries of a requester, newest first."""
        cursor = self._conn.execute(
            """SELECT data FROM ai_health_analyses
               WHERE user_id = ? ORDER BY created_at DESC""",
            (requester_id,),
        )
        entries: list[CacheEntry] = []
        for row in cursor.fetchall():
            try:
                entries.append(CacheEntry.model_validate_json(row[0]))
            except ValueError:
                continue
        return entries

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()
