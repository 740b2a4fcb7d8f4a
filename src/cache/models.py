# src/cache/models.py — v1
"""Cache domain model: CacheEntry, one persisted diagnosis per row.

Entries are written once on a cache miss and never updated. Lookups are
always scoped by (cache_key, requester_id).
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from pydantic import BaseModel, Field

from avidiag.diagnosis.models import Product


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CacheEntry(BaseModel):
    """Stored diagnosis linking a cache key and requester to a result."""

    id: str = Field(default_factory=_new_id)
    requester_id: str
    subject_id: str | None = None
    images: list[str] = Field(default_factory=list)
    symptoms: list[str] = Field(default_factory=list)
    diagnosis: str
    confidence: int = Field(ge=0, le=100)
    treatment_plan: str
    recommended_products: list[Product] = Field(default_factory=list)
    cache_key: str
    created_at: datetime = Field(default_factory=_utcnow)
