# src/api/facade.py — v1
"""Public API facade — single entry point for poultry health diagnosis.

Usage:
    from avidiag.api.facade import diagnose
    response = await diagnose(InferenceRequest(symptoms=["toux"], requester_id="U1"))
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from avidiag.api.models import DiagnosisResponse, InferenceRequest
from avidiag.config.settings import Settings

if TYPE_CHECKING:
    from avidiag.cache.base_cache_store import BaseCacheStore
    from avidiag.cache.models import CacheEntry
    from avidiag.diagnosis.catalog import ProductCatalog

logger = logging.getLogger(__name__)


async def diagnose(
    request: InferenceRequest,
    settings: Settings | None = None,
    cache_store: BaseCacheStore | None = None,
    catalog: ProductCatalog | None = None,
) -> DiagnosisResponse:
    """Diagnose one request end-to-end.

    Args:
        request: Inbound request; ``requester_id`` is trusted as authenticated.
        settings: Global settings. Loaded from .env if None.
        cache_store: Cache backend. Built from settings if None and closed
            after the call.
        catalog: Product recommendations. Static catalog if None.

    Returns:
        DiagnosisResponse, with ``cached=True`` on a cache hit.

    Raises:
        InvalidInput, ProviderConfigMissing, CascadeExhausted.
    """
    from avidiag.cache.cache_factory import create_cache_store
    from avidiag.diagnosis.gateway import DiagnosisGateway

    settings = settings or Settings()
    owns_store = cache_store is None
    store = cache_store or create_cache_store(settings)

    gateway = DiagnosisGateway.from_settings(settings, cache_store=store, catalog=catalog)
    try:
        return await gateway.diagnose(request, credentials=settings.credentials)
    finally:
        if owns_store:
            store.close()


async def history(
    requester_id: str,
    settings: Settings | None = None,
    cache_store: BaseCacheStore | None = None,
) -> list[CacheEntry]:
    """Past analyses of one requester, newest first."""
    from avidiag.cache.cache_factory import create_cache_store

    settings = settings or Settings()
    owns_store = cache_store is None
    store = cache_store or create_cache_store(settings)
    try:
        return await store.list_entries(requester_id)
    finally:
        if owns_store:
            store.close()
