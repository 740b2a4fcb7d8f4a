# src/diagnosis/gateway.py — v2
"""Diagnosis gateway: cache-first, pay-once access to the model cascade.

Flow for one request:

    validate → build key → lookup
        hit  → return stored result (no network call, no write)
        miss → select provider → run cascade → recommend products
             → persist (best effort) → return fresh result

A failed write never fails the request; the caller still receives the fresh
result. Lookup errors are treated as misses.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Mapping

from avidiag.api.models import DiagnosisResponse, InferenceRequest
from avidiag.cache.base_cache_store import BaseCacheStore
from avidiag.cache.key import build_cache_key
from avidiag.cache.models import CacheEntry
from avidiag.config.settings import Settings
from avidiag.diagnosis.cascade import ClientFactory, ModelCascade
from avidiag.diagnosis.catalog import ProductCatalog, StaticProductCatalog
from avidiag.diagnosis.errors import InvalidInput, PersistenceFailure
from avidiag.diagnosis.provider_selector import ProviderSelector
from avidiag.llm.client_factory import create_llm_client
from avidiag.logging.context import clear_context, set_request_context

logger = logging.getLogger(__name__)


class DiagnosisGateway:
    """Sequences cache, provider selection, cascade and persistence."""

    def __init__(
        self,
        cache_store: BaseCacheStore,
        selector: ProviderSelector | None = None,
        cascade: ModelCascade | None = None,
        catalog: ProductCatalog | None = None,
    ) -> None:
        self._cache_store = cache_store
        self._selector = selector or ProviderSelector()
        self._cascade = cascade or ModelCascade()
        self._catalog = catalog or StaticProductCatalog()

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        cache_store: BaseCacheStore,
        catalog: ProductCatalog | None = None,
        client_factory: ClientFactory = create_llm_client,
    ) -> DiagnosisGateway:
        """Wire a gateway from application settings."""
        return cls(
            cache_store=cache_store,
            selector=ProviderSelector.from_settings(settings),
            cascade=ModelCascade(
                client_factory=client_factory,
                attempt_timeout_s=settings.llm_attempt_timeout_s,
                max_tokens=settings.llm_max_tokens,
                temperature=settings.llm_temperature,
            ),
            catalog=catalog,
        )

    async def diagnose(
        self,
        request: InferenceRequest,
        credentials: Mapping[str, str | None],
    ) -> DiagnosisResponse:
        """Answer one request, from cache when possible.

        Args:
            request: Validated inbound request (requester already authenticated).
            credentials: Provider name → API key, read only on a cache miss.

        Raises:
            InvalidInput: No images, no symptoms and no description.
            ProviderConfigMissing: Cache miss and no provider credential.
            CascadeExhausted: Cache miss and every model failed.
        """
        set_request_context(uuid.uuid4().hex[:12], request.requester_id)
        try:
            return await self._diagnose(request, credentials)
        finally:
            clear_context()

    async def _diagnose(
        self,
        request: InferenceRequest,
        credentials: Mapping[str, str | None],
    ) -> DiagnosisResponse:
        if request.is_empty:
            raise InvalidInput(
                "At least one image, a description or symptoms are required"
            )

        logger.info(
            "Analysis request: %d image(s), %d symptom(s), description: %s",
            len(request.images), len(request.symptoms),
            "yes" if request.description else "no",
        )

        cache_key = build_cache_key(request.images, request.symptoms, request.description)
        cached = await self._lookup(cache_key, request.requester_id)
        if cached is not None:
            logger.info(
                "Cache hit, returning analysis %s", cached.id,
                extra={"data": {"cache_key": cache_key, "entry_id": cached.id}},
            )
            return DiagnosisResponse.from_entry(cached, cached=True)

        logger.info(
            "Cache miss, calling AI provider",
            extra={"data": {"cache_key": cache_key}},
        )
        config = self._selector.select(credentials)
        outcome = await self._cascade.run(config, request)
        result = outcome.result
        products = self._catalog.get_recommended_products(result.diagnosis)

        entry = CacheEntry(
            requester_id=request.requester_id,
            subject_id=request.subject_id,
            images=request.images,
            symptoms=request.symptoms,
            diagnosis=result.diagnosis,
            confidence=result.confidence,
            treatment_plan=result.treatment_plan,
            recommended_products=products,
            cache_key=cache_key,
        )
        saved = await self._persist(entry)

        return DiagnosisResponse(
            id=saved.id if saved is not None else str(uuid.uuid4()),
            diagnosis=result.diagnosis,
            confidence=result.confidence,
            treatment_plan=result.treatment_plan,
            recommended_products=products,
            cached=False,
        )

    async def _lookup(self, cache_key: str, requester_id: str) -> CacheEntry | None:
        try:
            return await self._cache_store.lookup(cache_key, requester_id)
        except Exception as exc:
            logger.warning("Cache lookup failed, treating as miss: %s", exc)
            return None

    async def _persist(self, entry: CacheEntry) -> CacheEntry | None:
        try:
            saved = await self._cache_store.insert(entry)
        except Exception as exc:
            failure = PersistenceFailure(entry.id, exc)
            logger.error("%s (result still returned)", failure, exc_info=True)
            return None
        logger.info(
            "Analysis %s saved", saved.id,
            extra={"data": {"entry_id": saved.id, "cache_key": saved.cache_key}},
        )
        return saved
