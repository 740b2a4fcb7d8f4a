# tests/conftest.py — v1
"""Shared test fixtures for all unit and integration tests.

Provides scripted LLM clients, sample requests and entries, and temp
directories. No network access — every provider call is mocked.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock

import pytest

from avidiag.api.models import InferenceRequest
from avidiag.cache.models import CacheEntry
from avidiag.diagnosis.models import ProviderConfig
from avidiag.llm.models import LLMResponse

VALID_COMPLETION = (
    '{"diagnosis": "Coccidiose", "confidence": 82, '
    '"treatmentPlan": "1. Isoler les sujets malades\\n2. Amprolium dans l\'eau"}'
)


# === FIXTURES: Scripted LLM ===


class ScriptedClientFactory:
    """Client factory whose clients answer from a per-model script.

    Each script value is the completion text, an exception to raise, or an
    async callable awaited in place of the provider call.
    """

    def __init__(self, script: dict[str, Any]):
        self.script = script
        self.calls: list[str] = []
        self.created: list[tuple[str, str, str]] = []

    def __call__(
        self, provider: str, model: str, api_key: str = "", base_url: str | None = None,
        **kwargs: object,
    ) -> AsyncMock:
        self.created.append((provider, model, api_key))
        outcome = self.script[model]

        async def complete(*args: Any, **kw: Any) -> LLMResponse:
            self.calls.append(model)
            if isinstance(outcome, BaseException):
                raise outcome
            if callable(outcome):
                return await outcome()
            return LLMResponse(content=outcome, model=model, provider=provider)

        client = AsyncMock()
        client.complete = AsyncMock(side_effect=complete)
        client.provider_name = provider
        client.model = model
        return client


@pytest.fixture
def scripted_factory() -> type[ScriptedClientFactory]:
    """Factory class; build with a {model_id: outcome} script."""
    return ScriptedClientFactory


@pytest.fixture
def valid_completion() -> str:
    """Completion text that normalizes to a Coccidiose diagnosis."""
    return VALID_COMPLETION


@pytest.fixture
def gemini_config() -> ProviderConfig:
    """Three-model Gemini cascade."""
    return ProviderConfig(
        provider_name="gemini",
        credential="gm-key",
        model_cascade_order=("model-a", "model-b", "model-c"),
    )


# === FIXTURES: Sample data ===


@pytest.fixture
def sample_request() -> InferenceRequest:
    """The coccidiosis example request from requester U1."""
    return InferenceRequest(
        images=[],
        symptoms=["toux", "diarrhée"],
        description="poules léthargiques",
        subject_id="lot-42",
        requester_id="U1",
    )


@pytest.fixture
def sample_entry() -> CacheEntry:
    """Stored entry for the example request."""
    return CacheEntry(
        id="entry-001",
        requester_id="U1",
        subject_id="lot-42",
        symptoms=["toux", "diarrhée"],
        diagnosis="Coccidiose",
        confidence=82,
        treatment_plan="1. Isoler les sujets malades",
        cache_key="::diarrhée|toux::poules léthargiques",
        created_at=datetime(2026, 10, 1, 8, 0, tzinfo=timezone.utc),
    )


# === FIXTURES: Temp dirs ===


@pytest.fixture
def tmp_cache_dir(tmp_path: Path) -> Path:
    """Temporary cache directory."""
    cache = tmp_path / "cache"
    cache.mkdir()
    return cache
