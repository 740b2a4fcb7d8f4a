# src/diagnosis/cascade.py — v2
"""Ordered model fallback within one provider.

Models are tried one at a time, in order. Each attempt is billable, so
attempts never run in parallel and a failed model is never retried: the
first completion that normalizes wins and the remaining models are not
called. Every attempt is bounded by ``attempt_timeout_s``; cancelling the
caller cancels the attempt in flight.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING

from avidiag.diagnosis.errors import CascadeExhausted, ModelAttemptFailed
from avidiag.diagnosis.models import (
    CascadeAttemptResult,
    CascadeOutcome,
    NormalizedDiagnosis,
    ProviderConfig,
)
from avidiag.diagnosis.normalizer import normalize
from avidiag.llm.client_factory import create_llm_client
from avidiag.llm.models import Message
from avidiag.logging.context import set_model_context

if TYPE_CHECKING:
    from avidiag.api.models import InferenceRequest
    from avidiag.llm.base_client import BaseLLMClient

logger = logging.getLogger(__name__)

_PROMPT_PATH = Path(__file__).parent / "prompts" / "health_analysis.txt"

ClientFactory = Callable[..., "BaseLLMClient"]


class ModelCascade:
    """Run a provider's model list until one answer normalizes."""

    def __init__(
        self,
        client_factory: ClientFactory = create_llm_client,
        attempt_timeout_s: float = 30.0,
        max_tokens: int = 512,
        temperature: float = 0.4,
    ) -> None:
        self._client_factory = client_factory
        self._attempt_timeout_s = attempt_timeout_s
        self._max_tokens = max_tokens
        self._temperature = temperature
        self._prompt_template: str | None = None

    def _load_prompt(self) -> str:
        """Load and cache prompt template."""
        if self._prompt_template is None:
            self._prompt_template = _PROMPT_PATH.read_text(encoding="utf-8")
        return self._prompt_template

    def format_prompt(self, request: InferenceRequest) -> str:
        """Fill the veterinary prompt with symptoms, description and photo count.

        Only the number of photos is sent; image content never leaves the
        gateway through this call.
        """
        details: list[str] = []
        if request.symptoms:
            details.append(f"Symptômes observés: {', '.join(request.symptoms)}")
        if request.description:
            details.append(f"Description détaillée: {request.description}")
        if request.images:
            details.append(f"{len(request.images)} photo(s) fournie(s)")
        return self._load_prompt().format(case_details="\n".join(details))

    async def run(
        self, config: ProviderConfig, request: InferenceRequest
    ) -> CascadeOutcome:
        """Try each model of ``config`` in order.

        Raises:
            CascadeExhausted: Every model failed; carries all attempts.
        """
        prompt = self.format_prompt(request)
        attempts: list[CascadeAttemptResult] = []

        for model_id in config.model_cascade_order:
            set_model_context(config.provider_name, model_id)
            logger.info("Trying model %s", model_id)

            start = time.monotonic()
            try:
                client = self._client_factory(
                    config.provider_name,
                    model_id,
                    api_key=config.credential,
                    base_url=config.base_url,
                )
                result = await self._attempt(client, model_id, prompt)
            except asyncio.TimeoutError:
                error = f"Model {model_id} timed out after {self._attempt_timeout_s:.0f}s"
            except ModelAttemptFailed as exc:
                error = str(exc)
            except Exception as exc:  # client construction and SDK errors
                error = f"{type(exc).__name__}: {exc}"
            else:
                attempts.append(
                    CascadeAttemptResult(
                        model_id=model_id, succeeded=True, latency_ms=_elapsed_ms(start),
                    )
                )
                logger.info(
                    "Model %s answered: %s (confidence %d)",
                    model_id, result.diagnosis, result.confidence,
                )
                return CascadeOutcome(
                    result=result,
                    provider=config.provider_name,
                    model_id=model_id,
                    attempts=attempts,
                )

            attempts.append(
                CascadeAttemptResult(
                    model_id=model_id,
                    succeeded=False,
                    error=error,
                    latency_ms=_elapsed_ms(start),
                )
            )
            logger.warning("Model %s failed: %s", model_id, error)

        set_model_context(config.provider_name)
        raise CascadeExhausted(config.provider_name, attempts)

    async def _attempt(
        self, client: BaseLLMClient, model_id: str, prompt: str
    ) -> NormalizedDiagnosis:
        response = await asyncio.wait_for(
            client.complete(
                messages=[Message(role="user", content=prompt)],
                max_tokens=self._max_tokens,
                temperature=self._temperature,
            ),
            timeout=self._attempt_timeout_s,
        )
        if not response.content.strip():
            raise ModelAttemptFailed(f"Empty response from model {model_id}", model_id)
        return normalize(response.content)


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)
