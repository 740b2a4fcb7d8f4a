# src/llm/base_client.py — v1
"""Abstract LLM client interface.

One client is bound to one provider and one model. The model cascade
builds a fresh client per attempt, so implementations must not retry
internally: a failure is reported to the caller and the next model is
tried instead.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from avidiag.llm.models import LLMResponse, Message


class BaseLLMClient(ABC):
    """Unified interface for all LLM providers."""

    @abstractmethod
    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 512,
        temperature: float = 0.4,
    ) -> LLMResponse:
        """Text completion."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Provider identifier (gemini, openai)."""

    @property
    @abstractmethod
    def model(self) -> str:
        """Model identifier this client is bound to."""
