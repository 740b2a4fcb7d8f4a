# src/llm/adapters/google_adapter.py — v1
"""Google Gemini adapter implementing BaseLLMClient.

Uses google-generativeai SDK (generateContent).
"""

from __future__ import annotations

import time
from typing import Any

from avidiag.llm.base_client import BaseLLMClient
from avidiag.llm.models import LLMResponse, Message


class GoogleAdapter(BaseLLMClient):
    """Google Gemini adapter."""

    def __init__(
        self,
        model: str = "gemini-2.0-flash-exp",
        api_key: str = "",
        base_url: str | None = None,
        top_k: int = 20,
        top_p: float = 0.8,
        **kwargs: Any,
    ):
        self._model = model
        self._api_key = api_key
        self._base_url = base_url or None
        self._top_k = top_k
        self._top_p = top_p

    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 512,
        temperature: float = 0.4,
    ) -> LLMResponse:
        import google.generativeai as genai

        configure_kwargs: dict[str, Any] = {"api_key": self._api_key}
        if self._base_url:
            configure_kwargs["client_options"] = {"api_endpoint": self._base_url}
        genai.configure(**configure_kwargs)
        model = genai.GenerativeModel(self._model, system_instruction=system)

        gen_config: dict[str, Any] = {
            "max_output_tokens": max_tokens,
            "temperature": temperature,
            "top_k": self._top_k,
            "top_p": self._top_p,
        }

        # Convert messages to Gemini format
        contents = []
        for m in messages:
            role = "model" if m.role == "assistant" else "user"
            contents.append({"role": role, "parts": [{"text": m.content}]})

        t0 = time.monotonic()
        resp = await model.generate_content_async(
            contents, generation_config=gen_config,
        )
        latency = int((time.monotonic() - t0) * 1000)

        usage = getattr(resp, "usage_metadata", None)
        return LLMResponse(
            content=_response_text(resp),
            input_tokens=getattr(usage, "prompt_token_count", 0) if usage else 0,
            output_tokens=getattr(usage, "candidates_token_count", 0) if usage else 0,
            model=self._model,
            provider="gemini",
            latency_ms=latency,
            raw_response=resp,
        )

    @property
    def provider_name(self) -> str:
        return "gemini"

    @property
    def model(self) -> str:
        return self._model


def _response_text(resp: Any) -> str:
    """Text of the first candidate, or "" when the model returned no parts.

    ``resp.text`` raises ValueError on blocked or empty candidates; an empty
    payload is reported as empty text so the cascade can move on.
    """
    candidates = getattr(resp, "candidates", None) or []
    if not candidates:
        return ""
    content = getattr(candidates[0], "content", None)
    parts = getattr(content, "parts", None) or []
    return "".join(getattr(p, "text", "") or "" for p in parts)
