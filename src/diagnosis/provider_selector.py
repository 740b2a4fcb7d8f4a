# src/diagnosis/provider_selector.py — v1
"""Static, pre-request provider choice.

Resolution order:
  1. gemini credential → ordered multi-model cascade
  2. openai credential → single model
  3. neither → ProviderConfigMissing, before any network activity

The choice is never revisited within a request: when the chosen provider's
cascade is exhausted, the other provider is not tried.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

from avidiag.config.settings import Settings
from avidiag.diagnosis.errors import ProviderConfigMissing
from avidiag.diagnosis.models import ProviderConfig

logger = logging.getLogger(__name__)

PROVIDER_PRIORITY: tuple[str, ...] = ("gemini", "openai")

DEFAULT_CASCADES: dict[str, tuple[str, ...]] = {
    "gemini": (
        "gemini-2.0-flash-exp",
        "gemini-1.5-pro",
        "gemini-1.5-flash-latest",
        "gemini-pro",
    ),
    "openai": ("gpt-4o-mini",),
}


class ProviderSelector:
    """Pick exactly one provider from the credentials present."""

    def __init__(
        self,
        cascades: Mapping[str, Sequence[str]] | None = None,
        base_urls: Mapping[str, str] | None = None,
        priority: Sequence[str] = PROVIDER_PRIORITY,
    ) -> None:
        source = cascades if cascades is not None else DEFAULT_CASCADES
        self._cascades = {name: tuple(models) for name, models in source.items()}
        self._base_urls = dict(base_urls or {})
        self._priority = tuple(priority)

    @classmethod
    def from_settings(cls, settings: Settings) -> ProviderSelector:
        """Build a selector whose cascades come from settings."""
        return cls(
            cascades={
                "gemini": settings.gemini_models_list,
                "openai": settings.openai_models_list,
            },
            base_urls={
                "gemini": settings.gemini_base_url,
                "openai": settings.openai_base_url,
            },
        )

    def select(self, credentials: Mapping[str, str | None]) -> ProviderConfig:
        """Return the first provider in priority order that has a credential.

        Raises:
            ProviderConfigMissing: No provider has a non-empty credential.
        """
        for name in self._priority:
            credential = (credentials.get(name) or "").strip()
            if not credential:
                continue
            config = ProviderConfig(
                provider_name=name,
                credential=credential,
                model_cascade_order=self._cascades.get(name, ()),
                base_url=self._base_urls.get(name) or None,
            )
            logger.info(
                "Using %s provider (%d model(s) in cascade)",
                name, len(config.model_cascade_order),
            )
            return config

        raise ProviderConfigMissing(
            "No AI provider configured: set one of "
            + ", ".join(f"{name.upper()}_API_KEY" for name in self._priority)
        )
