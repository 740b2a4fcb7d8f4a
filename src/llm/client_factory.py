# src/llm/client_factory.py — v2
"""Factory: instantiate LLM client from provider name.

Called by the model cascade once per attempt, with the provider and
credential fixed by the provider selector.
"""

from __future__ import annotations

import importlib
import logging

from avidiag.llm.base_client import BaseLLMClient

logger = logging.getLogger(__name__)

# Registry of provider name → adapter class path (lazy import).
_PROVIDER_REGISTRY: dict[str, str] = {
    "gemini": "avidiag.llm.adapters.google_adapter.GoogleAdapter",
    "openai": "avidiag.llm.adapters.openai_adapter.OpenAIAdapter",
}


class UnsupportedProviderError(ValueError):
    """Raised when a provider is not registered."""


def create_llm_client(
    provider: str,
    model: str,
    api_key: str = "",
    base_url: str | None = None,
    **kwargs: object,
) -> BaseLLMClient:
    """Instantiate the correct adapter from provider name.

    Args:
        provider: Provider identifier (gemini, openai).
        model: Model name (e.g. gemini-1.5-pro).
        api_key: Credential chosen by the provider selector.
        base_url: Optional endpoint override.
        **kwargs: Additional provider-specific arguments.

    Returns:
        Configured BaseLLMClient instance.

    Raises:
        UnsupportedProviderError: If provider is not registered.
    """
    if provider not in _PROVIDER_REGISTRY:
        raise UnsupportedProviderError(
            f"Unsupported LLM provider: {provider!r}. "
            f"Available: {', '.join(sorted(_PROVIDER_REGISTRY))}"
        )

    adapter_cls = _import_class(_PROVIDER_REGISTRY[provider])

    logger.debug("Creating LLM client: provider=%s, model=%s", provider, model)
    return adapter_cls(model=model, api_key=api_key, base_url=base_url, **kwargs)


def register_provider(name: str, class_path: str) -> None:
    """Register a custom provider adapter.

    Args:
        name: Provider identifier.
        class_path: Fully qualified class path implementing BaseLLMClient.
    """
    _PROVIDER_REGISTRY[name] = class_path
    logger.info("Registered LLM provider: %s → %s", name, class_path)


def registered_providers() -> list[str]:
    """Return the names of all registered providers."""
    return sorted(_PROVIDER_REGISTRY)


def _import_class(class_path: str) -> type:
    """Dynamically import a class from its fully qualified path."""
    module_path, class_name = class_path.rsplit(".", 1)
    module = importlib.import_module(module_path)
    return getattr(module, class_name)
