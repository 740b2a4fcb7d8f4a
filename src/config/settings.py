# src/config/settings.py — v1
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for provider credentials, model cascades,
cache backend and logging. Cross-field rules are checked once at load
time and reported together as a ConfigurationError.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === LLM PROVIDERS ===
    # Provider API keys (priority: gemini, then openai)
    gemini_api_key: str = ""
    openai_api_key: str = ""
    gemini_base_url: str = ""
    openai_base_url: str = ""

    # Ordered model cascades per provider
    gemini_models: str = (
        "gemini-2.0-flash-exp,gemini-1.5-pro,gemini-1.5-flash-latest,gemini-pro"
    )
    openai_models: str = "gpt-4o-mini"

    # === Generation ===
    llm_temperature: float = 0.4
    llm_max_tokens: int = 512
    llm_attempt_timeout_s: float = 30.0

    # === Cache ===
    cache_enabled: bool = True
    cache_backend: Literal["sqlite", "json", "redis"] = "sqlite"
    cache_root: Path = Path("~/.avidiag/cache")
    cache_redis_url: str = ""

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "json"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 30

    # --- Validators ---

    @field_validator("gemini_api_key", "openai_api_key")
    @classmethod
    def strip_api_key(cls, v: str) -> str:  # noqa: N805
        """Keys pasted with surrounding whitespace count as the bare key."""
        return v.strip()

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        if not self.gemini_models_list:
            errors.append("GEMINI_MODELS must list at least one model")

        if not self.openai_models_list:
            errors.append("OPENAI_MODELS must list at least one model")

        if self.llm_attempt_timeout_s <= 0:
            errors.append("LLM_ATTEMPT_TIMEOUT_S must be > 0")

        if self.llm_max_tokens < 1:
            errors.append("LLM_MAX_TOKENS must be >= 1")

        if self.cache_backend == "redis" and not self.cache_redis_url:
            errors.append("CACHE_REDIS_URL must be set when CACHE_BACKEND=redis")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @property
    def gemini_models_list(self) -> list[str]:
        """Parse comma-separated Gemini cascade."""
        return [m.strip() for m in self.gemini_models.split(",") if m.strip()]

    @property
    def openai_models_list(self) -> list[str]:
        """Parse comma-separated OpenAI cascade."""
        return [m.strip() for m in self.openai_models.split(",") if m.strip()]

    @property
    def credentials(self) -> dict[str, str]:
        """Explicit provider → credential mapping handed to the gateway."""
        return {"gemini": self.gemini_api_key, "openai": self.openai_api_key}


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing or per-call config).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
