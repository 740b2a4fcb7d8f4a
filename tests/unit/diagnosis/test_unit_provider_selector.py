# tests/unit/diagnosis/test_unit_provider_selector.py — v1
"""Tests for diagnosis/provider_selector.py — static provider choice."""

from __future__ import annotations

import pytest

from avidiag.config.settings import Settings
from avidiag.diagnosis.errors import ProviderConfigMissing
from avidiag.diagnosis.provider_selector import DEFAULT_CASCADES, ProviderSelector


class TestSelect:
    def test_gemini_preferred(self):
        config = ProviderSelector().select({"gemini": "gm-key", "openai": "sk-key"})
        assert config.provider_name == "gemini"
        assert config.credential == "gm-key"
        assert config.model_cascade_order == DEFAULT_CASCADES["gemini"]
        assert len(config.model_cascade_order) == 4

    def test_openai_when_only_openai(self):
        config = ProviderSelector().select({"openai": "sk-key"})
        assert config.provider_name == "openai"
        assert config.model_cascade_order == ("gpt-4o-mini",)

    @pytest.mark.parametrize("gemini", ["", "   ", None])
    def test_blank_gemini_falls_through(self, gemini):
        config = ProviderSelector().select({"gemini": gemini, "openai": "sk-key"})
        assert config.provider_name == "openai"

    def test_credential_stripped(self):
        config = ProviderSelector().select({"gemini": " gm-key\n"})
        assert config.credential == "gm-key"

    def test_none_configured(self):
        with pytest.raises(ProviderConfigMissing, match="GEMINI_API_KEY"):
            ProviderSelector().select({})

    def test_unknown_providers_ignored(self):
        with pytest.raises(ProviderConfigMissing):
            ProviderSelector().select({"anthropic": "key"})

    def test_credential_hidden_from_repr(self):
        config = ProviderSelector().select({"gemini": "secret-key"})
        assert "secret-key" not in repr(config)


class TestFromSettings:
    def test_cascades_and_base_urls(self):
        settings = Settings(
            _env_file=None,
            gemini_models="g-1,g-2",
            openai_models="o-1",
            openai_base_url="http://proxy.local/v1",
        )
        selector = ProviderSelector.from_settings(settings)

        gemini = selector.select({"gemini": "k"})
        assert gemini.model_cascade_order == ("g-1", "g-2")
        assert gemini.base_url is None

        openai = selector.select({"openai": "k"})
        assert openai.model_cascade_order == ("o-1",)
        assert openai.base_url == "http://proxy.local/v1"
