"""Tests for provider settings."""
import pytest

from tranquiloo.services.llm_service import LLMProvider
from tranquiloo.services.triage_service.config import ProviderSettings, build_llm


class TestProviderSettings:

    def test_defaults_from_empty_environment(self):
        settings = ProviderSettings.from_env({})

        assert settings == ProviderSettings()
        assert settings.anthropic_model == "claude-3-5-haiku-20241022"
        assert settings.openai_model == "gpt-4o-mini"
        assert settings.timeout_seconds == 25.0

    def test_claude_key_alias(self):
        settings = ProviderSettings.from_env({"CLAUDE_API_KEY": " ck "})

        assert settings.anthropic_api_key == "ck"

    def test_anthropic_key_wins_over_alias(self):
        settings = ProviderSettings.from_env({
            "ANTHROPIC_API_KEY": "ak",
            "CLAUDE_API_KEY": "ck",
        })

        assert settings.anthropic_api_key == "ak"

    def test_overrides(self):
        settings = ProviderSettings.from_env({
            "OPENAI_MODEL": "gpt-4o",
            "CRISIS_MODEL": "gpt-4.1-mini",
            "PROVIDER_TIMEOUT_SECONDS": "10",
            "PROVIDER_MAX_TOKENS": "500",
        })

        assert settings.openai_model == "gpt-4o"
        assert settings.crisis_config().model_name == "gpt-4.1-mini"
        assert settings.primary_config().timeout_seconds == 10.0
        assert settings.secondary_config().max_tokens == 500

    def test_invalid_number(self):
        with pytest.raises(ValueError):
            ProviderSettings.from_env({"PROVIDER_TIMEOUT_SECONDS": "soon"})


class TestBuildLLM:

    def test_blank_key_is_unavailable(self):
        settings = ProviderSettings.from_env({"OPENAI_API_KEY": "   "})

        assert build_llm(settings.secondary_config(), "secondary") is None

    def test_configured_provider(self):
        settings = ProviderSettings(anthropic_api_key="ak")

        llm = build_llm(settings.primary_config(), "primary")

        assert llm.config.provider == LLMProvider.ANTHROPIC
