"""Triage configuration: provider settings and the local severity ladder.

Provider credentials only ever come from the environment. An empty key
means the provider is unavailable and its tier is skipped without a
request.
"""
import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from tranquiloo.services.llm_service import (
    BaseLLM,
    LLMConfig,
    LLMProvider,
    ProviderUnavailable,
    create_llm,
)
from tranquiloo.services.safety_service import SafetyConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProviderSettings:
    """External text-generator settings."""

    anthropic_api_key: str = ""
    anthropic_model: str = "claude-3-5-haiku-20241022"
    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"
    crisis_model: str = "gpt-4o-mini"
    timeout_seconds: float = 25.0
    max_tokens: int = 800

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ProviderSettings":
        """Read settings from the environment.

        Args:
            environ: Mapping to read instead of os.environ

        Raises:
            ValueError: If a numeric variable is not a number
        """
        env = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            anthropic_api_key=(
                env.get("ANTHROPIC_API_KEY") or env.get("CLAUDE_API_KEY") or ""
            ).strip(),
            anthropic_model=env.get("ANTHROPIC_MODEL") or defaults.anthropic_model,
            openai_api_key=(env.get("OPENAI_API_KEY") or "").strip(),
            openai_model=env.get("OPENAI_MODEL") or defaults.openai_model,
            crisis_model=env.get("CRISIS_MODEL") or defaults.crisis_model,
            timeout_seconds=float(
                env.get("PROVIDER_TIMEOUT_SECONDS") or defaults.timeout_seconds
            ),
            max_tokens=int(env.get("PROVIDER_MAX_TOKENS") or defaults.max_tokens),
        )

    def primary_config(self) -> LLMConfig:
        return LLMConfig(
            provider=LLMProvider.ANTHROPIC,
            model_name=self.anthropic_model,
            api_key=self.anthropic_api_key or None,
            max_tokens=self.max_tokens,
            temperature=0.7,
            timeout_seconds=self.timeout_seconds,
        )

    def secondary_config(self) -> LLMConfig:
        return LLMConfig(
            provider=LLMProvider.OPENAI,
            model_name=self.openai_model,
            api_key=self.openai_api_key or None,
            max_tokens=self.max_tokens,
            temperature=0.7,
            timeout_seconds=self.timeout_seconds,
        )

    def crisis_config(self, safety: Optional[SafetyConfig] = None) -> LLMConfig:
        safety = safety or SafetyConfig()
        return LLMConfig(
            provider=LLMProvider.OPENAI,
            model_name=self.crisis_model,
            api_key=self.openai_api_key or None,
            max_tokens=safety.crisis_max_tokens,
            temperature=safety.crisis_temperature,
            timeout_seconds=self.timeout_seconds,
        )


def build_llm(config: LLMConfig, role: str) -> Optional[BaseLLM]:
    """Client for one provider tier, or None when it has no credentials."""
    try:
        return create_llm(config)
    except ProviderUnavailable:
        logger.info(
            "PROVIDER_NOT_CONFIGURED",
            extra={"role": role, "provider": config.provider.value}
        )
        return None


@dataclass(frozen=True)
class SeverityLadder:
    """Anxiety-level floors applied by the local generator.

    Empirical values without clinical validation; every change alters how
    often the local path escalates and must be reviewed as such.
    """

    base_level: float = 2.0
    general_anxiety_multiplier: float = 1.5

    panic_floor: int = 8
    ptsd_floor: int = 7
    ocd_floor: int = 6
    depression_floor: int = 5
    crisis_floor: int = 9
    violent_language_floor: int = 8
    depressive_language_floor: int = 6
    gad_floor: int = 6
    general_anxiety_floor: int = 6
    insomnia_floor: int = 5
    positive_ceiling: int = 2

    # anxietyLevel to GAD-7 proxy when a provider omits gad7Score
    gad7_per_level: float = 2.1

    pattern_version: str = "2026.10.01"
