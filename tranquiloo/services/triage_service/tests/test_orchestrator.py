"""Tests for ResponseOrchestrator tier sequencing.

Providers are BaseLLM stubs; no test touches the network.
"""
import random

import pytest

from tranquiloo.shared.models import AnalysisSource
from tranquiloo.services.llm_service import BaseLLM, LLMConfig, LLMProvider, LLMResponse
from tranquiloo.services.llm_service.errors import ProviderHTTPError
from tranquiloo.services.triage_service.local_generator import LocalGenerator
from tranquiloo.services.triage_service.orchestrator import ResponseOrchestrator

VALID_PAYLOAD = (
    '{"anxietyLevel": 4, "triggers": ["work"], "copingStrategies": ["Breathe"], '
    '"personalizedResponse": "That sounds like a heavy day.", "detectedLanguage": "en"}'
)


class StubLLM(BaseLLM):
    """Records prompts and returns canned text or raises."""

    def __init__(self, provider=LLMProvider.OPENAI, text="", error=None):
        super().__init__(LLMConfig(provider=provider, model_name="stub"))
        self.text = text
        self.error = error
        self.prompts = []

    async def generate(self, prompt, system_prompt=None, **kwargs):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return LLMResponse(text=self.text, model="stub", provider=self.name)


@pytest.fixture
def local():
    return LocalGenerator(rng=random.Random(1))


class TestTierOrder:
    """Secondary only runs after primary definitively failed."""

    @pytest.mark.asyncio
    async def test_primary_success_skips_secondary(self, local):
        primary = StubLLM(LLMProvider.ANTHROPIC, text=VALID_PAYLOAD)
        secondary = StubLLM(text=VALID_PAYLOAD)
        orchestrator = ResponseOrchestrator(primary, secondary, local)

        result = await orchestrator.analyze("Work was exhausting today")

        assert result.source == AnalysisSource.PRIMARY
        assert result.personalized_response == "That sounds like a heavy day."
        assert secondary.prompts == []

    @pytest.mark.asyncio
    async def test_unavailable_primary_uses_secondary(self, local):
        secondary = StubLLM(text="Sure! " + VALID_PAYLOAD)
        orchestrator = ResponseOrchestrator(None, secondary, local)

        result = await orchestrator.analyze("Work was exhausting today")

        assert result.source == AnalysisSource.SECONDARY
        assert secondary.prompts[0].startswith("Analyze the mental health tone of:")

    @pytest.mark.asyncio
    async def test_payload_without_response_moves_on(self, local):
        primary = StubLLM(LLMProvider.ANTHROPIC, text='{"anxietyLevel": 4}')
        secondary = StubLLM(text=VALID_PAYLOAD)
        orchestrator = ResponseOrchestrator(primary, secondary, local)

        result = await orchestrator.analyze("Work was exhausting today")

        assert result.source == AnalysisSource.SECONDARY

    @pytest.mark.asyncio
    async def test_all_providers_fail_uses_local(self, local):
        primary = StubLLM(LLMProvider.ANTHROPIC, error=ProviderHTTPError("anthropic", 529))
        secondary = StubLLM(text="I'd rather not answer in JSON.")
        orchestrator = ResponseOrchestrator(primary, secondary, local)

        result = await orchestrator.analyze("I feel nervous about my exam")

        assert result.source == AnalysisSource.LOCAL
        assert len(primary.prompts) == 1
        assert len(secondary.prompts) == 1
        assert result.personalized_response

    @pytest.mark.asyncio
    async def test_unexpected_primary_exception_falls_through(self, local):
        primary = StubLLM(LLMProvider.ANTHROPIC, error=AttributeError("usage"))
        secondary = StubLLM(text=VALID_PAYLOAD)
        orchestrator = ResponseOrchestrator(primary, secondary, local)

        result = await orchestrator.analyze("I feel anxious about work")

        assert result.source == AnalysisSource.SECONDARY

    @pytest.mark.asyncio
    async def test_unexpected_exceptions_reach_local(self, local):
        primary = StubLLM(LLMProvider.ANTHROPIC, error=AttributeError("usage"))
        secondary = StubLLM(error=KeyError("choices"))
        orchestrator = ResponseOrchestrator(primary, secondary, local)

        result = await orchestrator.analyze("I feel anxious about work")

        assert result.source == AnalysisSource.LOCAL
        assert result.personalized_response

    @pytest.mark.asyncio
    async def test_no_providers_configured(self, local):
        result = await ResponseOrchestrator(local=local).analyze("")

        assert result.source == AnalysisSource.LOCAL


class TestPrimaryPrompt:

    @pytest.mark.asyncio
    async def test_history_and_crisis_guidance(self, local):
        primary = StubLLM(LLMProvider.ANTHROPIC, text=VALID_PAYLOAD)
        orchestrator = ResponseOrchestrator(primary, None, local)

        await orchestrator.analyze(
            "I want to hurt myself",
            history=[{"role": "assistant", "content": "How are you today?"}],
        )

        prompt = primary.prompts[0]
        assert "CRISIS RESPONSE REQUIRED" in prompt
        assert "Recent conversation context: assistant: How are you today?" in prompt

    @pytest.mark.asyncio
    async def test_no_guidance_for_neutral_message(self, local):
        primary = StubLLM(LLMProvider.ANTHROPIC, text=VALID_PAYLOAD)

        await ResponseOrchestrator(primary, None, local).analyze("Work was exhausting today")

        assert "Scenario guidance" not in primary.prompts[0]

    @pytest.mark.asyncio
    async def test_crisis_signal_applied_to_provider_payload(self, local):
        primary = StubLLM(LLMProvider.ANTHROPIC, text=(
            '{"anxietyLevel": 9, "personalizedResponse": "Please stay with me."}'
        ))

        result = await ResponseOrchestrator(primary, None, local).analyze("I want to hurt myself")

        assert result.crisis_risk_level.value == "critical"
        assert result.sentiment.value == "crisis"


class TestUnexpectedGatewayResult:

    def test_untagged_result_moves_to_next_tier(self, local):
        orchestrator = ResponseOrchestrator(local=local)
        signals = local.signals("Work was exhausting today")
        language = local.classifier.detect("Work was exhausting today")

        accepted = orchestrator._accept(
            {"anxietyLevel": 3}, AnalysisSource.PRIMARY,
            "Work was exhausting today", signals.context, language, False,
        )

        assert accepted is None
