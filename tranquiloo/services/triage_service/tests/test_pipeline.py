"""Tests for TriagePipeline: the crisis gate and screening flow."""
import random

import pytest

from tranquiloo.shared.models import AnalysisSource, RiskLevel, SupportedLanguage
from tranquiloo.services.safety_service.config import CSSRS_QUESTIONS, RECOMMENDATIONS
from tranquiloo.services.triage_service.config import ProviderSettings
from tranquiloo.services.triage_service.local_generator import LocalGenerator
from tranquiloo.services.triage_service.pipeline import TriagePipeline, build_pipeline


@pytest.fixture
def pipeline():
    """Pipeline with no providers configured."""
    return build_pipeline(ProviderSettings(), local=LocalGenerator(rng=random.Random(3)))


def question(number):
    return f"{CSSRS_QUESTIONS[number - 1].text} (Please answer yes or no)"


class TestCrisisGate:
    """No normal response while screening is required."""

    @pytest.mark.asyncio
    async def test_imminent_message_starts_screening(self, pipeline):
        result = await pipeline.process("I'm going to kill myself tonight")

        assert result.screening_required is True
        assert result.assessment.risk_level == RiskLevel.IMMINENT
        assert result.next_question == question(1)
        assert result.analysis is None
        assert "CALL 911 NOW" in result.response_text

    @pytest.mark.asyncio
    async def test_moderate_message_starts_screening(self, pipeline):
        result = await pipeline.process("Honestly there is no reason to live")

        assert result.screening_required is True
        assert result.assessment.risk_level == RiskLevel.MODERATE
        assert "988" in result.response_text

    @pytest.mark.asyncio
    async def test_neutral_message_gets_analysis(self, pipeline):
        result = await pipeline.process("The weather is nice today")

        assert result.screening_required is False
        assert result.assessment.risk_level == RiskLevel.NONE
        assert result.analysis is not None
        assert result.analysis.source == AnalysisSource.LOCAL
        assert result.response_text == result.analysis.personalized_response


class TestScreeningFlow:
    """Caller-owned screening progress."""

    @pytest.mark.asyncio
    async def test_in_progress_returns_next_question(self, pipeline):
        result = await pipeline.process("no", screening_responses=["yes", "no"])

        assert result.screening_required is True
        assert result.next_question == question(3)
        assert result.response_text == question(3)
        assert result.analysis is None

    @pytest.mark.asyncio
    async def test_completed_alerting_screening(self, pipeline):
        answers = ["no", "no", "no", "no", "no", "yes"]

        result = await pipeline.process("yes", screening_responses=answers)

        assert result.screening_required is True
        assert result.next_question is None
        assert result.screening_outcome.final_risk_level == RiskLevel.IMMINENT
        assert RECOMMENDATIONS[RiskLevel.IMMINENT] in result.response_text

    @pytest.mark.asyncio
    async def test_completed_clear_screening_resumes(self, pipeline):
        result = await pipeline.process("no", screening_responses=["no"] * 6)

        assert result.screening_required is False
        assert result.analysis is not None


class TestCrisisDuringScreening:
    """A crisis message is never answered with a bare question or a normal reply."""

    @pytest.mark.asyncio
    async def test_mid_screening_crisis_gets_safety_content(self, pipeline):
        result = await pipeline.process(
            "goodbye forever, this is my final message", screening_responses=["no"]
        )

        assert result.assessment.risk_level == RiskLevel.IMMINENT
        assert result.screening_required is True
        assert result.next_question == question(2)
        assert "CALL 911 NOW" in result.response_text
        assert "988" in result.response_text
        assert result.response_text.endswith(question(2))
        assert result.analysis is None

    @pytest.mark.asyncio
    async def test_crisis_after_cleared_screening_restarts(self, pipeline):
        result = await pipeline.process(
            "goodbye forever, this is my final message", screening_responses=["no"] * 6
        )

        assert result.screening_required is True
        assert result.analysis is None
        assert result.next_question == question(1)
        assert "988" in result.response_text
        assert result.screening_outcome.final_risk_level == RiskLevel.LOW


class TestResultShape:

    @pytest.mark.asyncio
    async def test_to_dict(self, pipeline):
        data = (await pipeline.process("I'm going to kill myself tonight")).to_dict()

        assert data["screeningRequired"] is True
        assert data["crisisAssessment"]["riskLevel"] == "imminent"
        assert data["crisisAssessment"]["requiresScreening"] is True
        assert data["nextQuestion"] == question(1)
        assert data["analysis"] is None
        assert data["language"]["language"] == "en"

    @pytest.mark.asyncio
    async def test_language_uses_fallback_hint(self, pipeline):
        result = await pipeline.process("ok", fallback_language=SupportedLanguage.ES)

        assert result.language.language == SupportedLanguage.ES
        assert result.analysis.detected_language == SupportedLanguage.ES


class TestBuildPipeline:

    def test_no_keys_means_no_clients(self):
        pipeline = build_pipeline(ProviderSettings())

        assert isinstance(pipeline, TriagePipeline)
        assert pipeline.assessor.llm is None
        assert pipeline.orchestrator.primary is None
        assert pipeline.orchestrator.secondary is None

    def test_keys_create_clients(self):
        pipeline = build_pipeline(ProviderSettings(
            anthropic_api_key="ak-test", openai_api_key="sk-test"
        ))

        assert pipeline.orchestrator.primary.name == "anthropic"
        assert pipeline.orchestrator.secondary.name == "openai"
        assert pipeline.assessor.llm.config.temperature == 0.3
