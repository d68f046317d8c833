"""Tests for provider payload normalization."""
import pytest

from tranquiloo.shared.models import (
    AnalysisSource,
    CrisisRiskLevel,
    Sentiment,
    SupportedLanguage,
)
from tranquiloo.services.context_service import analyze_context
from tranquiloo.services.language_service import detect_language
from tranquiloo.services.triage_service.normalization import normalize_provider_payload


def normalize(payload, message="I had a long day at work", crisis_signal=False):
    return normalize_provider_payload(
        payload,
        message,
        AnalysisSource.PRIMARY,
        analyze_context(message),
        detect_language(message),
        crisis_signal=crisis_signal,
    )


class TestRequiredResponse:

    @pytest.mark.parametrize("payload", [
        {},
        {"anxietyLevel": 5},
        {"personalizedResponse": "   "},
        {"personalizedResponse": 42},
    ])
    def test_rejected_without_response(self, payload):
        assert normalize(payload) is None

    def test_response_fallback_keys(self):
        result = normalize({"personalized_response": "snake", "response": "plain"})

        assert result.personalized_response == "snake"

    def test_response_trimmed(self):
        assert normalize({"response": "  Take a breath.  "}).personalized_response == "Take a breath."


class TestAnxietyLevel:

    def test_rounding_and_derived_gad7(self):
        result = normalize({"anxietyLevel": 7.5, "personalizedResponse": "ok"})

        assert result.anxiety_level == 8
        assert result.gad7_score == 17
        assert result.escalation_detected is True

    def test_key_priority(self):
        result = normalize({
            "anxiety_level": 3,
            "anxietyScore": 9,
            "personalizedResponse": "ok",
        })

        assert result.anxiety_level == 3

    def test_numeric_string(self):
        assert normalize({"anxietyScore": " 6 ", "personalizedResponse": "ok"}).anxiety_level == 6

    @pytest.mark.parametrize("value, expected", [(42, 10), (-3, 1), (0, 1)])
    def test_clamped(self, value, expected):
        assert normalize({"anxietyLevel": value, "personalizedResponse": "ok"}).anxiety_level == expected

    @pytest.mark.parametrize("value", [None, True, "high", float("nan"), float("inf")])
    def test_unusable_level_falls_back_to_context(self, value):
        result = normalize({"anxietyLevel": value, "personalizedResponse": "ok"})

        assert result.anxiety_level == 2

    def test_gad7_clamped(self):
        result = normalize({"anxietyLevel": 4, "gad7Score": 30, "personalizedResponse": "ok"})

        assert result.gad7_score == 21


class TestLabels:

    def test_triggers_deduplicated_and_trimmed(self):
        result = normalize({
            "triggers": ["work", " work ", "sleep", "", 7],
            "personalizedResponse": "ok",
        })

        assert result.triggers == ("work", "sleep")

    def test_coping_priority(self):
        result = normalize({
            "copingStrategies": ["Breathe"],
            "recommendedInterventions": ["Walk"],
            "personalizedResponse": "ok",
        })

        assert result.recommended_interventions == ("Breathe",)

    def test_missing_lists_are_empty(self):
        result = normalize({"personalizedResponse": "ok"})

        assert result.triggers == ()
        assert result.emotions == ()
        assert result.recommended_interventions == ()

    def test_distortions_detected_locally_when_missing(self):
        message = "I always ruin everything and I should be better"

        result = normalize({"personalizedResponse": "ok"}, message=message)

        assert "Should statements" in result.cognitive_distortions


class TestDerivedFields:

    def test_crisis_level_and_sentiment_derived(self):
        result = normalize({"anxietyLevel": 6, "personalizedResponse": "ok"})

        assert result.crisis_risk_level == CrisisRiskLevel.MODERATE
        assert result.sentiment == Sentiment.NEGATIVE

    def test_crisis_signal_raises_level(self):
        result = normalize(
            {"anxietyLevel": 9, "personalizedResponse": "ok"}, crisis_signal=True
        )

        assert result.crisis_risk_level == CrisisRiskLevel.CRITICAL
        assert result.sentiment == Sentiment.CRISIS

    def test_provider_values_win(self):
        result = normalize({
            "anxietyLevel": 3,
            "crisisRiskLevel": "High",
            "sentiment": "neutral",
            "personalizedResponse": "ok",
        })

        assert result.crisis_risk_level == CrisisRiskLevel.HIGH
        assert result.sentiment == Sentiment.NEUTRAL

    @pytest.mark.parametrize("reported, expected", [
        ("ES", SupportedLanguage.ES),
        ("en", SupportedLanguage.EN),
        ("fr", SupportedLanguage.EN),
        (None, SupportedLanguage.EN),
    ])
    def test_detected_language(self, reported, expected):
        result = normalize({"detectedLanguage": reported, "personalizedResponse": "ok"})

        assert result.detected_language == expected

    def test_source_recorded(self):
        assert normalize({"personalizedResponse": "ok"}).source == AnalysisSource.PRIMARY
