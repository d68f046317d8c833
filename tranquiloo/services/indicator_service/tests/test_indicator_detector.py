"""Tests for IndicatorDetector.

False positives here push a user into the highest-severity response
template, so the benign cases matter as much as the positive ones.
"""
import pytest

from tranquiloo.shared.models import ContextConfidence
from tranquiloo.services.indicator_service.config import IndicatorConfig
from tranquiloo.services.indicator_service.detector import IndicatorDetector


@pytest.fixture
def detector():
    """Create an IndicatorDetector with default weights."""
    return IndicatorDetector()


class TestBenignMessages:
    """Ordinary mentions must not fire."""

    @pytest.mark.parametrize("text", [
        "La policía vino a mi edificio por un problema con el vecino.",
        "Tengo miedo del desahucio y no sé qué hacer con el alquiler.",
        "I watched a documentary about the FBI",
        "My friend works as an agent for a football club",
        "The weather is nice today",
        "",
    ])
    def test_no_indicators(self, detector, text):
        result = detector.detect(text)

        assert result.has_indicators is False
        assert result.matches == ()

    def test_single_context_phrase_is_not_enough(self, detector):
        result = detector.detect("Someone watching me at the gym made me uncomfortable")

        assert result.score == 2
        assert result.has_indicators is False


class TestAgencyWindow:
    """Agency tokens only count next to surveillance language."""

    def test_fbi_following_me(self, detector):
        result = detector.detect("I think the FBI has been following me for weeks")

        assert result.has_indicators is True
        assert result.matches == ("agency+surveillance",)

    def test_cia_following_me_everywhere(self, detector):
        result = detector.detect("The CIA is following me everywhere I go.")

        assert result.has_indicators is True
        assert "agency+surveillance" in result.matches
        assert result.confidence == ContextConfidence.LOW

    def test_surveillance_phrase_outside_window(self, detector):
        text = "The FBI was on the news today and later in the evening my dog kept following me"

        assert detector.has_agency_surveillance(text) is False

    def test_wider_window_reaches_phrase(self):
        detector = IndicatorDetector(IndicatorConfig(window_radius=20))
        text = "The FBI was on the news today and later in the evening my dog kept following me"

        assert detector.has_agency_surveillance(text) is True


class TestClinicalLanguage:
    """Direct keywords and perceptual anomaly phrases."""

    def test_voices_in_my_head(self, detector):
        result = detector.detect("I keep hearing voices in my head telling me secrets.")

        assert result.has_indicators is True
        assert result.score == 4
        assert result.confidence == ContextConfidence.MEDIUM

    def test_multiple_signals_give_high_confidence(self, detector):
        result = detector.detect(
            "I am hallucinating shadows, hearing voices, and I feel like people are after me."
        )

        assert result.has_indicators is True
        assert result.score == 7
        assert result.confidence == ContextConfidence.HIGH
        assert "Hallucination mentioned" in result.matches

    def test_direct_keyword_alone_fires(self, detector):
        result = detector.detect("I think I'm becoming paranoid")

        assert result.has_indicators is True
        assert result.matches == ("Paranoia mentioned",)

    def test_to_dict(self, detector):
        data = detector.detect("I think I'm becoming paranoid").to_dict()

        assert data == {
            "hasIndicators": True,
            "matches": ["Paranoia mentioned"],
            "confidence": "low",
        }
