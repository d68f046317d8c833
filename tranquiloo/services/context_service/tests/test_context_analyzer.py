"""Tests for ContextAnalyzer.

These cover the category thresholds, the proximity patterns and the
normal form every pattern table relies on.
"""
import pytest

from tranquiloo.shared.models import ContextConfidence
from tranquiloo.services.context_service.analyzer import ContextAnalyzer, compute_confidence
from tranquiloo.services.context_service.config import ContextThresholds, bidirectional_patterns


@pytest.fixture
def analyzer():
    """Create a ContextAnalyzer with default thresholds."""
    return ContextAnalyzer()


class TestOCD:
    """OCD needs compulsion language, not just the word ritual."""

    def test_candle_ritual_is_not_ocd(self, analyzer):
        summary = analyzer.analyze(
            "I light a candle every night as a little ritual to help me relax before bed."
        )

        assert summary.ocd.threshold_met is False
        assert summary.ocd.score == 0

    def test_checking_compulsion_flags_ocd(self, analyzer):
        summary = analyzer.analyze(
            "My OCD is awful tonight. I can't stop checking the locks and "
            "repeating the ritual until it feels right."
        )

        assert summary.ocd.threshold_met is True
        assert summary.ocd.score == 6
        assert "OCD explicitly mentioned" in summary.ocd.matches
        assert "Compulsion urge with ritual" in summary.ocd.matches
        assert summary.ocd.confidence == ContextConfidence.MEDIUM

    def test_urge_scores_the_same_in_either_order(self, analyzer):
        forward = analyzer.analyze("I have an urge to check the stove")
        backward = analyzer.analyze("Checking the stove again, I get the urge to go back")

        assert forward.ocd.score == backward.ocd.score == 3
        assert forward.ocd.matches == backward.ocd.matches


class TestPanicAndCrisis:
    """Acute categories."""

    def test_panic_attack_description(self, analyzer):
        summary = analyzer.analyze(
            "I'm having a panic attack, my heart is racing and I can't breathe."
        )

        assert summary.panic.threshold_met is True
        assert summary.panic.score == 10
        assert summary.panic.confidence == ContextConfidence.HIGH

    def test_curly_apostrophe_still_matches(self, analyzer):
        summary = analyzer.analyze("I can’t breathe")

        assert "Difficulty breathing" in summary.panic.matches

    def test_explicit_suicide_intent(self, analyzer):
        summary = analyzer.analyze("I want to kill myself")

        assert summary.crisis.threshold_met is True
        assert summary.crisis.score == 5
        assert summary.crisis.confidence == ContextConfidence.MEDIUM


class TestPositive:
    """Relief statements."""

    def test_calm_after_therapy(self, analyzer):
        summary = analyzer.analyze(
            "I am feeling calm and not anxious anymore after my therapy session."
        )

        assert summary.positive.threshold_met is True
        assert summary.positive.score == 6
        assert summary.panic.threshold_met is False


class TestGeneralProperties:
    """Purity and totality."""

    def test_same_input_same_scores(self, analyzer):
        text = "I'm so stressed and worried about everything, I can't stop thinking"

        assert analyzer.analyze(text) == analyzer.analyze(text)

    @pytest.mark.parametrize("text", ["", "!!!", "\u200b\u200b", "a" * 50000])
    def test_degenerate_input(self, analyzer, text):
        summary = analyzer.analyze(text)

        assert summary.fired() == ()
        assert all(score.score == 0 for _, score in summary.items())

    def test_uppercase_and_punctuation_normalized(self, analyzer):
        summary = analyzer.analyze("I'M SO ANXIOUS!!!")

        assert summary.general_anxiety.score == 3
        assert summary.general_anxiety.matches == ("Explicit anxiety mention",)

    def test_to_dict_uses_category_names(self, analyzer):
        data = analyzer.analyze("worried").to_dict()

        assert list(data) == [
            "generalAnxiety", "panic", "ptsd", "ocd", "depression", "crisis", "positive",
        ]
        assert data["generalAnxiety"]["thresholdMet"] is True

    def test_custom_thresholds(self):
        analyzer = ContextAnalyzer(ContextThresholds(general_anxiety=10))
        summary = analyzer.analyze("I feel anxious")

        assert summary.general_anxiety.threshold_met is False


class TestConfidence:
    """Confidence bands relative to the threshold."""

    @pytest.mark.parametrize("score,expected", [
        (4, ContextConfidence.LOW),
        (5, ContextConfidence.MEDIUM),
        (6, ContextConfidence.MEDIUM),
        (7, ContextConfidence.HIGH),
        (12, ContextConfidence.HIGH),
    ])
    def test_bands(self, score, expected):
        assert compute_confidence(score, 4, ContextThresholds()) == expected


class TestBidirectionalPatterns:
    """Proximity pattern generation."""

    def test_both_orders_match(self):
        forward, backward = bidirectional_patterns("urge to", "wash", "Urge", weight=2, window=10)

        assert forward.pattern.search("urge to really wash")
        assert backward.pattern.search("wash it all, urge to")
        assert forward.weight == backward.weight == 2
        assert forward.description == backward.description == "Urge"

    def test_window_limits_distance(self):
        forward, _ = bidirectional_patterns("urge to", "wash", "Urge", window=5)

        assert forward.pattern.search("urge to " + "x" * 20 + " wash") is None
