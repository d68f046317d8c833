"""Tests for LanguageClassifier.

A wrong language switch in the middle of a conversation is jarring for a
distressed user, so most of these tests pin down when the classifier
must NOT leave the fallback language.
"""
import pytest

from tranquiloo.shared.models import DetectionReason, SupportedLanguage
from tranquiloo.services.language_service.classifier import (
    LanguageClassifier,
    detect_explicit_intent,
    has_non_loanword_accents,
    normalized_words,
    validate_language_consistency,
)
from tranquiloo.services.language_service.config import LanguageConfig


EN = SupportedLanguage.EN
ES = SupportedLanguage.ES


@pytest.fixture
def classifier():
    """Create a LanguageClassifier with default configuration."""
    return LanguageClassifier()


class TestExplicitIntent:
    """Users can always force a language switch."""

    def test_english_request_for_spanish(self, classifier):
        result = classifier.detect("I want to speak in Spanish, please.", EN)

        assert result.language == ES
        assert result.confidence == 1.0
        assert result.reason == DetectionReason.EXPLICIT_INTENT

    def test_spanish_request_for_english_beats_accents(self, classifier):
        """The accent in "inglés" must not win over the explicit request."""
        result = classifier.detect("Quiero hablar en inglés, por favor.", ES)

        assert result.language == EN
        assert result.reason == DetectionReason.EXPLICIT_INTENT

    def test_request_without_typed_accents(self, classifier):
        result = classifier.detect("quiero hablar en espanol", EN)

        assert result.language == ES
        assert result.reason == DetectionReason.EXPLICIT_INTENT

    @pytest.mark.parametrize("text,expected", [
        ("Spanish", ES),
        ("español", ES),
        ("English!", EN),
        ("inglés", EN),
    ])
    def test_bare_language_name(self, classifier, text, expected):
        result = classifier.detect(text, EN if expected == ES else ES)

        assert result.language == expected
        assert result.reason == DetectionReason.EXPLICIT_INTENT

    def test_lets_talk_in_english(self):
        assert detect_explicit_intent("Can we talk in English?") == EN

    def test_no_intent_in_ordinary_message(self):
        assert detect_explicit_intent("I studied spanish history at school") is None

    def test_raw_scores_for_deterministic_result(self, classifier):
        result = classifier.detect("please switch to español", EN)

        assert result.raw_scores == {"en": 0.0, "es": 1.0}


class TestAccentHeuristic:
    """Spanish-only orthography decides outright, except for loanwords."""

    def test_inverted_question_mark_forces_spanish(self, classifier):
        result = classifier.detect("¿Cómo estás?", EN)

        assert result.language == ES
        assert result.confidence == 1.0
        assert result.reason == DetectionReason.ACCENT

    def test_cafe_does_not_force_spanish(self, classifier):
        result = classifier.detect("café", EN)

        assert result.language == EN
        assert result.reason == DetectionReason.FALLBACK

    @pytest.mark.parametrize("text", [
        "We met at the café",
        "Two cafés on my street",
        "My fiancé is worried",
        "That was a bit naïve of me",
    ])
    def test_loanwords_are_ignored(self, text):
        assert has_non_loanword_accents(text) is False

    def test_spanish_word_next_to_loanword(self):
        assert has_non_loanword_accents("café y pastel para mamá") is True


class TestFallback:
    """Short or empty input is never classified statistically."""

    @pytest.mark.parametrize("fallback", [EN, ES])
    def test_ok_follows_fallback(self, classifier, fallback):
        result = classifier.detect("ok", fallback)

        assert result.language == fallback
        assert result.confidence == 0.0
        assert result.reason == DetectionReason.FALLBACK

    @pytest.mark.parametrize("text", ["", "   ", "?!...", "1234 5678"])
    def test_empty_and_punctuation(self, classifier, text):
        result = classifier.detect(text, ES)

        assert result.language == ES
        assert result.reason == DetectionReason.FALLBACK
        assert result.confidence == 0.0

    def test_four_words_is_still_too_short(self, classifier):
        result = classifier.detect("thank you so much", ES)

        assert result.word_count == 4
        assert result.language == ES
        assert result.reason == DetectionReason.FALLBACK

    def test_min_word_count_override(self, classifier):
        result = classifier.detect(
            "my son keeps worrying about school", ES, min_word_count=10
        )

        assert result.reason == DetectionReason.FALLBACK

    def test_unreachable_threshold_falls_back(self):
        classifier = LanguageClassifier(LanguageConfig(confidence_threshold=1.01))
        result = classifier.detect(
            "My son has been having trouble sleeping because of stress at school", ES
        )

        assert result.language == ES
        assert result.reason == DetectionReason.FALLBACK
        assert result.confidence == 0.0
        assert set(result.raw_scores) == {"en", "es"}


class TestStatisticalClassification:
    """Trigram models decide longer, unmarked messages."""

    def test_english_sentence_with_son(self, classifier):
        """"son" is also a Spanish word; the sentence is still English."""
        result = classifier.detect(
            "My son has been having trouble sleeping because of stress at school", ES
        )

        assert result.language == EN
        assert result.reason == DetectionReason.STATISTICAL
        assert result.confidence >= 0.62

    def test_long_spanish_text_without_accents(self, classifier):
        result = classifier.detect(
            "Mi hermano y yo hablamos mucho de la familia cuando estamos juntos en la casa",
            EN,
        )

        assert result.language == ES
        assert result.reason == DetectionReason.STATISTICAL

    def test_probabilities_sum_to_one(self, classifier):
        scores = classifier.score("We talked about the future and what comes next")

        assert scores is not None
        assert sum(scores.values()) == pytest.approx(1.0)

    def test_score_needs_enough_letters(self, classifier):
        assert classifier.score("a b c d e") is None

    def test_extremely_long_input(self, classifier):
        result = classifier.detect("I feel worried about tomorrow. " * 2000, ES)

        assert result.language == EN


class TestWordCount:
    """Word counting ignores digits and single letters."""

    def test_single_letters_dropped_when_longer_words_exist(self):
        assert normalized_words("I am ok y tu") == ["am", "ok", "tu"]

    def test_single_letters_kept_when_nothing_else(self):
        assert normalized_words("y a") == ["y", "a"]

    def test_diacritics_removed(self):
        assert normalized_words("Mañana está bien") == ["manana", "esta", "bien"]


class TestLanguageConsistency:
    """Conversation language changes only on strong evidence."""

    def test_short_reply_keeps_previous(self):
        assert validate_language_consistency(EN, "ok thanks") == EN

    def test_long_spanish_text_switches(self):
        assert validate_language_consistency(
            EN,
            "Hoy me siento muy ansiosa porque tengo una entrevista de trabajo mañana",
        ) == ES

    def test_explicit_request_switches(self):
        assert validate_language_consistency(ES, "english please") == EN
