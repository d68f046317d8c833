"""Two-language (English/Spanish) classifier for chat messages.

Layers, in priority order:
1. Explicit intent ("let's speak in Spanish", a bare "english")
2. Spanish-only orthography (ñ, á, ¿ ...) outside known English loanwords
3. Word-count gate - short inputs keep the caller's fallback language
4. Laplace-smoothed trigram log-likelihood with a softmax over both models

The first two layers are deterministic and win outright. The statistical
layer only decides when both the winning probability and its margin clear
their thresholds; otherwise the caller's fallback language is kept.
"""
import logging
import math
import re
from collections import Counter
from dataclasses import dataclass
from typing import Dict, List, Optional

from tranquiloo.shared.models import DetectionReason, LanguageDetection, SupportedLanguage
from tranquiloo.shared.utils import hash_text_for_audit, strip_diacritics
from .config import (
    ACCENT_PATTERN,
    ENGLISH_INTENT_PATTERNS,
    ENGLISH_LOANWORDS_WITH_ACCENTS,
    EXACT_ENGLISH_TOKENS,
    EXACT_SPANISH_TOKENS,
    SPANISH_INTENT_PATTERNS,
    LanguageConfig,
)
from .corpora import ENGLISH_CORPUS, SPANISH_CORPUS

logger = logging.getLogger(__name__)

_WORD_PATTERN = re.compile(r"[a-záéíóúüñ]+")
_ACCENT_WORD_SPLIT = re.compile(r"[^a-záéíóúüñ¿¡]+")
_PROFILE_NOISE = re.compile(r"[^a-záéíóúüñ]+")
_NON_ASCII_LETTER = re.compile(r"[^a-z]")
_INTENT_NOISE = re.compile(r"[^a-z ]")
_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class TrigramModel:
    """Trigram counts for one reference language."""
    counts: Dict[str, int]
    total: int

    @classmethod
    def from_sample(cls, sample: str) -> "TrigramModel":
        counts = _trigram_counts(sample)
        return cls(counts=dict(counts), total=sum(counts.values()))


def _sanitize_for_profile(text: str) -> str:
    return _PROFILE_NOISE.sub(" ", text.lower()).strip()


def _trigram_counts(text: str) -> Counter:
    """Letter trigrams windowed inside each word."""
    counts: Counter = Counter()
    for word in _sanitize_for_profile(text).split():
        for index in range(len(word) - 2):
            counts[word[index:index + 3]] += 1
    return counts


def _ascii_letters(word: str) -> str:
    return _NON_ASCII_LETTER.sub("", strip_diacritics(word))


def normalized_words(text: str) -> List[str]:
    """Letters-only words with diacritics removed.

    Single-letter words are dropped whenever the text also has longer
    words, so stray "y"/"a"/"I" tokens do not inflate the count.
    """
    raw = _WORD_PATTERN.findall(text.lower())
    normalized = [(_ascii_letters(w), len(w)) for w in raw]
    normalized = [(w, n) for w, n in normalized if w]
    multi = [w for w, n in normalized if n > 1]
    return multi if multi else [w for w, _ in normalized]


def has_non_loanword_accents(text: str) -> bool:
    """True if any accented word is not an English loanword like "café"."""
    if not ACCENT_PATTERN.search(text):
        return False
    for word in _ACCENT_WORD_SPLIT.split(text.lower()):
        if not word or not ACCENT_PATTERN.search(word):
            continue
        plain = _ascii_letters(word)
        if not plain:
            continue
        if plain in ENGLISH_LOANWORDS_WITH_ACCENTS:
            continue
        if plain.endswith("s") and plain[:-1] in ENGLISH_LOANWORDS_WITH_ACCENTS:
            continue
        return True
    return False


def detect_explicit_intent(text: str) -> Optional[SupportedLanguage]:
    """Language the user explicitly asked for, if any.

    Patterns run against both the lowercased text and its accent-free
    form, since users may or may not type the accents.
    """
    simplified = _WHITESPACE.sub(" ", text.lower()).strip()
    normalized = _WHITESPACE.sub(
        " ", _INTENT_NOISE.sub(" ", strip_diacritics(simplified))
    ).strip()

    if normalized in EXACT_SPANISH_TOKENS:
        return SupportedLanguage.ES
    if normalized in EXACT_ENGLISH_TOKENS:
        return SupportedLanguage.EN

    for candidate in (simplified, normalized):
        if any(p.search(candidate) for p in SPANISH_INTENT_PATTERNS):
            return SupportedLanguage.ES
    for candidate in (simplified, normalized):
        if any(p.search(candidate) for p in ENGLISH_INTENT_PATTERNS):
            return SupportedLanguage.EN
    return None


class LanguageClassifier:
    """English/Spanish classifier over fixed reference trigram models.

    Instances are read-only after construction and safe to share.
    """

    def __init__(
        self,
        config: Optional[LanguageConfig] = None,
        english_sample: str = ENGLISH_CORPUS,
        spanish_sample: str = SPANISH_CORPUS,
    ):
        self.config = config or LanguageConfig()
        self._models: Dict[SupportedLanguage, TrigramModel] = {
            SupportedLanguage.EN: TrigramModel.from_sample(english_sample),
            SupportedLanguage.ES: TrigramModel.from_sample(spanish_sample),
        }
        vocabulary = set()
        for model in self._models.values():
            vocabulary.update(model.counts)
        self._vocabulary_size = len(vocabulary) or 1

        logger.info(
            "LANGUAGE_CLASSIFIER_INITIALIZED",
            extra={
                "pattern_version": self.config.pattern_version,
                "vocabulary_size": self._vocabulary_size,
                "english_trigrams": self._models[SupportedLanguage.EN].total,
                "spanish_trigrams": self._models[SupportedLanguage.ES].total,
            }
        )

    def score(self, text: str) -> Optional[Dict[SupportedLanguage, float]]:
        """Softmax probabilities per language, or None if text is too thin.

        Args:
            text: Raw message text

        Returns:
            Probabilities summing to 1, or None when fewer than the
            configured number of letters (or no trigrams) remain
        """
        sanitized = _sanitize_for_profile(text)
        if len(sanitized.replace(" ", "")) < self.config.min_profile_letters:
            return None
        frequencies = _trigram_counts(sanitized)
        if not frequencies:
            return None

        alpha = self.config.smoothing_alpha
        log_scores: Dict[SupportedLanguage, float] = {}
        for language, model in self._models.items():
            denominator = model.total + alpha * self._vocabulary_size
            log_scores[language] = sum(
                frequency * math.log((model.counts.get(trigram, 0) + alpha) / denominator)
                for trigram, frequency in frequencies.items()
            )

        peak = max(log_scores.values())
        exps = {lang: math.exp(value - peak) for lang, value in log_scores.items()}
        total = sum(exps.values())
        if not math.isfinite(total) or total == 0:
            return None
        return {lang: value / total for lang, value in exps.items()}

    def detect(
        self,
        text: str,
        fallback_language: SupportedLanguage = SupportedLanguage.EN,
        confidence_threshold: Optional[float] = None,
        min_word_count: Optional[int] = None,
    ) -> LanguageDetection:
        """Classify the language of a message.

        Never raises. Empty, short or ambiguous input resolves to
        fallback_language with confidence 0 and reason FALLBACK.

        Args:
            text: Raw message text
            fallback_language: Language kept when no layer is decisive
            confidence_threshold: Override for the winning-probability gate
            min_word_count: Override for the word-count gate

        Returns:
            LanguageDetection
        """
        threshold = (
            self.config.confidence_threshold
            if confidence_threshold is None else confidence_threshold
        )
        min_words = self.config.min_word_count if min_word_count is None else min_word_count

        trimmed = (text or "").strip()
        word_count = len(normalized_words(trimmed))

        def fallback(raw_scores: Optional[Dict[str, float]] = None) -> LanguageDetection:
            return LanguageDetection(
                language=fallback_language,
                confidence=0.0,
                reason=DetectionReason.FALLBACK,
                word_count=word_count,
                raw_scores=raw_scores or {"en": 0.0, "es": 0.0},
            )

        def certain(language: SupportedLanguage, reason: DetectionReason) -> LanguageDetection:
            return LanguageDetection(
                language=language,
                confidence=1.0,
                reason=reason,
                word_count=word_count,
                raw_scores={lang.value: float(lang is language) for lang in SupportedLanguage},
            )

        if not trimmed:
            return fallback()

        intent = detect_explicit_intent(trimmed)
        if intent is not None:
            return certain(intent, DetectionReason.EXPLICIT_INTENT)

        if has_non_loanword_accents(trimmed):
            return certain(SupportedLanguage.ES, DetectionReason.ACCENT)

        if word_count == 0 or word_count <= min_words:
            return fallback()

        scores = self.score(trimmed)
        if scores is None:
            return fallback()

        raw_scores = {lang.value: probability for lang, probability in scores.items()}
        top = max(scores, key=lambda lang: (scores[lang], lang is SupportedLanguage.EN))
        other = SupportedLanguage.ES if top is SupportedLanguage.EN else SupportedLanguage.EN
        top_confidence = scores[top]
        gap = top_confidence - scores[other]

        if top_confidence < threshold or gap < self.config.min_confidence_gap:
            logger.debug(
                "LANGUAGE_AMBIGUOUS",
                extra={
                    "text_hash": hash_text_for_audit(trimmed),
                    "candidate": top.value,
                    "confidence": round(top_confidence, 3),
                    "fallback_language": fallback_language.value,
                }
            )
            return fallback(raw_scores)

        return LanguageDetection(
            language=top,
            confidence=top_confidence,
            reason=DetectionReason.STATISTICAL,
            word_count=word_count,
            raw_scores=raw_scores,
        )


# Module-level singleton; the reference models are built once
_classifier: LanguageClassifier | None = None


def get_classifier() -> LanguageClassifier:
    """Get the singleton LanguageClassifier instance."""
    global _classifier
    if _classifier is None:
        _classifier = LanguageClassifier()
    return _classifier


def detect_language(
    text: str,
    fallback_language: SupportedLanguage = SupportedLanguage.EN,
    confidence_threshold: Optional[float] = None,
    min_word_count: Optional[int] = None,
) -> LanguageDetection:
    """Convenience wrapper around the singleton classifier."""
    return get_classifier().detect(
        text,
        fallback_language=fallback_language,
        confidence_threshold=confidence_threshold,
        min_word_count=min_word_count,
    )


def validate_language_consistency(
    previous_language: SupportedLanguage,
    current_text: str,
) -> SupportedLanguage:
    """Language to continue the conversation in.

    A switch away from previous_language only happens on explicit intent,
    Spanish orthography, or a confident statistical result.
    """
    detection = detect_language(current_text, fallback_language=previous_language)
    if detection.language is previous_language:
        return previous_language
    if detection.reason is DetectionReason.FALLBACK:
        return previous_language
    return detection.language
