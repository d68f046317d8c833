"""Deterministic local analysis: the backstop when no provider answers.

Composes the context analyzer, the indicator detector and the language
classifier, then walks a fixed priority ladder to pick a response
template and raise the anxiety level. Pure computation apart from the
injected random source used to vary multi-response templates.
"""
import logging
import random
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from tranquiloo.shared.models import (
    AnalysisResult,
    AnalysisSource,
    ContextSummary,
    LanguageDetection,
    Sentiment,
    SupportedLanguage,
)
from tranquiloo.shared.utils import hash_text_for_audit, normalize_apostrophes, strip_invisible
from tranquiloo.services.context_service import (
    ContextAnalyzer,
    detect_cognitive_distortions,
    detect_triggers,
    get_analyzer,
)
from tranquiloo.services.indicator_service import IndicatorDetector, IndicatorResult, get_detector
from tranquiloo.services.language_service import LanguageClassifier, get_classifier
from tranquiloo.services.safety_service import fallback_keyword_assessment
from . import templates
from .config import SeverityLadder
from .severity import base_anxiety_level, clamp, derive_crisis_risk_level
from .templates import ResponseTemplate

logger = logging.getLogger(__name__)

RELATIONSHIP_PATTERN = re.compile(
    r"\b(?:wife|husband|partner|boyfriend|girlfriend|spouse|cheat(?:ed|ing)?)\b"
)
VIOLENT_PATTERN = re.compile(r"\b(?:hurt|kill|die)\b")
DEPRESSIVE_PATTERN = re.compile(r"\b(?:depressed|sad|hopeless)\b")
GAD_PATTERN = re.compile(r"generalized anxiety|\bgad\b|worry about everything")
INSOMNIA_PATTERN = re.compile(r"can't sleep|\binsomnia\b")

NOT_ANXIOUS_PHRASES: Tuple[str, ...] = (
    "not anxious", "not worried", "not scared", "not nervous",
    "i am okay", "i'm okay", "i am fine", "i'm fine",
    "feeling better", "feeling good", "feeling okay",
    "no anxiety", "not feeling anxious",
)
NO_REPLIES = frozenset({"no", "nope", "not really"})
YES_REPLIES = frozenset({"yes", "yeah", "yep"})
SHORT_REPLY_MAX_CHARS = 3

_CLINICAL_CATEGORIES = ("panic", "ptsd", "ocd", "depression", "crisis")


@dataclass(frozen=True)
class MessageSignals:
    """Everything the ladder branches on, computed once per message."""
    lowered: str
    reply: str
    context: ContextSummary
    indicators: IndicatorResult
    crisis_keywords: bool
    not_anxious: bool
    relationship: bool
    violent: bool
    depressive: bool

    @property
    def hallucination(self) -> bool:
        return self.indicators.has_indicators

    @property
    def anxiety_fired(self) -> bool:
        """General anxiety fired, unless the user states they are not anxious.

        "not anxious" itself matches the explicit-anxiety pattern.
        """
        return self.context.general_anxiety.threshold_met and not self.not_anxious

    @property
    def clinical_fired(self) -> bool:
        return self.anxiety_fired or any(
            getattr(self.context, name).threshold_met for name in _CLINICAL_CATEGORIES
        )

    @property
    def crisis_signal(self) -> bool:
        return self.context.crisis.threshold_met or self.crisis_keywords

    @property
    def positive_only(self) -> bool:
        """Positive statement with nothing pointing the other way."""
        return (
            (self.not_anxious or self.context.positive.threshold_met)
            and not self.clinical_fired
            and not self.hallucination
            and not self.crisis_keywords
            and not self.violent
            and not self.depressive
        )


def merge_unique(*groups: Iterable[str]) -> Tuple[str, ...]:
    """Concatenate label groups keeping first-seen order."""
    seen: List[str] = []
    for group in groups:
        for label in group:
            if label not in seen:
                seen.append(label)
    return tuple(seen)


class LocalGenerator:
    """Provider-free analysis generator."""

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        ladder: Optional[SeverityLadder] = None,
        analyzer: Optional[ContextAnalyzer] = None,
        detector: Optional[IndicatorDetector] = None,
        classifier: Optional[LanguageClassifier] = None,
    ):
        """Initialize generator.

        Args:
            rng: Random source for multi-response templates; seed it for
                reproducible output
            ladder: Severity floors
            analyzer: Context analyzer (defaults to the shared instance)
            detector: Indicator detector (defaults to the shared instance)
            classifier: Language classifier (defaults to the shared instance)
        """
        self.rng = rng or random.Random()
        self.ladder = ladder or SeverityLadder()
        self.analyzer = analyzer or get_analyzer()
        self.detector = detector or get_detector()
        self.classifier = classifier or get_classifier()

    def signals(self, message: str) -> MessageSignals:
        lowered = normalize_apostrophes(strip_invisible(message or "")).lower()
        return MessageSignals(
            lowered=lowered,
            reply=lowered.strip().strip(".!?").strip(),
            context=self.analyzer.analyze(message),
            indicators=self.detector.detect(message),
            crisis_keywords=fallback_keyword_assessment(message).requires_screening,
            not_anxious=any(phrase in lowered for phrase in NOT_ANXIOUS_PHRASES),
            relationship=bool(RELATIONSHIP_PATTERN.search(lowered)),
            violent=bool(VIOLENT_PATTERN.search(lowered)),
            depressive=bool(DEPRESSIVE_PATTERN.search(lowered)),
        )

    def severity(self, signals: MessageSignals) -> int:
        """Anxiety level before template-specific floors."""
        ladder = self.ladder
        context = signals.context
        level = base_anxiety_level(context.general_anxiety.score, ladder)
        if signals.not_anxious:
            level = 1

        if context.panic.threshold_met:
            level = max(level, ladder.panic_floor)
        if context.ptsd.threshold_met:
            level = max(level, ladder.ptsd_floor)
        if context.ocd.threshold_met:
            level = max(level, ladder.ocd_floor)
        if context.depression.threshold_met:
            level = max(level, ladder.depression_floor)
        if signals.hallucination or context.crisis.threshold_met:
            level = max(level, ladder.crisis_floor)

        if signals.hallucination:
            level = 10
        elif signals.violent:
            level = max(level, ladder.violent_language_floor)
        elif signals.depressive:
            level = max(level, ladder.depressive_language_floor)
        return clamp(level, 1, 10)

    def select_template(
        self, signals: MessageSignals, level: int
    ) -> Tuple[ResponseTemplate, int]:
        """Walk the priority ladder.

        Returns:
            (template, adjusted anxiety level)
        """
        ladder = self.ladder
        context = signals.context

        if signals.hallucination:
            return templates.HALLUCINATION, level
        if context.panic.threshold_met:
            return templates.PANIC, max(level, ladder.panic_floor)
        if context.ptsd.threshold_met:
            return templates.PTSD, max(level, ladder.ptsd_floor)
        if context.ocd.threshold_met:
            return templates.OCD, max(level, ladder.ocd_floor)
        if context.crisis.threshold_met:
            return templates.CRISIS, level
        if signals.relationship and context.depression.threshold_met:
            return templates.BETRAYAL, level
        if not signals.crisis_signal:
            if signals.reply in NO_REPLIES:
                return templates.NO_REPLY, level
            if signals.reply in YES_REPLIES:
                return templates.YES_REPLY, level
            if len(signals.reply) <= SHORT_REPLY_MAX_CHARS:
                return templates.SHORT_REPLY, level
        if signals.positive_only:
            return templates.POSITIVE, min(level, ladder.positive_ceiling)
        if GAD_PATTERN.search(signals.lowered):
            return templates.GAD, max(level, ladder.gad_floor)
        if level > 6:
            return templates.ELEVATED, level
        if context.depression.threshold_met:
            return templates.SADNESS, max(level, ladder.depression_floor)
        if signals.anxiety_fired:
            return templates.GENERAL_ANXIETY, max(level, ladder.general_anxiety_floor)
        if INSOMNIA_PATTERN.search(signals.lowered):
            return templates.INSOMNIA, max(level, ladder.insomnia_floor)
        return templates.CHECK_IN, level

    def emotional_state(self, signals: MessageSignals) -> Tuple[Tuple[str, ...], Sentiment, int]:
        """Emotions, sentiment and GAD-7 proxy.

        Later signals override the sentiment of earlier ones; crisis
        sentiment is never downgraded.
        """
        context = signals.context
        emotions: List[str] = []
        sentiment = Sentiment.NEUTRAL
        gad7 = min(21, context.general_anxiety.score * 3)

        def negative(current: Sentiment) -> Sentiment:
            return current if current is Sentiment.CRISIS else Sentiment.NEGATIVE

        if signals.not_anxious:
            emotions += ["calm", "okay"]
            sentiment = Sentiment.POSITIVE
            gad7 = 0
        if signals.hallucination:
            emotions += ["confusion", "distress", "fear"]
            sentiment = Sentiment.CRISIS
            gad7 = max(gad7, 15)
        if signals.crisis_signal:
            emotions += ["despair", "hopelessness"]
            sentiment = Sentiment.CRISIS
            gad7 = max(gad7, 18)
        if signals.anxiety_fired:
            emotions.append("anxiety")
            sentiment = negative(sentiment)
            gad7 = max(gad7, 10)
        if context.panic.threshold_met:
            emotions.append("panic")
            sentiment = negative(sentiment)
            gad7 = max(gad7, 14)
        if context.depression.threshold_met:
            emotions.append("sadness")
            sentiment = negative(sentiment)
            gad7 = max(gad7, 8)
        if signals.positive_only:
            if not emotions:
                emotions.append("contentment")
            sentiment = Sentiment.POSITIVE
            gad7 = min(gad7, 2)

        return merge_unique(emotions), sentiment, clamp(gad7, 0, 21)

    def generate(
        self,
        message: str,
        fallback_language: SupportedLanguage = SupportedLanguage.EN,
        language: Optional[LanguageDetection] = None,
    ) -> AnalysisResult:
        """Build a complete analysis without any network call.

        Never raises on string input.

        Args:
            message: Raw user message
            fallback_language: Language used when detection is not decisive
            language: Precomputed detection, if the caller already has one

        Returns:
            AnalysisResult with source LOCAL
        """
        signals = self.signals(message)
        template, level = self.select_template(signals, self.severity(signals))
        level = clamp(level, 1, 10)
        emotions, sentiment, gad7 = self.emotional_state(signals)

        if language is None:
            language = self.classifier.detect(message, fallback_language=fallback_language)

        if len(template.responses) == 1:
            response = template.responses[0]
        else:
            response = self.rng.choice(template.responses)

        result = AnalysisResult(
            anxiety_level=level,
            gad7_score=gad7,
            triggers=merge_unique(template.triggers, detect_triggers(message)),
            emotions=emotions,
            cognitive_distortions=tuple(detect_cognitive_distortions(message)),
            crisis_risk_level=derive_crisis_risk_level(
                level, signals.crisis_signal or signals.hallucination
            ),
            sentiment=sentiment,
            recommended_interventions=template.coping_strategies,
            personalized_response=response,
            escalation_detected=level > 7,
            context_summary=signals.context,
            detected_language=language.language,
            source=AnalysisSource.LOCAL,
        )

        logger.info(
            "LOCAL_ANALYSIS_GENERATED",
            extra={
                "text_hash": hash_text_for_audit(message),
                "template": template.name,
                "anxiety_level": level,
                "categories_fired": list(signals.context.fired()),
                "indicators": signals.hallucination,
                "pattern_version": self.ladder.pattern_version,
            }
        )
        return result
