"""Provider payload normalization.

Providers name fields inconsistently. Each record field is resolved from
an ordered list of candidate keys, first usable value wins:

    anxietyLevel          anxietyLevel > anxiety_level > anxietyScore
    gad7Score             gad7Score > gad7_score (else derived from level)
    triggers              triggers > anxietyTriggers > detectedTriggers
    emotions              emotions > detectedEmotions
    cognitiveDistortions  cognitiveDistortions > cognitive_distortions
                          (else detected locally)
    crisisRiskLevel       crisisRiskLevel > crisis_risk_level (else derived)
    sentiment             sentiment (else derived)
    interventions         copingStrategies > recommendedInterventions
                          > coping_strategies
    personalizedResponse  personalizedResponse > personalized_response
                          > response
    detectedLanguage      detectedLanguage > language (else classifier)

A payload without a usable personalizedResponse is rejected, which sends
the orchestrator on to the next tier.
"""
import logging
import math
from typing import Any, Mapping, Optional, Sequence, Tuple

from tranquiloo.shared.models import (
    AnalysisResult,
    AnalysisSource,
    ContextSummary,
    CrisisRiskLevel,
    LanguageDetection,
    Sentiment,
    SupportedLanguage,
)
from tranquiloo.services.context_service import detect_cognitive_distortions
from .config import SeverityLadder
from .severity import (
    base_anxiety_level,
    clamp,
    derive_crisis_risk_level,
    derive_sentiment,
    gad7_from_level,
    round_half_up,
)

logger = logging.getLogger(__name__)

ANXIETY_LEVEL_KEYS = ("anxietyLevel", "anxiety_level", "anxietyScore")
GAD7_KEYS = ("gad7Score", "gad7_score")
TRIGGER_KEYS = ("triggers", "anxietyTriggers", "detectedTriggers")
EMOTION_KEYS = ("emotions", "detectedEmotions")
DISTORTION_KEYS = ("cognitiveDistortions", "cognitive_distortions")
CRISIS_LEVEL_KEYS = ("crisisRiskLevel", "crisis_risk_level")
SENTIMENT_KEYS = ("sentiment",)
INTERVENTION_KEYS = ("copingStrategies", "recommendedInterventions", "coping_strategies")
RESPONSE_KEYS = ("personalizedResponse", "personalized_response", "response")
LANGUAGE_KEYS = ("detectedLanguage", "language")

MAX_LABEL_LENGTH = 120


def _as_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if not isinstance(value, (int, float, str)):
        return None
    try:
        number = float(value.strip() if isinstance(value, str) else value)
    except (ValueError, OverflowError):
        return None
    return number if math.isfinite(number) else None


def _as_labels(value: Any) -> Optional[Tuple[str, ...]]:
    """List of non-empty strings, deduplicated; None if not a list."""
    if not isinstance(value, (list, tuple)):
        return None
    labels = []
    for item in value:
        if isinstance(item, str):
            label = " ".join(item.split())[:MAX_LABEL_LENGTH]
            if label and label not in labels:
                labels.append(label)
    return tuple(labels)


def first_number(payload: Mapping[str, Any], keys: Sequence[str]) -> Optional[float]:
    for key in keys:
        number = _as_number(payload.get(key))
        if number is not None:
            return number
    return None


def first_labels(payload: Mapping[str, Any], keys: Sequence[str]) -> Optional[Tuple[str, ...]]:
    for key in keys:
        labels = _as_labels(payload.get(key))
        if labels is not None:
            return labels
    return None


def first_text(payload: Mapping[str, Any], keys: Sequence[str]) -> Optional[str]:
    for key in keys:
        value = payload.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def first_enum(payload: Mapping[str, Any], keys: Sequence[str], enum_type):
    for key in keys:
        value = payload.get(key)
        if isinstance(value, str):
            try:
                return enum_type(value.strip().lower())
            except ValueError:
                continue
    return None


def normalize_provider_payload(
    payload: Mapping[str, Any],
    message: str,
    source: AnalysisSource,
    context: ContextSummary,
    language: LanguageDetection,
    crisis_signal: bool = False,
    ladder: Optional[SeverityLadder] = None,
) -> Optional[AnalysisResult]:
    """Turn a provider JSON object into an AnalysisResult.

    Args:
        payload: Parsed provider object
        message: Raw user message (for locally detected distortions)
        source: Tier that produced the payload
        context: Local context scores, attached for audit
        language: Local language detection, used when the provider
            reports no valid language
        crisis_signal: Local crisis evidence, used when deriving the
            crisis level and sentiment
        ladder: Severity constants

    Returns:
        AnalysisResult, or None when the payload has no usable response
    """
    response = first_text(payload, RESPONSE_KEYS)
    if response is None:
        logger.warning(
            "PROVIDER_PAYLOAD_REJECTED",
            extra={"source": source.value, "reason": "missing_personalized_response"}
        )
        return None

    level_value = first_number(payload, ANXIETY_LEVEL_KEYS)
    if level_value is None:
        anxiety_level = base_anxiety_level(context.general_anxiety.score, ladder)
    else:
        anxiety_level = clamp(round_half_up(level_value), 1, 10)

    gad7_value = first_number(payload, GAD7_KEYS)
    if gad7_value is None:
        gad7 = gad7_from_level(anxiety_level, ladder)
    else:
        gad7 = clamp(round_half_up(gad7_value), 0, 21)

    distortions = first_labels(payload, DISTORTION_KEYS)
    if distortions is None:
        distortions = tuple(detect_cognitive_distortions(message))

    crisis_level = first_enum(payload, CRISIS_LEVEL_KEYS, CrisisRiskLevel)
    if crisis_level is None:
        crisis_level = derive_crisis_risk_level(anxiety_level, crisis_signal)

    sentiment = first_enum(payload, SENTIMENT_KEYS, Sentiment)
    if sentiment is None:
        sentiment = derive_sentiment(anxiety_level, crisis_signal)

    detected_language = first_enum(payload, LANGUAGE_KEYS, SupportedLanguage)
    if detected_language is None:
        detected_language = language.language

    return AnalysisResult(
        anxiety_level=anxiety_level,
        gad7_score=gad7,
        triggers=first_labels(payload, TRIGGER_KEYS) or (),
        emotions=first_labels(payload, EMOTION_KEYS) or (),
        cognitive_distortions=distortions,
        crisis_risk_level=crisis_level,
        sentiment=sentiment,
        recommended_interventions=first_labels(payload, INTERVENTION_KEYS) or (),
        personalized_response=response,
        escalation_detected=anxiety_level > 7,
        context_summary=context,
        detected_language=detected_language,
        source=source,
    )
