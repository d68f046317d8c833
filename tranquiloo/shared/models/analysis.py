"""Structured analysis records produced once per user message.

AnalysisResult is what the persistence and UI collaborators receive.
ContextSummary is the raw per-category scoring detail from the pattern
analyzer, kept on the result for audit and never shown to the user.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterator, Optional, Tuple

from .language import SupportedLanguage


class ContextConfidence(Enum):
    """How far a category score cleared its threshold."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class CrisisRiskLevel(Enum):
    """Crisis risk as reported on the analysis record."""
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    CRITICAL = "critical"


class Sentiment(Enum):
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"
    CRISIS = "crisis"


class AnalysisSource(Enum):
    """Which tier of the provider cascade produced the analysis."""
    PRIMARY = "primary"
    SECONDARY = "secondary"
    LOCAL = "local"


@dataclass(frozen=True)
class ContextCategoryScore:
    """Weighted pattern score for one clinical category.

    confidence is only meaningful when threshold_met is true.
    """
    score: int
    matches: Tuple[str, ...]
    threshold_met: bool
    confidence: ContextConfidence

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "matches": list(self.matches),
            "thresholdMet": self.threshold_met,
            "confidence": self.confidence.value,
        }


@dataclass(frozen=True)
class ContextSummary:
    """Scores for every clinical category."""
    general_anxiety: ContextCategoryScore
    panic: ContextCategoryScore
    ptsd: ContextCategoryScore
    ocd: ContextCategoryScore
    depression: ContextCategoryScore
    crisis: ContextCategoryScore
    positive: ContextCategoryScore

    _KEYS = (
        ("generalAnxiety", "general_anxiety"),
        ("panic", "panic"),
        ("ptsd", "ptsd"),
        ("ocd", "ocd"),
        ("depression", "depression"),
        ("crisis", "crisis"),
        ("positive", "positive"),
    )

    def items(self) -> Iterator[Tuple[str, ContextCategoryScore]]:
        """Yield (camelCase name, score) pairs in fixed category order."""
        for key, attribute in self._KEYS:
            yield key, getattr(self, attribute)

    def fired(self) -> Tuple[str, ...]:
        """Names of the categories whose threshold was met."""
        return tuple(key for key, score in self.items() if score.threshold_met)

    def to_dict(self) -> Dict[str, Any]:
        return {key: score.to_dict() for key, score in self.items()}


@dataclass(frozen=True)
class AnalysisResult:
    """Structured clinical-style analysis of one user message.

    Immutable - handed to the caller for persistence; never stored here.
    """
    anxiety_level: int
    gad7_score: int
    triggers: Tuple[str, ...]
    emotions: Tuple[str, ...]
    cognitive_distortions: Tuple[str, ...]
    crisis_risk_level: CrisisRiskLevel
    sentiment: Sentiment
    recommended_interventions: Tuple[str, ...]
    personalized_response: str
    escalation_detected: bool
    context_summary: ContextSummary
    detected_language: Optional[SupportedLanguage] = None
    source: AnalysisSource = AnalysisSource.LOCAL

    def __post_init__(self):
        if not 1 <= self.anxiety_level <= 10:
            raise ValueError(f"Anxiety level must be 1-10, got {self.anxiety_level}")
        if not 0 <= self.gad7_score <= 21:
            raise ValueError(f"GAD-7 score must be 0-21, got {self.gad7_score}")
        if self.escalation_detected != (self.anxiety_level > 7):
            raise ValueError("escalation_detected must equal anxiety_level > 7")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for API responses and persistence."""
        return {
            "anxietyLevel": self.anxiety_level,
            "gad7Score": self.gad7_score,
            "triggers": list(self.triggers),
            "emotions": list(self.emotions),
            "cognitiveDistortions": list(self.cognitive_distortions),
            "crisisRiskLevel": self.crisis_risk_level.value,
            "sentiment": self.sentiment.value,
            "recommendedInterventions": list(self.recommended_interventions),
            "personalizedResponse": self.personalized_response,
            "escalationDetected": self.escalation_detected,
            "contextSummary": self.context_summary.to_dict(),
            "detectedLanguage": self.detected_language.value if self.detected_language else None,
            "source": self.source.value,
        }
