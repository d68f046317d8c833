"""Language detection result model."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict


class SupportedLanguage(Enum):
    """Languages the pipeline can answer in."""
    EN = "en"
    ES = "es"

    @classmethod
    def coerce(cls, value: Any, default: "SupportedLanguage") -> "SupportedLanguage":
        """Parse a language hint, returning default for anything unknown."""
        if isinstance(value, SupportedLanguage):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return default


class DetectionReason(Enum):
    """Which layer of the classifier decided the language."""
    EXPLICIT_INTENT = "explicit-intent"
    ACCENT = "accent"
    STATISTICAL = "statistical"
    FALLBACK = "fallback"

    @property
    def is_deterministic(self) -> bool:
        return self in (DetectionReason.EXPLICIT_INTENT, DetectionReason.ACCENT)


@dataclass(frozen=True)
class LanguageDetection:
    """Outcome of classifying one message."""
    language: SupportedLanguage
    confidence: float
    reason: DetectionReason
    word_count: int
    raw_scores: Dict[str, float] = field(default_factory=dict)

    def __post_init__(self):
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"Confidence must be 0.0-1.0, got {self.confidence}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "language": self.language.value,
            "confidence": round(self.confidence, 3),
            "reason": self.reason.value,
            "wordCount": self.word_count,
            "rawScores": {k: round(v, 4) for k, v in self.raw_scores.items()},
        }
