"""Indirect-threat / hallucination indicator detector.

Three additive signal sources:
- Direct clinical keywords ("hallucinating", "paranoid")
- Contextual phrases describing perceptual or referential anomalies
- An agency token with a surveillance phrase inside a token window

hasIndicators needs a total score of at least the indicator threshold,
so a single contextual phrase on its own never fires.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from tranquiloo.shared.models import ContextConfidence
from tranquiloo.shared.utils import (
    hash_text_for_audit,
    normalize_apostrophes,
    normalize_for_matching,
    strip_invisible,
)
from .config import (
    AGENCY_MENTION,
    AGENCY_SURVEILLANCE_LABEL,
    AGENCY_TOKENS,
    CONTEXT_PATTERNS,
    DIRECT_KEYWORDS,
    SURVEILLANCE_TERMS,
    IndicatorConfig,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IndicatorResult:
    """Outcome of indicator detection.

    confidence is only meaningful when has_indicators is true; matches is
    empty when it is false.
    """
    has_indicators: bool
    matches: Tuple[str, ...]
    confidence: ContextConfidence
    score: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hasIndicators": self.has_indicators,
            "matches": list(self.matches),
            "confidence": self.confidence.value,
        }


class IndicatorDetector:
    """Pure detector over the indicator tables."""

    def __init__(self, config: Optional[IndicatorConfig] = None):
        self.config = config or IndicatorConfig()

    def has_agency_surveillance(self, text: str) -> bool:
        """True if a surveillance phrase is within the window of an agency token."""
        if not AGENCY_MENTION.search(text):
            return False

        tokens = normalize_for_matching(text).split()
        radius = self.config.window_radius
        for index, token in enumerate(tokens):
            if token not in AGENCY_TOKENS:
                continue
            window = " ".join(tokens[max(0, index - radius):index + radius + 1])
            if any(term in window for term in SURVEILLANCE_TERMS):
                return True
        return False

    def detect(self, text: str) -> IndicatorResult:
        """Score a message for psychosis / indirect-threat indicators.

        Args:
            text: Raw message text

        Returns:
            IndicatorResult
        """
        cleaned = normalize_apostrophes(strip_invisible(text or ""))
        matches: List[str] = []
        score = 0

        for pattern, label in DIRECT_KEYWORDS:
            if pattern.search(cleaned):
                matches.append(label)
                score += self.config.direct_weight

        for pattern, label in CONTEXT_PATTERNS:
            if pattern.search(cleaned):
                matches.append(label)
                score += self.config.context_weight

        if self.has_agency_surveillance(cleaned):
            matches.append(AGENCY_SURVEILLANCE_LABEL)
            score += self.config.agency_weight

        if score < self.config.indicator_threshold:
            return IndicatorResult(
                has_indicators=False,
                matches=(),
                confidence=ContextConfidence.LOW,
                score=score,
            )

        if score >= self.config.high_threshold:
            confidence = ContextConfidence.HIGH
        elif score >= self.config.medium_threshold:
            confidence = ContextConfidence.MEDIUM
        else:
            confidence = ContextConfidence.LOW

        logger.warning(
            "PSYCHOSIS_INDICATORS_DETECTED",
            extra={
                "text_hash": hash_text_for_audit(cleaned),
                "score": score,
                "confidence": confidence.value,
                "match_count": len(matches),
                "pattern_version": self.config.pattern_version,
            }
        )
        return IndicatorResult(
            has_indicators=True,
            matches=tuple(matches),
            confidence=confidence,
            score=score,
        )


# Module-level singleton
_detector: IndicatorDetector | None = None


def get_detector() -> IndicatorDetector:
    """Get the singleton IndicatorDetector instance."""
    global _detector
    if _detector is None:
        _detector = IndicatorDetector()
    return _detector


def detect_indicators(text: str) -> IndicatorResult:
    """Convenience function using the default configuration."""
    return get_detector().detect(text)
