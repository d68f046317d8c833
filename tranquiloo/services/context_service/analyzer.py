"""Weighted pattern context analyzer.

Scores a message against seven clinical categories. Every pattern in a
category is independent: each match adds its weight and its description
to the category. A category fires once its accumulated score reaches the
category threshold.

Pure and deterministic - identical input always yields identical scores.
"""
import logging
from typing import Optional, Tuple

from tranquiloo.shared.models import ContextCategoryScore, ContextConfidence, ContextSummary
from tranquiloo.shared.utils import normalize_for_matching
from .config import CATEGORY_TABLES, ContextThresholds, PatternDefinition

logger = logging.getLogger(__name__)


def compute_confidence(score: int, threshold: int, thresholds: ContextThresholds) -> ContextConfidence:
    """Confidence band from the distance between score and threshold."""
    if score >= threshold + thresholds.high_margin:
        return ContextConfidence.HIGH
    if score >= threshold + thresholds.medium_margin:
        return ContextConfidence.MEDIUM
    return ContextConfidence.LOW


class ContextAnalyzer:
    """Scores normalized text against the category pattern tables."""

    def __init__(self, thresholds: Optional[ContextThresholds] = None):
        self.thresholds = thresholds or ContextThresholds()

    def evaluate(
        self,
        normalized_text: str,
        patterns: Tuple[PatternDefinition, ...],
        threshold: int,
    ) -> ContextCategoryScore:
        """Score already-normalized text against one category table."""
        score = 0
        matches = []
        for definition in patterns:
            if definition.pattern.search(normalized_text):
                score += definition.weight
                matches.append(definition.description)

        return ContextCategoryScore(
            score=score,
            matches=tuple(matches),
            threshold_met=score >= threshold,
            confidence=compute_confidence(score, threshold, self.thresholds),
        )

    def analyze(self, text: str) -> ContextSummary:
        """Score a raw message against every category.

        Args:
            text: Raw message text

        Returns:
            ContextSummary with one ContextCategoryScore per category
        """
        normalized = normalize_for_matching(text or "")
        scores = {
            name: self.evaluate(normalized, patterns, getattr(self.thresholds, attribute))
            for name, (patterns, attribute) in CATEGORY_TABLES.items()
        }
        summary = ContextSummary(**scores)

        fired = summary.fired()
        if fired:
            logger.debug(
                "CONTEXT_CATEGORIES_FIRED",
                extra={
                    "categories": list(fired),
                    "pattern_version": self.thresholds.pattern_version,
                }
            )
        return summary


# Module-level singleton; the pattern tables are read-only
_analyzer: ContextAnalyzer | None = None


def get_analyzer() -> ContextAnalyzer:
    """Get the singleton ContextAnalyzer instance."""
    global _analyzer
    if _analyzer is None:
        _analyzer = ContextAnalyzer()
    return _analyzer


def analyze_context(text: str) -> ContextSummary:
    """Convenience function to score a message with default thresholds."""
    return get_analyzer().analyze(text)
