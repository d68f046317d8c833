"""Severity arithmetic shared by the provider and local analysis paths."""
import math
from typing import Optional

from tranquiloo.shared.models import CrisisRiskLevel, Sentiment
from .config import SeverityLadder

_DEFAULT_LADDER = SeverityLadder()


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (2.5 -> 3)."""
    return int(math.floor(value + 0.5))


def clamp(value: int, lower: int, upper: int) -> int:
    return max(lower, min(upper, value))


def base_anxiety_level(general_anxiety_score: int, ladder: Optional[SeverityLadder] = None) -> int:
    """Starting level from the general-anxiety score, clamped to 1-10."""
    ladder = ladder or _DEFAULT_LADDER
    raw = ladder.base_level + general_anxiety_score * ladder.general_anxiety_multiplier
    return clamp(round_half_up(raw), 1, 10)


def gad7_from_level(anxiety_level: int, ladder: Optional[SeverityLadder] = None) -> int:
    """GAD-7 proxy derived from an anxiety level, clamped to 0-21."""
    ladder = ladder or _DEFAULT_LADDER
    return clamp(round_half_up(anxiety_level * ladder.gad7_per_level), 0, 21)


def derive_crisis_risk_level(anxiety_level: int, crisis_signal: bool) -> CrisisRiskLevel:
    """Crisis level for the analysis record.

    With a crisis signal the level is CRITICAL at anxiety 9+, otherwise
    HIGH. Without one: HIGH at 8+, MODERATE at 6+, else LOW.
    """
    if crisis_signal:
        return CrisisRiskLevel.CRITICAL if anxiety_level >= 9 else CrisisRiskLevel.HIGH
    if anxiety_level >= 8:
        return CrisisRiskLevel.HIGH
    if anxiety_level >= 6:
        return CrisisRiskLevel.MODERATE
    return CrisisRiskLevel.LOW


def derive_sentiment(anxiety_level: int, crisis_signal: bool) -> Sentiment:
    if crisis_signal:
        return Sentiment.CRISIS
    if anxiety_level >= 6:
        return Sentiment.NEGATIVE
    if anxiety_level <= 2:
        return Sentiment.POSITIVE
    return Sentiment.NEUTRAL
