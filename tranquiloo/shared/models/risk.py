"""Crisis risk and C-SSRS screening domain models.

This file defines the enums and records produced by the crisis gate.
All records are immutable; screening state round-trips through the caller
and is never held server-side.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Tuple


class RiskLevel(Enum):
    """Crisis risk levels for a single message.

    Ordered by severity. Anything at MODERATE or above opens the
    C-SSRS screening dialogue.
    """
    NONE = "none"           # No indicators
    LOW = "low"             # Vague distress, no ideation
    MODERATE = "moderate"   # Passive ideation, no plan or intent
    HIGH = "high"           # Active ideation with method or plan
    IMMINENT = "imminent"   # Intent + means + plan

    @property
    def rank(self) -> int:
        return _RISK_ORDER.index(self)

    @property
    def requires_screening(self) -> bool:
        return self.rank >= RiskLevel.MODERATE.rank

    @classmethod
    def parse(cls, value: Any) -> "RiskLevel":
        """Parse a loosely formatted level such as " High ".

        Raises:
            ValueError: If the value names no known level
        """
        if isinstance(value, RiskLevel):
            return value
        return cls(str(value).strip().lower())


_RISK_ORDER = (
    RiskLevel.NONE,
    RiskLevel.LOW,
    RiskLevel.MODERATE,
    RiskLevel.HIGH,
    RiskLevel.IMMINENT,
)


@dataclass(frozen=True)
class CrisisAssessment:
    """Result of crisis assessment for one message.

    Immutable - the screening decision cannot drift from the risk level:
    requires_screening is true iff risk_level is MODERATE or higher.
    """
    risk_level: RiskLevel
    requires_screening: bool
    reasoning: str
    detected_indicators: Tuple[str, ...] = ()
    source: str = "keyword_fallback"

    def __post_init__(self):
        if self.requires_screening != self.risk_level.requires_screening:
            raise ValueError(
                f"requires_screening={self.requires_screening} is inconsistent "
                f"with risk level {self.risk_level.value}"
            )

    @classmethod
    def from_level(
        cls,
        risk_level: RiskLevel,
        reasoning: str,
        detected_indicators: Tuple[str, ...] = (),
        source: str = "keyword_fallback",
    ) -> "CrisisAssessment":
        """Build an assessment whose screening flag is derived from the level."""
        return cls(
            risk_level=risk_level,
            requires_screening=risk_level.requires_screening,
            reasoning=reasoning,
            detected_indicators=tuple(detected_indicators),
            source=source,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "riskLevel": self.risk_level.value,
            "requiresScreening": self.requires_screening,
            "reasoning": self.reasoning,
            "detectedIndicators": list(self.detected_indicators),
            "source": self.source,
        }


@dataclass(frozen=True)
class ScreeningState:
    """Caller-owned C-SSRS progress.

    responses holds one normalized yes/no answer per question already
    asked, in protocol order.
    """
    responses: Tuple[bool, ...] = ()
    protocol_length: int = 6

    @property
    def next_question_index(self) -> int:
        """1-based number of the next question to ask."""
        return len(self.responses) + 1

    @property
    def is_complete(self) -> bool:
        return self.next_question_index > self.protocol_length

    @property
    def is_active(self) -> bool:
        return bool(self.responses) and not self.is_complete


@dataclass(frozen=True)
class ScreeningOutcome:
    """Final risk determined from a completed C-SSRS screening."""
    final_risk_level: RiskLevel
    recommendation: str
    should_alert: bool
    positive_questions: Tuple[int, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "finalRiskLevel": self.final_risk_level.value,
            "recommendation": self.recommendation,
            "shouldAlert": self.should_alert,
            "positiveQuestions": list(self.positive_questions),
        }
