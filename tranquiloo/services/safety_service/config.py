"""Crisis assessor configuration, keyword tiers and C-SSRS protocol.

Keyword tiers are the provider-independent safety net: when the crisis
model is unreachable or returns garbage, these decide the risk level.
Changing them changes crisis-detection sensitivity and must go through
clinical review; bump pattern_version on every edit.

Source: Columbia-Suicide Severity Rating Scale (C-SSRS) screener
https://cssrs.columbia.edu/the-columbia-scale-c-ssrs/cssrs-for-communities-and-healthcare/
"""
from dataclasses import dataclass
from types import MappingProxyType
from typing import FrozenSet, Mapping, Tuple

from tranquiloo.shared.models import RiskLevel


@dataclass(frozen=True)
class SafetyConfig:
    """Configuration for crisis assessment."""

    # Crisis model call parameters; the model name comes from ProviderSettings
    crisis_temperature: float = 0.3
    crisis_max_tokens: int = 300

    # Version tracking for audit trail
    pattern_version: str = "2026.10.01"


# Checked in this order; the first tier with any match wins
KEYWORD_TIERS: Tuple[Tuple[RiskLevel, Tuple[str, ...]], ...] = (
    (RiskLevel.IMMINENT, (
        "going to kill myself",
        "going to end my life",
        "tonight",
        "goodbye forever",
        "final message",
    )),
    (RiskLevel.HIGH, (
        "suicide",
        "kill myself",
        "end my life",
        "want to die",
        "take my life",
        "have a plan",
    )),
    (RiskLevel.MODERATE, (
        "wish i was dead",
        "better off dead",
        "no reason to live",
        "can't go on",
        "ending it",
        "not worth living",
    )),
)

TIER_REASONING: Mapping[RiskLevel, str] = MappingProxyType({
    RiskLevel.IMMINENT: "Imminent risk keywords detected - immediate intervention needed",
    RiskLevel.HIGH: "Active suicidal ideation keywords detected",
    RiskLevel.MODERATE: "Passive ideation or hopelessness detected",
    RiskLevel.NONE: "No crisis indicators detected",
})


@dataclass(frozen=True)
class ScreeningQuestion:
    """One step of the C-SSRS ladder."""
    number: int
    text: str
    category: str           # ideation, method, plan, means, intent
    risk_if_yes: RiskLevel


CSSRS_QUESTIONS: Tuple[ScreeningQuestion, ...] = (
    ScreeningQuestion(1, "Have you had thoughts of killing yourself?",
                      "ideation", RiskLevel.MODERATE),
    ScreeningQuestion(2, "Do you feel the world would be better without you?",
                      "ideation", RiskLevel.MODERATE),
    ScreeningQuestion(3, "Have you thought about how you might end your life?",
                      "method", RiskLevel.HIGH),
    ScreeningQuestion(4, "Do you have a specific plan to end your life?",
                      "plan", RiskLevel.HIGH),
    ScreeningQuestion(5, "Do you have access to means to harm yourself (e.g., pills, weapons)?",
                      "means", RiskLevel.IMMINENT),
    ScreeningQuestion(6, "Do you intend to act on these thoughts?",
                      "intent", RiskLevel.IMMINENT),
)

ANSWER_SUFFIX = " (Please answer yes or no)"

RECOMMENDATIONS: Mapping[RiskLevel, str] = MappingProxyType({
    RiskLevel.IMMINENT: "IMMEDIATE CRISIS INTERVENTION REQUIRED. Call 911 or go to nearest emergency room.",
    RiskLevel.HIGH: "HIGH RISK. Call 988 Suicide & Crisis Lifeline immediately. Do not wait.",
    RiskLevel.MODERATE: "MODERATE RISK. Please call 988 or text HOME to 741741 to speak with a trained counselor.",
    RiskLevel.LOW: "Continue monitoring. Reach out to a mental health professional if feelings worsen.",
})

# Answers in matching form ("sí" becomes "si") counted as yes
YES_ANSWERS: FrozenSet[str] = frozenset({
    "yes", "y", "yeah", "yep", "true", "si",
})
