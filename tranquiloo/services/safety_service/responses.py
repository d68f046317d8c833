"""Fixed safety-message templates for the crisis gate.

Every template names at least one crisis line, so whatever path produced
the assessment, the user sees where to get help. Selection is a pure
lookup and has no failure mode.
"""
from types import MappingProxyType
from typing import Mapping, Optional

from tranquiloo.shared.models import CrisisAssessment, RiskLevel, ScreeningOutcome

HOTLINE_988 = "988 - Suicide & Crisis Lifeline (24/7, free, confidential)"
HOTLINE_TEXT = "Text HOME to 741741 - Crisis Text Line"

IMMEDIATE_RESOURCES = (
    "**IMMEDIATE RESOURCES:**\n"
    f"- **Call {HOTLINE_988}**\n"
    f"- **{HOTLINE_TEXT}**\n"
    "- **Call 911** - For immediate emergency"
)

COMPLETED_SCREENING_TEMPLATE = (
    "I'm very concerned about your safety based on your responses.\n\n"
    "{recommendation}\n\n"
    f"{IMMEDIATE_RESOURCES}\n\n"
    "You don't have to face this alone. Professional help is available right now.\n\n"
    "**Note:** I'm an AI wellness companion, not equipped for crisis situations. "
    "Please reach out to one of these services immediately."
)

_SCREENING_INTRO = (
    "Before we continue, I need to ask you a few quick questions to make sure "
    "you're okay. Please answer honestly - this helps me understand how best "
    "to support you."
)

RISK_TEMPLATES: Mapping[RiskLevel, str] = MappingProxyType({
    RiskLevel.IMMINENT: (
        "I'm extremely concerned about what you're sharing. This is a crisis situation.\n\n"
        "**CALL 911 NOW** or go to your nearest emergency room.\n\n"
        f"- **Call {HOTLINE_988}**\n"
        f"- **{HOTLINE_TEXT}**\n\n"
        "If you're not safe right now, please call one of these numbers immediately. "
        "They have trained counselors available 24/7.\n\n"
        "You don't have to face this alone. Help is available right now."
    ),
    RiskLevel.HIGH: (
        "I'm very concerned about your safety. " + _SCREENING_INTRO + "\n\n"
        "If you might act on these thoughts, call 988 now or text HOME to 741741. "
        "In an emergency, call 911."
    ),
    RiskLevel.MODERATE: (
        "I'm concerned about your safety. " + _SCREENING_INTRO + "\n\n"
        "You can also talk to someone right now: call 988 or text HOME to 741741."
    ),
    RiskLevel.LOW: (
        "I hear that you're going through a difficult time. While I'm here to support you, "
        "if you're having thoughts of harming yourself, please reach out to:\n\n"
        f"- **{HOTLINE_988}**\n"
        f"- **{HOTLINE_TEXT}**\n\n"
        "Would you like to talk about what's troubling you?"
    ),
    RiskLevel.NONE: (
        "I'm here to listen and support you. If things ever feel like too much, "
        "you can call or text 988 any time, day or night, or text HOME to 741741."
    ),
})


def generate_crisis_response(
    assessment: CrisisAssessment,
    screening_outcome: Optional[ScreeningOutcome] = None,
) -> str:
    """Safety message for an assessment.

    A completed screening outcome takes precedence over the initial
    assessment.

    Args:
        assessment: Crisis assessment for the current message
        screening_outcome: Result of a completed C-SSRS screening, if any

    Returns:
        Template text; always contains crisis line information
    """
    if screening_outcome is not None:
        return COMPLETED_SCREENING_TEMPLATE.format(
            recommendation=screening_outcome.recommendation
        )
    return RISK_TEMPLATES[assessment.risk_level]
