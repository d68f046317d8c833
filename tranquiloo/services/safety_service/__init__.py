"""Safety Service: crisis gate, C-SSRS screening and safety messaging.

Components:
- assessor.py: CrisisAssessor (crisis model + keyword tier fallback)
- screening.py: Stateless C-SSRS question ladder and outcome scoring
- responses.py: Fixed safety-message templates with crisis lines
- config.py: Keyword tiers, questions, recommendations
"""

from .assessor import CrisisAssessor, fallback_keyword_assessment
from .config import SafetyConfig
from .responses import generate_crisis_response
from .screening import (
    assess_screening_responses,
    next_screening_question,
    normalize_answer,
    screening_state_from,
)

__all__ = [
    "CrisisAssessor",
    "fallback_keyword_assessment",
    "SafetyConfig",
    "generate_crisis_response",
    "assess_screening_responses",
    "next_screening_question",
    "normalize_answer",
    "screening_state_from",
]
