"""C-SSRS screening state machine.

The protocol is a fixed ladder of six yes/no questions. Progress is a
pure function of how many answers the caller already holds: nothing is
stored server-side, so a screening survives restarts and load balancing
by construction.
"""
import logging
from typing import Any, Iterable, Optional, Sequence, Tuple

from tranquiloo.shared.models import RiskLevel, ScreeningOutcome, ScreeningState
from tranquiloo.shared.utils import normalize_for_matching
from .config import ANSWER_SUFFIX, CSSRS_QUESTIONS, RECOMMENDATIONS, YES_ANSWERS

logger = logging.getLogger(__name__)

PROTOCOL_LENGTH = len(CSSRS_QUESTIONS)


def normalize_answer(answer: Any) -> bool:
    """Map a caller-supplied answer to yes (True) or no (False).

    Booleans pass through. Strings count as yes when their matching form
    (lowercased, accents and punctuation removed) is a known yes word,
    so "Yes.", " SÍ " and "y" are all yes. Anything else is no.
    """
    if isinstance(answer, bool):
        return answer
    if not isinstance(answer, str):
        return False
    # "si si" and "yes yes" count as yes too
    words = normalize_for_matching(answer).split()
    return bool(words) and all(word in YES_ANSWERS for word in words)


def screening_state_from(responses: Optional[Iterable[Any]]) -> ScreeningState:
    """Build a ScreeningState from raw caller answers."""
    normalized: Tuple[bool, ...] = tuple(normalize_answer(r) for r in (responses or ()))
    return ScreeningState(responses=normalized, protocol_length=PROTOCOL_LENGTH)


def next_screening_question(prior_responses: Optional[Sequence[Any]]) -> Optional[str]:
    """Next C-SSRS question, or None once all six have been asked.

    Depends only on the number of prior responses, never their content.

    Args:
        prior_responses: Answers given so far, in protocol order

    Returns:
        Question text with answer instructions, or None when complete
    """
    state = screening_state_from(prior_responses)
    if state.is_complete:
        return None
    question = CSSRS_QUESTIONS[state.next_question_index - 1]
    return f"{question.text}{ANSWER_SUFFIX}"


def assess_screening_responses(responses: Sequence[Any]) -> ScreeningOutcome:
    """Determine the final risk level from screening answers.

    The highest risk_if_yes among the questions answered yes wins; with
    no yes answers the outcome is LOW. Partial answer lists are scored
    on what is present.

    Args:
        responses: Answers in protocol order

    Returns:
        ScreeningOutcome with recommendation and alert flag
    """
    state = screening_state_from(responses)
    positive = tuple(
        question.number
        for question, answer in zip(CSSRS_QUESTIONS, state.responses)
        if answer
    )

    final_level = RiskLevel.LOW
    for question in CSSRS_QUESTIONS:
        if question.number in positive and question.risk_if_yes.rank > final_level.rank:
            final_level = question.risk_if_yes

    should_alert = final_level != RiskLevel.LOW
    outcome = ScreeningOutcome(
        final_risk_level=final_level,
        recommendation=RECOMMENDATIONS[final_level],
        should_alert=should_alert,
        positive_questions=positive,
    )

    log = logger.critical if final_level.rank >= RiskLevel.HIGH.rank else logger.info
    log(
        "SCREENING_ASSESSED",
        extra={
            "final_risk_level": final_level.value,
            "positive_questions": list(positive),
            "answered": len(state.responses),
            "should_alert": should_alert,
        }
    )
    return outcome
