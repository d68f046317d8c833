"""Crisis risk assessor: the hard gate in front of response generation.

Primary path asks a crisis model to grade the message against a clinical
rubric. Any provider failure (no key, HTTP error, unparsable output, an
unknown risk level) falls back to the keyword tiers, which need no network
and cannot fail.
"""
import logging
from typing import Any, Dict, Optional

from tranquiloo.shared.models import CrisisAssessment, RiskLevel
from tranquiloo.shared.utils import hash_text_for_audit, normalize_apostrophes, strip_invisible
from tranquiloo.services.llm_service import (
    BaseLLM,
    Parsed,
    ProviderFailure,
    Unparsed,
    request_structured,
)
from tranquiloo.services.llm_service.prompts import CRISIS_SYSTEM_PROMPT, build_crisis_prompt
from .config import KEYWORD_TIERS, TIER_REASONING, SafetyConfig

logger = logging.getLogger(__name__)

CRISIS_PROVIDER_NAME = "crisis"
PROVIDER_SOURCE = "crisis_model"
FALLBACK_SOURCE = "keyword_fallback"


def fallback_keyword_assessment(message: str) -> CrisisAssessment:
    """Deterministic keyword assessment.

    Scans the lowercased message against the tiers in order (imminent,
    high, moderate). The first tier with any match wins and every keyword
    of that tier found in the text is reported.

    Args:
        message: Raw user message

    Returns:
        CrisisAssessment with source "keyword_fallback"
    """
    text = normalize_apostrophes(strip_invisible(message or "")).lower()
    for level, keywords in KEYWORD_TIERS:
        matches = tuple(keyword for keyword in keywords if keyword in text)
        if matches:
            return CrisisAssessment.from_level(
                level, TIER_REASONING[level], matches, source=FALLBACK_SOURCE
            )
    return CrisisAssessment.from_level(
        RiskLevel.NONE, TIER_REASONING[RiskLevel.NONE], source=FALLBACK_SOURCE
    )


def assessment_from_payload(payload: Dict[str, Any]) -> Optional[CrisisAssessment]:
    """Build an assessment from the crisis model's JSON.

    requiresScreening is always derived from riskLevel; a provider that
    reports an inconsistent flag is overruled.

    Returns:
        CrisisAssessment, or None when riskLevel is missing or unknown
    """
    raw_level = payload.get("riskLevel")
    try:
        if not isinstance(raw_level, str):
            raise ValueError("riskLevel missing")
        level = RiskLevel.parse(raw_level)
    except ValueError:
        logger.warning(
            "CRISIS_MODEL_INVALID_LEVEL",
            extra={"risk_level": str(raw_level)[:40]}
        )
        return None

    reported = payload.get("requiresScreening")
    if isinstance(reported, bool) and reported != level.requires_screening:
        logger.warning(
            "CRISIS_MODEL_SCREENING_OVERRULED",
            extra={"risk_level": level.value, "reported": reported}
        )

    reasoning = payload.get("reasoning")
    indicators = payload.get("detectedIndicators")
    if not isinstance(indicators, list):
        indicators = []

    return CrisisAssessment.from_level(
        level,
        reasoning if isinstance(reasoning, str) else "",
        tuple(str(item) for item in indicators if isinstance(item, (str, int, float))),
        source=PROVIDER_SOURCE,
    )


class CrisisAssessor:
    """Crisis gate combining the crisis model with the keyword safety net."""

    def __init__(
        self,
        llm: Optional[BaseLLM] = None,
        config: Optional[SafetyConfig] = None,
    ):
        """Initialize assessor.

        Args:
            llm: Crisis model client; None means keyword fallback only
            config: Assessment configuration
        """
        self.llm = llm
        self.config = config or SafetyConfig()

        logger.info(
            "CRISIS_ASSESSOR_INITIALIZED",
            extra={
                "pattern_version": self.config.pattern_version,
                "model_configured": llm is not None,
            }
        )

    async def assess(self, message: str) -> CrisisAssessment:
        """Assess one message. Never raises.

        Args:
            message: Raw user message

        Returns:
            CrisisAssessment from the crisis model, or from the keyword
            tiers if the model gave no usable answer
        """
        text_hash = hash_text_for_audit(message)
        assessment: Optional[CrisisAssessment] = None

        if message and message.strip():
            result = await request_structured(
                self.llm,
                CRISIS_PROVIDER_NAME,
                build_crisis_prompt(message),
                system_prompt=CRISIS_SYSTEM_PROMPT,
                json_mode=True,
                temperature=self.config.crisis_temperature,
            )
            if isinstance(result, Parsed):
                assessment = assessment_from_payload(result.payload)
                failure_reason = "invalid_payload"
            elif isinstance(result, Unparsed):
                failure_reason = "unparsed"
            elif isinstance(result, ProviderFailure):
                failure_reason = result.reason
            else:
                logger.error(
                    "CRISIS_MODEL_UNEXPECTED_RESULT",
                    extra={"result_type": type(result).__name__}
                )
                failure_reason = "unexpected_result"
        else:
            failure_reason = "empty_message"

        if assessment is None:
            logger.warning(
                "CRISIS_ASSESSMENT_FALLBACK",
                extra={"text_hash": text_hash, "reason": failure_reason}
            )
            assessment = fallback_keyword_assessment(message)

        self._log_assessment(assessment, text_hash)
        return assessment

    def _log_assessment(self, assessment: CrisisAssessment, text_hash: str) -> None:
        extra = {
            "text_hash": text_hash,
            "risk_level": assessment.risk_level.value,
            "requires_screening": assessment.requires_screening,
            "source": assessment.source,
            "indicator_count": len(assessment.detected_indicators),
            "pattern_version": self.config.pattern_version,
        }
        if assessment.risk_level.rank >= RiskLevel.HIGH.rank:
            logger.critical("CRISIS_DETECTED", extra=extra)
        else:
            logger.info("CRISIS_ASSESSMENT_COMPLETED", extra=extra)
