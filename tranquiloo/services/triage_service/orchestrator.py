"""Multi-provider response orchestrator.

Tiers run strictly in sequence:

    primary (Anthropic) -> secondary (OpenAI) -> local generator

A tier is only abandoned once it has definitively failed: unavailable,
HTTP or transport error, unparsable output, or a payload without a usable
response. The local generator cannot fail, so analyze() always returns a
complete AnalysisResult.
"""
import logging
from typing import List, Mapping, Optional, Sequence

from tranquiloo.shared.models import (
    AnalysisResult,
    AnalysisSource,
    ContextSummary,
    LanguageDetection,
    SupportedLanguage,
)
from tranquiloo.shared.utils import hash_text_for_audit
from tranquiloo.services.indicator_service import IndicatorResult
from tranquiloo.services.llm_service import (
    BaseLLM,
    Parsed,
    ProviderFailure,
    ProviderResult,
    Unparsed,
    request_structured,
)
from tranquiloo.services.llm_service.prompts import build_primary_prompt, build_secondary_prompt
from .local_generator import LocalGenerator
from .normalization import normalize_provider_payload

logger = logging.getLogger(__name__)

CRISIS_GUIDANCE = (
    "CRISIS RESPONSE REQUIRED: focus on immediate safety, grounding, and concise directives.",
    "Keep the response under 3 sentences and include a crisis resource if appropriate "
    "(e.g., call 988).",
)
PTSD_GUIDANCE = (
    "Acknowledge the trauma response, offer grounding in the present moment, and avoid "
    "probing for details of the trauma."
)
OCD_GUIDANCE = (
    "Avoid reassurance loops; use exposure and response prevention principles and "
    "encourage delaying the compulsion."
)
PANIC_GUIDANCE = (
    "Lead with a slow breathing technique and remind the user that the panic surge "
    "will pass."
)


def scenario_guidance(context: ContextSummary, indicators: IndicatorResult) -> List[str]:
    """Extra prompt instructions for the categories that fired."""
    guidance: List[str] = []
    if context.crisis.threshold_met or indicators.has_indicators:
        guidance.extend(CRISIS_GUIDANCE)
    if context.ptsd.threshold_met:
        guidance.append(PTSD_GUIDANCE)
    if context.ocd.threshold_met:
        guidance.append(OCD_GUIDANCE)
    if context.panic.threshold_met:
        guidance.append(PANIC_GUIDANCE)
    return guidance


class ResponseOrchestrator:
    """Runs the provider cascade for one message."""

    PRIMARY_NAME = "primary"
    SECONDARY_NAME = "secondary"

    def __init__(
        self,
        primary: Optional[BaseLLM] = None,
        secondary: Optional[BaseLLM] = None,
        local: Optional[LocalGenerator] = None,
    ):
        """Initialize orchestrator.

        Args:
            primary: Generator A client, None when unavailable
            secondary: Generator B client, None when unavailable
            local: Deterministic backstop generator
        """
        self.primary = primary
        self.secondary = secondary
        self.local = local or LocalGenerator()

        logger.info(
            "ORCHESTRATOR_INITIALIZED",
            extra={
                "primary_configured": primary is not None,
                "secondary_configured": secondary is not None,
            }
        )

    def _accept(
        self,
        result: ProviderResult,
        source: AnalysisSource,
        message: str,
        context: ContextSummary,
        language: LanguageDetection,
        crisis_signal: bool,
    ) -> Optional[AnalysisResult]:
        """AnalysisResult from a provider result, or None to try the next tier."""
        if isinstance(result, Parsed):
            return normalize_provider_payload(
                result.payload,
                message,
                source,
                context,
                language,
                crisis_signal=crisis_signal,
                ladder=self.local.ladder,
            )
        if isinstance(result, Unparsed):
            logger.warning(
                "PROVIDER_TIER_UNPARSED",
                extra={"source": source.value, "provider": result.provider}
            )
            return None
        if isinstance(result, ProviderFailure):
            logger.warning(
                "PROVIDER_TIER_FAILED",
                extra={
                    "source": source.value,
                    "provider": result.provider,
                    "reason": result.reason,
                    "status": result.status,
                }
            )
            return None
        logger.error(
            "PROVIDER_TIER_UNEXPECTED_RESULT",
            extra={"source": source.value, "result_type": type(result).__name__}
        )
        return None

    async def analyze(
        self,
        message: str,
        history: Optional[Sequence[Mapping[str, str]]] = None,
        fallback_language: SupportedLanguage = SupportedLanguage.EN,
    ) -> AnalysisResult:
        """Analyze one message.

        Args:
            message: Raw user message
            history: Prior turns as {"role", "content"} mappings; read only
            fallback_language: Language used when detection is not decisive

        Returns:
            AnalysisResult from the first tier that produced a usable answer
        """
        text_hash = hash_text_for_audit(message)
        signals = self.local.signals(message)
        language = self.local.classifier.detect(message, fallback_language=fallback_language)
        crisis_signal = signals.crisis_signal or signals.hallucination

        tiers = (
            (
                self.primary,
                self.PRIMARY_NAME,
                AnalysisSource.PRIMARY,
                build_primary_prompt(
                    message, history, scenario_guidance(signals.context, signals.indicators)
                ),
            ),
            (
                self.secondary,
                self.SECONDARY_NAME,
                AnalysisSource.SECONDARY,
                build_secondary_prompt(message),
            ),
        )

        for llm, name, source, prompt in tiers:
            result = await request_structured(llm, name, prompt)
            analysis = self._accept(
                result, source, message, signals.context, language, crisis_signal
            )
            if analysis is not None:
                logger.info(
                    "ANALYSIS_COMPLETED",
                    extra={
                        "text_hash": text_hash,
                        "source": source.value,
                        "anxiety_level": analysis.anxiety_level,
                    }
                )
                return analysis

        analysis = self.local.generate(message, fallback_language, language=language)
        logger.info(
            "ANALYSIS_COMPLETED",
            extra={
                "text_hash": text_hash,
                "source": AnalysisSource.LOCAL.value,
                "anxiety_level": analysis.anxiety_level,
            }
        )
        return analysis
