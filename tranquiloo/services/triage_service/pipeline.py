"""End-to-end triage of one user message.

The crisis assessor is a hard gate: while screening is required or in
progress, no normal response is generated. Screening progress is owned
by the caller and passed back in with every message.

Decision order:
1. Screening in progress -> next C-SSRS question, preceded by the crisis
   template when this message itself requires screening
2. Screening complete and alerting -> completed-screening safety message
3. Fresh assessment requires screening (including after a cleared
   screening) -> crisis template + question 1
4. Otherwise -> provider cascade (primary, secondary, local)
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Mapping, Optional, Sequence

from tranquiloo.shared.models import (
    AnalysisResult,
    CrisisAssessment,
    LanguageDetection,
    ScreeningOutcome,
    SupportedLanguage,
)
from tranquiloo.shared.utils import hash_text_for_audit
from tranquiloo.services.language_service import LanguageClassifier, get_classifier
from tranquiloo.services.safety_service import (
    CrisisAssessor,
    SafetyConfig,
    assess_screening_responses,
    generate_crisis_response,
    next_screening_question,
    screening_state_from,
)
from .config import ProviderSettings, build_llm
from .local_generator import LocalGenerator
from .orchestrator import ResponseOrchestrator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TriageResult:
    """Outcome of triaging one message.

    Exactly one of these holds:
    - screening_required: response_text is a safety message or a
      screening question, analysis is None
    - analysis is set and response_text is its personalized response
    """
    response_text: str
    assessment: CrisisAssessment
    language: LanguageDetection
    screening_required: bool
    next_question: Optional[str] = None
    screening_outcome: Optional[ScreeningOutcome] = None
    analysis: Optional[AnalysisResult] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "responseText": self.response_text,
            "crisisAssessment": self.assessment.to_dict(),
            "language": self.language.to_dict(),
            "screeningRequired": self.screening_required,
            "nextQuestion": self.next_question,
            "screeningOutcome": (
                self.screening_outcome.to_dict() if self.screening_outcome else None
            ),
            "analysis": self.analysis.to_dict() if self.analysis else None,
        }


class TriagePipeline:
    """Crisis gate followed by the response orchestrator."""

    def __init__(
        self,
        assessor: Optional[CrisisAssessor] = None,
        orchestrator: Optional[ResponseOrchestrator] = None,
        classifier: Optional[LanguageClassifier] = None,
    ):
        self.assessor = assessor or CrisisAssessor()
        self.orchestrator = orchestrator or ResponseOrchestrator()
        self.classifier = classifier or get_classifier()

    async def process(
        self,
        message: str,
        history: Optional[Sequence[Mapping[str, str]]] = None,
        screening_responses: Optional[Iterable[Any]] = None,
        fallback_language: SupportedLanguage = SupportedLanguage.EN,
    ) -> TriageResult:
        """Triage one message.

        Args:
            message: Raw user message
            history: Prior conversation turns, prompt context only
            screening_responses: Every C-SSRS answer given so far,
                including one carried by this message
            fallback_language: Language kept when detection is not decisive

        Returns:
            TriageResult
        """
        text_hash = hash_text_for_audit(message)
        language = self.classifier.detect(message, fallback_language=fallback_language)
        assessment = await self.assessor.assess(message)
        answers = list(screening_responses or ())
        state = screening_state_from(answers)

        if state.is_active:
            question = next_screening_question(answers)
            response_text = question
            if assessment.requires_screening:
                response_text = f"{generate_crisis_response(assessment)}\n\n{question}"
                logger.warning(
                    "SCREENING_CRISIS_DURING_SCREENING",
                    extra={"text_hash": text_hash, "risk_level": assessment.risk_level.value}
                )
            logger.info(
                "SCREENING_CONTINUED",
                extra={"text_hash": text_hash, "question_index": state.next_question_index}
            )
            return TriageResult(
                response_text=response_text,
                assessment=assessment,
                language=language,
                screening_required=True,
                next_question=question,
            )

        outcome = None
        if state.is_complete:
            outcome = assess_screening_responses(answers)
            if outcome.should_alert:
                return TriageResult(
                    response_text=generate_crisis_response(assessment, outcome),
                    assessment=assessment,
                    language=language,
                    screening_required=True,
                    screening_outcome=outcome,
                )
            logger.info(
                "SCREENING_CLEARED",
                extra={"text_hash": text_hash, "final_risk_level": outcome.final_risk_level.value}
            )

        if assessment.requires_screening:
            question = next_screening_question([])
            logger.warning(
                "SCREENING_STARTED",
                extra={
                    "text_hash": text_hash,
                    "risk_level": assessment.risk_level.value,
                    "after_cleared_screening": outcome is not None,
                }
            )
            return TriageResult(
                response_text=generate_crisis_response(assessment),
                assessment=assessment,
                language=language,
                screening_required=True,
                next_question=question,
                screening_outcome=outcome,
            )

        analysis = await self.orchestrator.analyze(message, history, language.language)
        return TriageResult(
            response_text=analysis.personalized_response,
            assessment=assessment,
            language=language,
            screening_required=False,
            analysis=analysis,
        )


def build_pipeline(
    settings: Optional[ProviderSettings] = None,
    local: Optional[LocalGenerator] = None,
) -> TriagePipeline:
    """Wire a pipeline from provider settings.

    Args:
        settings: Provider settings; read from the environment when None
        local: Local generator, e.g. one with a seeded random source

    Returns:
        TriagePipeline
    """
    settings = settings or ProviderSettings.from_env()
    safety = SafetyConfig()
    return TriagePipeline(
        assessor=CrisisAssessor(build_llm(settings.crisis_config(safety), "crisis"), safety),
        orchestrator=ResponseOrchestrator(
            primary=build_llm(settings.primary_config(), "primary"),
            secondary=build_llm(settings.secondary_config(), "secondary"),
            local=local,
        ),
    )
