"""Shared domain models for the triage pipeline."""
from .analysis import (
    AnalysisResult,
    AnalysisSource,
    ContextCategoryScore,
    ContextConfidence,
    ContextSummary,
    CrisisRiskLevel,
    Sentiment,
)
from .language import DetectionReason, LanguageDetection, SupportedLanguage
from .risk import (
    CrisisAssessment,
    RiskLevel,
    ScreeningOutcome,
    ScreeningState,
)

__all__ = [
    "AnalysisResult",
    "AnalysisSource",
    "ContextCategoryScore",
    "ContextConfidence",
    "ContextSummary",
    "CrisisRiskLevel",
    "Sentiment",
    "DetectionReason",
    "LanguageDetection",
    "SupportedLanguage",
    "CrisisAssessment",
    "RiskLevel",
    "ScreeningOutcome",
    "ScreeningState",
]
