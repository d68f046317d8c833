"""Triage Service: crisis gate plus the multi-provider response cascade.

Components:
- pipeline.py: TriagePipeline (hard crisis gate, screening flow)
- orchestrator.py: ResponseOrchestrator (primary -> secondary -> local)
- local_generator.py: Deterministic provider-free analysis
- normalization.py: Provider payload field resolution
- severity.py: Level, GAD-7 proxy, crisis level and sentiment derivation
- templates.py: Canned responses with coping actions
- config.py: ProviderSettings (environment) and SeverityLadder
- handler.py: Flask HTTP surface
"""

from .config import ProviderSettings, SeverityLadder, build_llm
from .local_generator import LocalGenerator
from .normalization import normalize_provider_payload
from .orchestrator import ResponseOrchestrator
from .pipeline import TriagePipeline, TriageResult, build_pipeline

__all__ = [
    "ProviderSettings",
    "SeverityLadder",
    "build_llm",
    "LocalGenerator",
    "normalize_provider_payload",
    "ResponseOrchestrator",
    "TriagePipeline",
    "TriageResult",
    "build_pipeline",
]
