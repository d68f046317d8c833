"""Context Service: weighted clinical pattern scoring.

Components:
- analyzer.py: ContextAnalyzer scoring seven clinical categories
- triggers.py: Life-domain triggers and cognitive distortions
- config.py: Pattern tables, thresholds, trigger tables

Usage:
    from tranquiloo.services.context_service import analyze_context
    summary = analyze_context("My heart is racing and I can't breathe")
    summary.panic.threshold_met
"""

from .analyzer import ContextAnalyzer, analyze_context, get_analyzer
from .config import ContextThresholds, PatternDefinition, bidirectional_patterns
from .triggers import detect_anxiety_triggers, detect_cognitive_distortions, detect_triggers

__all__ = [
    "ContextAnalyzer",
    "ContextThresholds",
    "PatternDefinition",
    "analyze_context",
    "bidirectional_patterns",
    "detect_anxiety_triggers",
    "detect_cognitive_distortions",
    "detect_triggers",
    "get_analyzer",
]
