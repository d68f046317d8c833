"""Indicator Service: hallucination and indirect-threat language.

Components:
- detector.py: IndicatorDetector with windowed agency+surveillance check
- config.py: Keyword tables, weights, window radius
"""

from .config import IndicatorConfig
from .detector import IndicatorDetector, IndicatorResult, detect_indicators, get_detector

__all__ = [
    "IndicatorConfig",
    "IndicatorDetector",
    "IndicatorResult",
    "detect_indicators",
    "get_detector",
]
