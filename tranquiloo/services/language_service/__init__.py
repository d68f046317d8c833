"""Language Service: English/Spanish detection for incoming messages.

Components:
- classifier.py: LanguageClassifier (explicit intent, accents, trigram models)
- config.py: LanguageConfig thresholds, intent patterns, loanword list
- corpora.py: Reference samples the trigram models are built from

Usage:
    from tranquiloo.services.language_service import detect_language
    detection = detect_language("Quiero hablar en español", SupportedLanguage.EN)
"""

from .classifier import (
    LanguageClassifier,
    detect_language,
    get_classifier,
    validate_language_consistency,
)
from .config import LanguageConfig

__all__ = [
    "LanguageClassifier",
    "LanguageConfig",
    "detect_language",
    "get_classifier",
    "validate_language_consistency",
]
