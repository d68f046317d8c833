"""Shared utilities for the triage pipeline."""
from .redaction import create_log_snippet, hash_text_for_audit
from .text import (
    normalize_apostrophes,
    normalize_for_matching,
    strip_diacritics,
    strip_invisible,
)

__all__ = [
    "create_log_snippet",
    "hash_text_for_audit",
    "normalize_apostrophes",
    "normalize_for_matching",
    "strip_diacritics",
    "strip_invisible",
]
