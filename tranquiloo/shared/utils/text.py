"""Text normalization shared by the classifiers and pattern engines.

Every detector in the pipeline matches against a canonical form of the
message: lowercased, accents removed, punctuation collapsed. Keeping the
normal form in one place guarantees that a pattern table written for one
component behaves identically when reused by another.
"""
import re
import unicodedata
from typing import FrozenSet

# Characters to strip (zero-width, invisible, separators)
STRIP_CHARS: FrozenSet[str] = frozenset({
    "\u200b",  # Zero-width space
    "\u200c",  # Zero-width non-joiner
    "\u200d",  # Zero-width joiner
    "\ufeff",  # Byte order mark
    "\u00ad",  # Soft hyphen
    "\u2060",  # Word joiner
})

# Typographic apostrophes collapse to ASCII so contractions stay matchable
_APOSTROPHES = str.maketrans({"\u2019": "'", "\u2018": "'", "\u02bc": "'", "`": "'"})

_NON_MATCHABLE = re.compile(r"[^a-z0-9\s']")
_WHITESPACE = re.compile(r"\s+")


def strip_invisible(text: str) -> str:
    """Remove zero-width and invisible characters."""
    return "".join(c for c in text if c not in STRIP_CHARS)


def strip_diacritics(text: str) -> str:
    """Remove combining accents while keeping every other character.

    "Está" becomes "Esta", "ñ" becomes "n". Characters that do not
    decompose are left untouched.

    Args:
        text: Input text

    Returns:
        Text with combining marks removed
    """
    decomposed = unicodedata.normalize("NFD", text)
    return "".join(c for c in decomposed if unicodedata.category(c) != "Mn")


def normalize_apostrophes(text: str) -> str:
    """Map typographic apostrophes to ASCII."""
    return text.translate(_APOSTROPHES)


def normalize_for_matching(text: str) -> str:
    """Canonical form used by the pattern tables.

    Applies, in order:
    1. Strip invisible characters and unify apostrophes
    2. Lowercase
    3. Strip diacritics
    4. Replace every character other than [a-z0-9'] and whitespace by a space
    5. Collapse whitespace and trim

    Apostrophes survive so contractions such as "can't" stay matchable.
    """
    if not text:
        return ""
    result = normalize_apostrophes(strip_invisible(text)).lower()
    result = strip_diacritics(result)
    result = _NON_MATCHABLE.sub(" ", result)
    return _WHITESPACE.sub(" ", result).strip()
