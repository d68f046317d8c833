"""Language classifier configuration.

The thresholds below decide when the statistical layer is trusted over
the caller's fallback language. They are deliberately conservative: a
wrong language switch mid-conversation is worse than staying put.
"""
import re
from dataclasses import dataclass
from typing import FrozenSet, Tuple


@dataclass(frozen=True)
class LanguageConfig:
    """Tunable gates for the trigram classifier."""

    # Winning probability must reach this to beat the fallback
    confidence_threshold: float = 0.62

    # Inputs with this many words or fewer are never classified statistically
    min_word_count: int = 4

    # Winning probability must exceed the loser by at least this much
    min_confidence_gap: float = 0.12

    # Laplace smoothing constant for unseen trigrams
    smoothing_alpha: float = 0.001

    # Letters required after sanitization before trigram scoring runs
    min_profile_letters: int = 12

    pattern_version: str = "2026.10.01"


# Accented characters that only appear in Spanish orthography
ACCENT_PATTERN = re.compile(r"[ñáéíóúü¿¡]", re.IGNORECASE)

# Words that carry accents in English too and must not force Spanish.
# Plurals are handled by stripping a trailing "s" before lookup.
ENGLISH_LOANWORDS_WITH_ACCENTS: FrozenSet[str] = frozenset({
    "cafe", "fiance", "fiancee", "resume", "naive", "facade", "cliche",
    "touche", "protege", "saute", "entree", "matinee", "souffle", "soiree",
    "deja", "decor", "eclair", "role", "blase", "expose", "creme", "brulee",
    "fete", "melee", "coupe",
})

EXACT_SPANISH_TOKENS: FrozenSet[str] = frozenset({"spanish", "espanol"})
EXACT_ENGLISH_TOKENS: FrozenSet[str] = frozenset({"english", "ingles"})


def _intent_patterns(native: str, english_name: str) -> Tuple[re.Pattern, ...]:
    """Phrasings of "let's talk in <language>" in both languages."""
    templates = (
        r"\b(?:quiero|deseo|prefiero|necesito)\s+(?:hablar|que\s+hablemos|comunicarnos)\s+en\s+{native}\b",
        r"\b(?:hablar|hablemos|sigamos)\s+en\s+{native}\b",
        r"\bi\s*(?:want|would\s+like|prefer|need)\s*(?:to)?\s*(?:speak|talk)\s*(?:in)?\s*{english}\b",
        r"\b(?:can|could|let'?s)\s*(?:we)?\s*(?:speak|talk)\s*(?:in)?\s*{english}\b",
        r"\b{english}\s+please\b",
        r"\b{native}\s+por\s+favor\b",
        r"\b(?:cambiar|cambia|switch)\s+(?:a|al|to)\s+{native}\b",
    )
    return tuple(
        re.compile(t.format(native=native, english=english_name), re.IGNORECASE)
        for t in templates
    )


SPANISH_INTENT_PATTERNS = _intent_patterns(r"espa(?:ñ|n)ol", "spanish")
ENGLISH_INTENT_PATTERNS = _intent_patterns(r"ingl[eé]s", "english")
