"""Indirect-threat and hallucination indicator tables.

Agency names on their own are common and benign (news, films, jokes).
They only count when a surveillance phrase sits within a few tokens of
them, which is what AGENCY_TOKENS / SURVEILLANCE_TERMS feed.
"""
import re
from dataclasses import dataclass
from typing import FrozenSet, Tuple


@dataclass(frozen=True)
class IndicatorConfig:
    """Weights and cutoffs for the indicator detector."""

    direct_weight: int = 3       # Clinical keyword ("hallucinating", "paranoid")
    context_weight: int = 2      # Perceptual / referential anomaly phrase
    agency_weight: int = 3       # Agency token near surveillance phrase

    # Tokens inspected on each side of an agency mention
    window_radius: int = 4

    indicator_threshold: int = 3
    medium_threshold: int = 4
    high_threshold: int = 7

    pattern_version: str = "2026.10.01"


AGENCY_MENTION = re.compile(
    r"\b(?:cia|fbi|nsa|mi6|mossad|agents?|spy|spies|intelligence|agency)\b",
    re.IGNORECASE,
)

AGENCY_TOKENS: FrozenSet[str] = frozenset({
    "cia", "fbi", "nsa", "mi6", "mossad", "agent", "agents",
    "spy", "spies", "intelligence", "agency",
})

SURVEILLANCE_TERMS: Tuple[str, ...] = (
    "following me", "following us",
    "after me", "after us",
    "watching me", "watching us",
    "tracking me", "tracking us",
    "spying on me", "spying on us",
    "bugging me", "bugging us",
)

AGENCY_SURVEILLANCE_LABEL = "agency+surveillance"


def _p(regex: str) -> re.Pattern:
    return re.compile(regex, re.IGNORECASE)


DIRECT_KEYWORDS: Tuple[Tuple[re.Pattern, str], ...] = (
    (_p(r"\bhallucinat(?:e|ing|ion|ions)\b"), "Hallucination mentioned"),
    (_p(r"\bpsychosis\b"), "Psychosis mentioned"),
    (_p(r"\bpsychotic\b"), "Psychotic episode mentioned"),
    (_p(r"\bdelusions?\b"), "Delusion mentioned"),
    (_p(r"\bparanoi[ad]\b"), "Paranoia mentioned"),
    (_p(r"\bschizophren(?:ia|ic)\b"), "Schizophrenia mentioned"),
)

CONTEXT_PATTERNS: Tuple[Tuple[re.Pattern, str], ...] = (
    (_p(r"hearing\s+(?:voices?|things|whispers|someone)\b"), "Hearing voices or sounds"),
    (_p(r"voices?\s+(?:in\s+my\s+head|talking\s+to\s+me|telling\s+me)\b"), "Voices addressing the user"),
    (
        _p(
            r"seeing\s+(?:things?|people|shadows|figures|creatures)\s+(?:that\s+)?"
            r"(?:aren't|are not|isn't|is not|nobody else is|no one else is|others aren't)"
            r"\s+(?:seeing|there)"
        ),
        "Seeing things that are not there",
    ),
    (
        _p(
            r"seeing\s+(?:things?|people|shadows|figures|creatures)\s+"
            r"(?:no\s+one\s+else|nobody\s+else|others)\s+(?:can|does)"
        ),
        "Seeing things no one else sees",
    ),
    (
        _p(r"(?:someone|people|they|he|she)\s+(?:following|chasing|watching|stalking|hunting)\s+(?:me|us)"),
        "Being followed or watched",
    ),
    (
        _p(r"feel\s+like\s+(?:someone|they|people)\s+(?:are\s+)?(?:watching|following|after)\s+(?:me|us)"),
        "Feeling watched or pursued",
    ),
    (_p(r"objects?\s+(?:moving|shifting|breathing|melting)\s+on\s+their\s+own"), "Objects moving on their own"),
    (_p(r"things\s+(?:that\s+)?(?:aren't|are not|isn't|is not)\s+real\b"), "Perceiving things that are not real"),
    (_p(r"(?:shadows|figures)\s+that\s+(?:aren't|are not)\s+there"), "Shadows or figures that are not there"),
    (_p(r"(?:people|voices)\s+others\s+can't\s+hear"), "Hearing what others cannot"),
)
