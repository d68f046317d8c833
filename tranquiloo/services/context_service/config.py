"""Context analyzer pattern tables and per-category thresholds.

Weights and thresholds are empirically chosen, not clinically validated.
They are kept exactly as audited: changing any of them changes crisis
sensitivity, so bump pattern_version with every edit.

All patterns run against the output of normalize_for_matching()
(lowercase, no diacritics, punctuation collapsed, apostrophes kept).
"""
import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Tuple


@dataclass(frozen=True)
class PatternDefinition:
    """One weighted symptom pattern."""
    pattern: re.Pattern
    weight: int
    description: str


@dataclass(frozen=True)
class ContextThresholds:
    """Minimum accumulated weight for each category to fire."""
    general_anxiety: int = 2
    panic: int = 4
    ptsd: int = 4
    ocd: int = 5
    depression: int = 3
    crisis: int = 4
    positive: int = 3

    # Characters allowed between the two halves of a proximity pattern
    proximity_window: int = 80

    # Score above threshold needed for medium / high confidence
    medium_margin: int = 1
    high_margin: int = 3

    pattern_version: str = "2026.10.01"


def _p(regex: str, weight: int, description: str) -> PatternDefinition:
    return PatternDefinition(re.compile(regex, re.IGNORECASE), weight, description)


def bidirectional_patterns(
    first: str,
    second: str,
    description: str,
    weight: int = 3,
    window: int = ContextThresholds.proximity_window,
) -> Tuple[PatternDefinition, PatternDefinition]:
    """Two patterns matching first...second and second...first.

    Both share weight and description, so phrase order never changes the
    score contributed by a match.
    """
    return (
        _p(rf"{first}.{{0,{window}}}{second}", weight, description),
        _p(rf"{second}.{{0,{window}}}{first}", weight, description),
    )


GENERAL_ANXIETY_PATTERNS: Tuple[PatternDefinition, ...] = (
    _p(r"\banxious\b", 3, "Explicit anxiety mention"),
    _p(r"\banxiety (?:attack|attacks)\b", 4, "Anxiety attack described"),
    _p(r"\bpanic wave\b", 3, "Describes wave of panic"),
    _p(r"\bconstant (?:worry|fear)\b", 3, "Constant worry described"),
    _p(r"\bcan't (?:stop|seem to stop) (?:worrying|thinking)\b", 3, "Cannot stop worrying"),
    _p(r"\boverwhelmed\b", 2, "Feeling overwhelmed"),
    _p(r"\bnervous\b", 2, "Feeling nervous"),
    _p(r"\brestless\b", 2, "Restlessness described"),
    _p(r"\bstress(?:ed|ing)?\b", 2, "Stress described"),
    _p(r"\bworried\b", 3, "Worry described"),
)

PANIC_PATTERNS: Tuple[PatternDefinition, ...] = (
    _p(r"\bpanic attacks?\b", 4, "Panic attack mentioned"),
    _p(r"\bheart (?:is )?(?:racing|pounding)\b", 3, "Heart racing"),
    _p(r"\bcan'?t breathe\b", 3, "Difficulty breathing"),
    _p(r"\bchest (?:pain|tight)\b", 2, "Chest pain/tightness"),
    _p(r"\bfeel like i'm (?:dying|going to die)\b", 3, "Feeling like dying"),
    _p(r"\blosing control\b", 2, "Losing control sensation"),
    _p(r"\bdissociating\b", 2, "Dissociation mentioned"),
)

PTSD_PATTERNS: Tuple[PatternDefinition, ...] = (
    _p(r"\bflashbacks?\b", 4, "Flashback described"),
    _p(r"\bnightmares?\b", 2, "Trauma nightmares"),
    _p(r"\bptsd\b", 3, "PTSD mentioned"),
    _p(r"\btrauma\b", 2, "Trauma mentioned"),
    _p(r"\btrigger(?:ed|ing)?\b", 3, "Triggered response"),
    _p(r"\bhypervigilant\b", 3, "Hypervigilance mentioned"),
)

OCD_PATTERNS: Tuple[PatternDefinition, ...] = (
    _p(r"\bocd\b", 3, "OCD explicitly mentioned"),
    _p(r"\b(?:compulsion|compulsive|compulsions)\b", 3, "Compulsion described"),
    _p(r"\bintrusive thoughts?\b", 3, "Intrusive thoughts described"),
    *bidirectional_patterns(
        r"(?:can't|cannot) stop",
        r"(?:checking|washing|cleaning|counting|rituals?)",
        "Compulsion urge with ritual",
    ),
    *bidirectional_patterns(
        r"(?:urge|need) to",
        r"(?:check|wash|clean|count|repeat)",
        "Compulsive urge linked to behavior",
    ),
    _p(
        r"(?:ritual|checking|washing|counting|cleaning|repeating).{0,80}"
        r"(?:makes me feel better|reduces anxiety)",
        2,
        "Ritual linked to anxiety relief",
    ),
)

DEPRESSION_PATTERNS: Tuple[PatternDefinition, ...] = (
    _p(r"\bdepress(?:ed|ion)\b", 3, "Depression mentioned"),
    _p(r"\bhopeless\b", 3, "Hopelessness described"),
    _p(r"\bworthless\b", 3, "Worthlessness described"),
    _p(r"\bempty inside\b", 3, "Emptiness described"),
    _p(r"\bcan't get out of bed\b", 4, "Low motivation described"),
    _p(r"\bno motivation\b", 3, "No motivation"),
    _p(r"\bnothing (?:matters|feels good)\b", 3, "Anhedonia described"),
)

CRISIS_PATTERNS: Tuple[PatternDefinition, ...] = (
    _p(r"\bhurt myself\b", 4, "Self-harm intent"),
    _p(r"\bkill myself\b", 5, "Explicit suicide intent"),
    _p(r"\bend my life\b", 5, "Intent to end life"),
    _p(r"\btake my life\b", 5, "Intent to take life"),
    _p(r"\bsuicidal thoughts?\b", 4, "Suicidal thoughts"),
    _p(r"\bcan't go on\b", 3, "Expressed inability to continue"),
    _p(r"\bno reason to live\b", 4, "Loss of will to live"),
)

POSITIVE_PATTERNS: Tuple[PatternDefinition, ...] = (
    _p(r"\bfeeling (?:calm|better|good|okay now)\b", 3, "Positive feeling reported"),
    _p(r"\bnot anxious anymore\b", 3, "Anxiety relief reported"),
    _p(r"\bmanaging (?:well|better)\b", 2, "Managing feelings"),
    _p(r"\bfinding peace\b", 2, "Sense of peace"),
)

# Category name -> (patterns, threshold attribute on ContextThresholds)
CATEGORY_TABLES: Mapping[str, Tuple[Tuple[PatternDefinition, ...], str]] = MappingProxyType({
    "general_anxiety": (GENERAL_ANXIETY_PATTERNS, "general_anxiety"),
    "panic": (PANIC_PATTERNS, "panic"),
    "ptsd": (PTSD_PATTERNS, "ptsd"),
    "ocd": (OCD_PATTERNS, "ocd"),
    "depression": (DEPRESSION_PATTERNS, "depression"),
    "crisis": (CRISIS_PATTERNS, "crisis"),
    "positive": (POSITIVE_PATTERNS, "positive"),
})


# =============================================================================
# TRIGGERS
# =============================================================================

def _word_patterns(*regexes: str) -> Tuple[re.Pattern, ...]:
    return tuple(re.compile(r, re.IGNORECASE) for r in regexes)


TRIGGER_PATTERNS: Mapping[str, Tuple[re.Pattern, ...]] = MappingProxyType({
    "driving_anxiety": _word_patterns(
        r"\bdriv(?:ing|e)\b", r"\btraffic\b", r"\bintersection\b", r"\bhighway\b",
    ),
    "work": _word_patterns(
        r"\bwork\b", r"\bjob\b", r"\bboss\b", r"\boffice\b", r"\bmeeting\b", r"\bdeadline\b",
    ),
    "social": _word_patterns(
        r"\bsocial\b", r"\bcrowd\b", r"\bpublic speaking\b", r"\bparty\b",
        r"\bbeing around people\b",
    ),
    "health": _word_patterns(
        r"\bdoctor\b", r"\bhospital\b", r"\bmedical\b", r"\bsymptom\b", r"\bdiagnos",
        r"\bhealth\b",
    ),
    "financial": _word_patterns(
        r"\bmoney\b", r"\bbills?\b", r"\bdebt\b", r"\brent\b", r"\bpaycheck\b", r"\bsavings\b",
    ),
    "relationships": _word_patterns(
        r"\brelationship\b", r"\bpartner\b", r"\bhusband\b", r"\bwife\b", r"\bboyfriend\b",
        r"\bgirlfriend\b", r"\bmarriage\b", r"\bdivorce\b", r"\bbreak ?up\b",
        r"\bcheat(?:ed|ing)?\b",
    ),
    "performance": _word_patterns(
        r"\btest\b", r"\bexam\b", r"\binterview\b", r"\bgrades?\b", r"\baudition\b",
        r"\bperformance review\b",
    ),
    "future_uncertainty": _word_patterns(
        r"\bfuture\b", r"\buncertain\b", r"\bdon't know what to do\b",
        r"\bno idea what comes next\b", r"\bplan\b", r"\bdecision\b",
    ),
})

# Secondary direct keyword scan, whole words only
TRIGGER_KEYWORDS: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    "driving_anxiety": (
        "driving", "drive", "car", "vehicle", "intersection", "traffic", "road",
        "highway", "freeway", "lane", "parking", "crash", "accident", "collision",
    ),
    "work": (
        "work", "job", "office", "boss", "colleague", "career", "workplace",
        "employment", "meeting", "deadline",
    ),
    "social": (
        "social", "people", "friends", "party", "gathering", "conversation",
        "public", "crowd", "speaking", "presentation",
    ),
    "health": (
        "health", "sick", "pain", "doctor", "hospital", "illness", "disease",
        "symptom", "medical", "therapy",
    ),
    "financial": (
        "money", "financial", "debt", "bills", "budget", "income", "expenses",
        "payment", "loan", "mortgage",
    ),
    "relationships": (
        "relationship", "partner", "spouse", "divorce", "breakup", "dating",
        "marriage", "family", "conflict",
    ),
    "performance": (
        "test", "exam", "performance", "evaluation", "assessment", "interview",
        "competition", "failure", "success",
    ),
    "future_uncertainty": (
        "future", "unknown", "uncertain", "change", "decision", "choice", "plan",
        "tomorrow", "later",
    ),
})


# =============================================================================
# COGNITIVE DISTORTIONS
# =============================================================================

DISTORTION_PATTERNS: Tuple[Tuple[str, re.Pattern], ...] = (
    ("All-or-nothing thinking", re.compile(r"\b(?:always|never|everyone|everything|nobody)\b")),
    ("Should statements", re.compile(r"\b(?:should|must|have to)\b")),
    ("Catastrophizing", re.compile(r"(?:worst|disaster|catastroph|awful|terrible|ruined)")),
)
