"""Trigger and cognitive-distortion detection.

Triggers are life-domain labels ("work", "driving_anxiety") attached to
an analysis. Two scans feed them: the regex trigger table and a plain
whole-word keyword list. Results keep first-seen order, regex table first.
"""
import re
from typing import List

from tranquiloo.shared.utils import normalize_for_matching
from .config import DISTORTION_PATTERNS, TRIGGER_KEYWORDS, TRIGGER_PATTERNS

_KEYWORD_PATTERNS = {
    trigger: tuple(re.compile(rf"\b{re.escape(keyword)}\b") for keyword in keywords)
    for trigger, keywords in TRIGGER_KEYWORDS.items()
}


def detect_anxiety_triggers(text: str) -> List[str]:
    """Trigger labels from the regex trigger table."""
    normalized = normalize_for_matching(text or "")
    return [
        trigger
        for trigger, patterns in TRIGGER_PATTERNS.items()
        if any(p.search(normalized) for p in patterns)
    ]


def detect_triggers(text: str) -> List[str]:
    """Regex trigger table merged with the keyword scan, deduplicated."""
    normalized = normalize_for_matching(text or "")
    triggers = detect_anxiety_triggers(text)
    for trigger, patterns in _KEYWORD_PATTERNS.items():
        if trigger not in triggers and any(p.search(normalized) for p in patterns):
            triggers.append(trigger)
    return triggers


def detect_cognitive_distortions(text: str) -> List[str]:
    """Named distortion patterns present in the message.

    Returns:
        Subset of "All-or-nothing thinking", "Should statements" and
        "Catastrophizing", in that order
    """
    normalized = normalize_for_matching(text or "")
    return [name for name, pattern in DISTORTION_PATTERNS if pattern.search(normalized)]
