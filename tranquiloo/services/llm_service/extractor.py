"""Tolerant structured-output extractor.

External generators wrap JSON in prose, use single quotes, forget to quote
keys, leave trailing commas or get cut off mid-object. This module
recovers a JSON object from such text and never raises.

Steps:
1. Locate the span from the first "{" to the last "}"
2. Strict parse
3. Repair pass, in order:
   a. Curly quotes to straight quotes
   b. Trailing commas before "}" / "]" removed
   c. Token pass outside double-quoted strings: bare keys quoted,
      single-quoted literals converted, True/False/None translated
   d. Missing closers appended
4. Reparse; None on failure
"""
import json
import logging
import re
from typing import Any, Dict, List, Optional

from tranquiloo.shared.utils import create_log_snippet

logger = logging.getLogger(__name__)

_SMART_QUOTES = str.maketrans({
    "“": '"', "”": '"', "„": '"', "‟": '"',
    "‘": "'", "’": "'", "‚": "'", "‛": "'",
})
_TRAILING_COMMA = re.compile(r",\s*([}\]])")
_PYTHON_LITERALS = {"True": "true", "False": "false", "None": "null"}
_CLOSERS = {"{": "}", "[": "]"}

# A single quote only ends a literal when followed by one of these
_SINGLE_QUOTE_TERMINATORS = frozenset(",}]:")


def locate_json_span(text: str) -> Optional[str]:
    """Greedy span from the first "{" to the last "}", or None."""
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end <= start:
        return None
    return text[start:end + 1]


def _skip_double_quoted(text: str, index: int, out: List[str]) -> int:
    """Copy a double-quoted string starting at index; return index after it."""
    out.append('"')
    index += 1
    while index < len(text):
        char = text[index]
        out.append(char)
        if char == "\\" and index + 1 < len(text):
            out.append(text[index + 1])
            index += 2
            continue
        index += 1
        if char == '"':
            break
    return index


def _single_quote_end(text: str, index: int) -> int:
    """Index of the quote closing the literal opened at index, or -1."""
    position = index + 1
    while position < len(text):
        char = text[position]
        if char == "\\":
            position += 2
            continue
        if char == "'":
            following = position + 1
            while following < len(text) and text[following].isspace():
                following += 1
            if following >= len(text) or text[following] in _SINGLE_QUOTE_TERMINATORS:
                return position
        position += 1
    return -1


def _last_significant(out: List[str]) -> str:
    for chunk in reversed(out):
        stripped = chunk.strip()
        if stripped:
            return stripped[-1]
    return ""


def _next_significant(text: str, index: int) -> str:
    while index < len(text) and text[index].isspace():
        index += 1
    return text[index] if index < len(text) else ""


def normalize_tokens(text: str) -> str:
    """Quote bare keys, convert single-quoted strings, translate Python literals.

    Double-quoted strings are copied untouched, so apostrophes and colons
    inside them never trigger a rewrite.
    """
    out: List[str] = []
    index = 0
    length = len(text)
    # Once a scan for a closing quote fails, every later scan fails too
    quotes_exhausted = False
    while index < length:
        char = text[index]

        if char == '"':
            index = _skip_double_quoted(text, index, out)
            continue

        if char == "'":
            end = -1 if quotes_exhausted else _single_quote_end(text, index)
            if end == -1:
                quotes_exhausted = True
                out.append(char)
                index += 1
                continue
            body = text[index + 1:end].replace("\\'", "'")
            body = re.sub(r'(?<!\\)"', r'\\"', body)
            out.append(f'"{body}"')
            index = end + 1
            continue

        if char.isalpha() or char == "_":
            end = index
            while end < length and (text[end].isalnum() or text[end] == "_"):
                end += 1
            word = text[index:end]
            if _last_significant(out) in ("{", ",") and _next_significant(text, end) == ":":
                out.append(f'"{word}"')
            else:
                out.append(_PYTHON_LITERALS.get(word, word))
            index = end
            continue

        out.append(char)
        index += 1
    return "".join(out)


def close_open_structures(text: str) -> str:
    """Append closers for every unmatched "{" / "[" outside strings."""
    stack: List[str] = []
    in_string = False
    escaped = False
    for char in text:
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char in _CLOSERS:
            stack.append(_CLOSERS[char])
        elif stack and char == stack[-1]:
            stack.pop()

    suffix = '"' if in_string else ""
    return text + suffix + "".join(reversed(stack))


def repair_json(text: str) -> str:
    """Apply every repair step in order."""
    repaired = text.translate(_SMART_QUOTES)
    repaired = _TRAILING_COMMA.sub(r"\1", repaired)
    repaired = normalize_tokens(repaired)
    repaired = _TRAILING_COMMA.sub(r"\1", repaired)
    return close_open_structures(repaired)


def _loads(text: str, strict: bool) -> Optional[Any]:
    try:
        return json.loads(text, strict=strict)
    except (ValueError, RecursionError):
        return None


def extract_json(provider_name: str, raw_text: Optional[str]) -> Optional[Dict[str, Any]]:
    """Recover a JSON object from free-form provider output.

    Never raises. Returns None when no object can be recovered, which tells
    the caller to move on to the next provider tier.

    Args:
        provider_name: Provider label for logging
        raw_text: Raw text returned by the provider

    Returns:
        Parsed JSON object, or None
    """
    text = raw_text if isinstance(raw_text, str) else ""
    span = locate_json_span(text)
    if span is None:
        logger.warning(
            "PROVIDER_JSON_NOT_FOUND",
            extra={"provider": provider_name, "snippet": create_log_snippet(text)}
        )
        return None

    parsed = _loads(span, strict=True)
    if isinstance(parsed, dict):
        return parsed

    parsed = _loads(repair_json(span), strict=False)
    if isinstance(parsed, dict):
        logger.warning(
            "PROVIDER_JSON_REPAIRED",
            extra={"provider": provider_name, "span_length": len(span)}
        )
        return parsed

    logger.error(
        "PROVIDER_JSON_UNRECOVERABLE",
        extra={"provider": provider_name, "snippet": create_log_snippet(span)}
    )
    return None
