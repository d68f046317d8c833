"""Log redaction helpers: zero raw message text in application logs.

User messages describe mental-health crises and must never reach log
storage verbatim. Components log a fingerprint of the message instead,
and provider output only as a short, whitespace-collapsed snippet.
"""
import hashlib

LOG_SNIPPET_MAX_LENGTH = 200


def hash_text_for_audit(text: str) -> str:
    """Hash message text for audit trail without exposing content.

    Used to create a fingerprint of message content that can be
    matched against the stored original if needed for clinical review.

    Args:
        text: Raw message text

    Returns:
        SHA-256 hash of the text
    """
    return hashlib.sha256((text or "").encode("utf-8", "surrogatepass")).hexdigest()


def create_log_snippet(text: str, max_length: int = LOG_SNIPPET_MAX_LENGTH) -> str:
    """Collapse whitespace and truncate provider output for logging.

    Args:
        text: Raw provider output
        max_length: Maximum snippet length before the ellipsis

    Returns:
        Single-line snippet, suffixed with an ellipsis when truncated
    """
    sanitized = " ".join((text or "").split())
    if len(sanitized) <= max_length:
        return sanitized
    return f"{sanitized[:max_length]}…"
