"""Tagged result of one structured provider request.

Callers branch on the concrete type:

    if isinstance(result, Parsed): ...
    elif isinstance(result, Unparsed): ...
    else:  # ProviderFailure
        ...
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union


@dataclass(frozen=True)
class Parsed:
    """Provider returned text containing a recoverable JSON object."""
    provider: str
    payload: Dict[str, Any]


@dataclass(frozen=True)
class Unparsed:
    """Provider answered, but no JSON object survived the repair pass."""
    provider: str
    raw_text: str


@dataclass(frozen=True)
class ProviderFailure:
    """No usable answer: missing credentials, HTTP error or transport error."""
    provider: str
    reason: str
    status: Optional[int] = None


ProviderResult = Union[Parsed, Unparsed, ProviderFailure]
