"""LLM Service: provider clients, tagged results and JSON recovery.

Components:
- base_llm.py: BaseLLM, AnthropicLLM (aiohttp), OpenAILLM (openai SDK)
- gateway.py: request_structured() -> Parsed | Unparsed | ProviderFailure
- extractor.py: Tolerant JSON extraction and repair
- prompts.py: Crisis rubric and analysis prompts
- errors.py: ProviderError hierarchy
"""

from .base_llm import (
    AnthropicLLM,
    BaseLLM,
    LLMConfig,
    LLMProvider,
    LLMResponse,
    OpenAILLM,
    create_llm,
)
from .errors import ProviderError, ProviderHTTPError, ProviderUnavailable
from .extractor import extract_json
from .gateway import request_structured
from .results import Parsed, ProviderFailure, ProviderResult, Unparsed

__all__ = [
    "AnthropicLLM",
    "BaseLLM",
    "LLMConfig",
    "LLMProvider",
    "LLMResponse",
    "OpenAILLM",
    "create_llm",
    "ProviderError",
    "ProviderHTTPError",
    "ProviderUnavailable",
    "extract_json",
    "request_structured",
    "Parsed",
    "ProviderFailure",
    "ProviderResult",
    "Unparsed",
]
