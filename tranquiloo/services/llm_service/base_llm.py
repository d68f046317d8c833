"""Base LLM interface and provider clients.

Two external text generators are used by the pipeline:
- Anthropic Messages API (generator A), called over HTTPS with aiohttp
- OpenAI Chat Completions (generator B and the crisis assessor), through
  the official async SDK

Both clients raise ProviderUnavailable at construction when no API key is
configured, and ProviderHTTPError on non-2xx answers. Every request has a
bounded timeout.
"""

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

import aiohttp
import openai

from tranquiloo.shared.utils import create_log_snippet
from .errors import ProviderHTTPError, ProviderUnavailable

logger = logging.getLogger(__name__)

ANTHROPIC_MESSAGES_URL = "https://api.anthropic.com/v1/messages"
ANTHROPIC_VERSION = "2023-06-01"


class LLMProvider(Enum):
    """Supported LLM providers."""
    ANTHROPIC = "anthropic"
    OPENAI = "openai"


@dataclass
class LLMConfig:
    """Configuration for LLM inference."""
    provider: LLMProvider
    model_name: str
    api_key: Optional[str] = None
    endpoint: Optional[str] = None
    max_tokens: int = 800
    temperature: float = 0.7
    timeout_seconds: float = 25.0


@dataclass
class LLMResponse:
    """Response from LLM inference."""
    text: str
    model: str
    provider: str
    tokens_used: Optional[int] = None
    latency_ms: Optional[float] = None
    metadata: Optional[Dict] = None


class BaseLLM(ABC):
    """Abstract base class for LLM implementations."""

    # Upper bound on prompt size; long histories are trimmed before this
    MAX_PROMPT_LENGTH = 20000

    def __init__(self, config: LLMConfig):
        """Initialize LLM with configuration.

        Args:
            config: LLM configuration
        """
        self.config = config
        logger.info(
            "LLM_INITIALIZED",
            extra={
                "provider": config.provider.value,
                "model": config.model_name,
            }
        )

    @property
    def name(self) -> str:
        return self.config.provider.value

    @abstractmethod
    async def generate(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        **kwargs
    ) -> LLMResponse:
        """Generate response from LLM.

        Args:
            prompt: User prompt
            system_prompt: Optional system prompt for context
            **kwargs: Provider-specific options (json_mode, temperature)

        Returns:
            LLMResponse object

        Raises:
            ProviderHTTPError: If the provider answers with a non-2xx status
            ValueError: If prompt is invalid
        """
        pass

    def validate_prompt(self, prompt: str) -> bool:
        """Validate prompt before sending to LLM.

        Args:
            prompt: The prompt to validate

        Returns:
            True if valid, False otherwise
        """
        if not prompt or not prompt.strip():
            logger.warning("LLM_EMPTY_PROMPT", extra={"provider": self.name})
            return False

        if len(prompt) > self.MAX_PROMPT_LENGTH:
            logger.warning(
                "LLM_PROMPT_TOO_LONG",
                extra={"provider": self.name, "length": len(prompt)}
            )
            return False

        return True


class AnthropicLLM(BaseLLM):
    """Anthropic Messages API over aiohttp."""

    def __init__(self, config: LLMConfig):
        """Initialize Anthropic LLM.

        Args:
            config: LLM configuration with API key

        Raises:
            ProviderUnavailable: If no API key is configured
        """
        if not config.api_key:
            raise ProviderUnavailable(config.provider.value)
        super().__init__(config)
        self.endpoint = config.endpoint or ANTHROPIC_MESSAGES_URL
        self.headers = {
            "Content-Type": "application/json",
            "x-api-key": config.api_key,
            "anthropic-version": ANTHROPIC_VERSION,
        }

    def build_payload(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        temperature: Optional[float] = None,
    ) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "model": self.config.model_name,
            "max_tokens": self.config.max_tokens,
            "temperature": self.config.temperature if temperature is None else temperature,
            "messages": [{"role": "user", "content": prompt}],
        }
        if system_prompt:
            payload["system"] = system_prompt
        return payload

    @staticmethod
    def extract_text(result: Dict[str, Any]) -> str:
        """Text of the first content block, or "" if the shape is unexpected."""
        content = result.get("content") if isinstance(result, dict) else None
        if isinstance(content, list) and content and isinstance(content[0], dict):
            text = content[0].get("text")
            if isinstance(text, str):
                return text
        return ""

    @staticmethod
    def extract_token_usage(result: Dict[str, Any]) -> Optional[int]:
        """Input plus output tokens, or None when usage is missing or malformed."""
        usage = result.get("usage") if isinstance(result, dict) else None
        if not isinstance(usage, dict):
            return None
        counts = [
            usage.get(key) for key in ("input_tokens", "output_tokens")
            if isinstance(usage.get(key), int) and not isinstance(usage.get(key), bool)
        ]
        return sum(counts) if counts else None

    async def generate(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        **kwargs
    ) -> LLMResponse:
        """Generate response using the Anthropic Messages API.

        Args:
            prompt: User prompt
            system_prompt: Optional system prompt
            **kwargs: temperature override

        Returns:
            LLMResponse object
        """
        if not self.validate_prompt(prompt):
            raise ValueError("Invalid prompt")

        payload = self.build_payload(prompt, system_prompt, kwargs.get("temperature"))
        start_time = time.time()

        async with aiohttp.ClientSession() as session:
            async with session.post(
                self.endpoint,
                headers=self.headers,
                json=payload,
                timeout=aiohttp.ClientTimeout(total=self.config.timeout_seconds)
            ) as response:
                if response.status >= 400:
                    body = await response.text()
                    raise ProviderHTTPError(self.name, response.status, create_log_snippet(body))
                result = await response.json(content_type=None)

        if not isinstance(result, dict):
            result = {}

        latency_ms = (time.time() - start_time) * 1000
        tokens_used = self.extract_token_usage(result)

        logger.info(
            "LLM_GENERATION_SUCCEEDED",
            extra={
                "provider": self.name,
                "model": self.config.model_name,
                "latency_ms": round(latency_ms, 1),
                "tokens_used": tokens_used,
            }
        )

        return LLMResponse(
            text=self.extract_text(result),
            model=result.get("model", self.config.model_name),
            provider=self.name,
            tokens_used=tokens_used,
            latency_ms=latency_ms,
            metadata={"endpoint": self.endpoint},
        )


class OpenAILLM(BaseLLM):
    """OpenAI API implementation (chat completions)."""

    def __init__(self, config: LLMConfig):
        """Initialize OpenAI LLM.

        Args:
            config: LLM configuration with API key

        Raises:
            ProviderUnavailable: If no API key is configured
        """
        if not config.api_key:
            raise ProviderUnavailable(config.provider.value)
        super().__init__(config)
        self.client = openai.AsyncOpenAI(
            api_key=config.api_key,
            base_url=config.endpoint,
            timeout=config.timeout_seconds,
        )

    async def generate(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        **kwargs
    ) -> LLMResponse:
        """Generate response using OpenAI API.

        Args:
            prompt: User prompt
            system_prompt: Optional system prompt
            **kwargs: json_mode=True requests a JSON object response;
                temperature overrides the configured value

        Returns:
            LLMResponse object
        """
        if not self.validate_prompt(prompt):
            raise ValueError("Invalid prompt")

        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        options: Dict[str, Any] = {}
        if kwargs.get("json_mode"):
            options["response_format"] = {"type": "json_object"}
        temperature = kwargs.get("temperature")

        start_time = time.time()
        try:
            response = await self.client.chat.completions.create(
                model=self.config.model_name,
                messages=messages,
                max_tokens=self.config.max_tokens,
                temperature=self.config.temperature if temperature is None else temperature,
                **options,
            )
        except openai.APIStatusError as e:
            raise ProviderHTTPError(
                self.name, e.status_code, create_log_snippet(str(e.message))
            ) from e

        latency_ms = (time.time() - start_time) * 1000
        generated_text = (response.choices[0].message.content or "") if response.choices else ""
        tokens_used = response.usage.total_tokens if response.usage else None

        logger.info(
            "LLM_GENERATION_SUCCEEDED",
            extra={
                "provider": self.name,
                "model": self.config.model_name,
                "latency_ms": round(latency_ms, 1),
                "tokens_used": tokens_used,
            }
        )

        return LLMResponse(
            text=generated_text,
            model=self.config.model_name,
            provider=self.name,
            tokens_used=tokens_used,
            latency_ms=latency_ms,
        )


def create_llm(config: LLMConfig) -> BaseLLM:
    """Factory function to create LLM instance.

    Args:
        config: LLM configuration

    Returns:
        BaseLLM instance

    Raises:
        ProviderUnavailable: If the provider has no API key
        ValueError: If provider not supported
    """
    if config.provider == LLMProvider.ANTHROPIC:
        return AnthropicLLM(config)
    elif config.provider == LLMProvider.OPENAI:
        return OpenAILLM(config)
    else:
        raise ValueError(f"Unsupported provider: {config.provider}")
