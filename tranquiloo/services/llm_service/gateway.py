"""Provider gateway: one call in, one tagged result out.

Every failure mode of an external generator (no credentials, HTTP error,
timeout, transport error, unparsable text, any other client exception)
is converted here into a ProviderResult, so the orchestrator and crisis
assessor never catch provider exceptions themselves.
"""
import asyncio
import logging
from typing import Optional

import aiohttp
import openai

from .base_llm import BaseLLM
from .errors import ProviderError, ProviderHTTPError
from .extractor import extract_json
from .results import Parsed, ProviderFailure, ProviderResult, Unparsed

logger = logging.getLogger(__name__)


async def request_structured(
    llm: Optional[BaseLLM],
    provider_name: str,
    prompt: str,
    system_prompt: Optional[str] = None,
    **kwargs
) -> ProviderResult:
    """Call a provider and extract a JSON object from its answer.

    Args:
        llm: Configured client, or None when the provider is unavailable
        provider_name: Label used in logs and results
        prompt: User prompt
        system_prompt: Optional system prompt
        **kwargs: Passed through to BaseLLM.generate

    Returns:
        Parsed, Unparsed or ProviderFailure
    """
    if llm is None:
        logger.info("PROVIDER_SKIPPED_UNAVAILABLE", extra={"provider": provider_name})
        return ProviderFailure(provider=provider_name, reason="unavailable")

    try:
        response = await llm.generate(prompt, system_prompt=system_prompt, **kwargs)
    except ProviderHTTPError as e:
        logger.warning(
            "PROVIDER_HTTP_ERROR",
            extra={"provider": provider_name, "status": e.status, "body": e.body}
        )
        return ProviderFailure(provider=provider_name, reason="http_error", status=e.status)
    except ProviderError as e:
        logger.warning(
            "PROVIDER_ERROR",
            extra={"provider": provider_name, "error": str(e)}
        )
        return ProviderFailure(provider=provider_name, reason="provider_error")
    except asyncio.TimeoutError:
        logger.warning("PROVIDER_TIMEOUT", extra={"provider": provider_name})
        return ProviderFailure(provider=provider_name, reason="timeout")
    except (aiohttp.ClientError, openai.APIError, ValueError) as e:
        logger.warning(
            "PROVIDER_REQUEST_FAILED",
            extra={
                "provider": provider_name,
                "error_type": type(e).__name__,
                "error": str(e)[:200],
            }
        )
        return ProviderFailure(provider=provider_name, reason="transport_error")
    except Exception as e:
        logger.error(
            "PROVIDER_UNEXPECTED_ERROR",
            extra={
                "provider": provider_name,
                "error_type": type(e).__name__,
                "error": str(e)[:200],
            }
        )
        return ProviderFailure(provider=provider_name, reason="unexpected_error")

    payload = extract_json(provider_name, response.text)
    if payload is None:
        return Unparsed(provider=provider_name, raw_text=response.text)
    return Parsed(provider=provider_name, payload=payload)
