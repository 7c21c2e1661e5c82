# Author: Bradley R. Kinnard — pay per token, classify per failure

"""
Async client for the upstream completion service. Anything that speaks the OpenAI
chat completions dialect works (DeepSeek by default), so we use the native openai SDK
pointed at a different base_url.

This is the only module that knows about API keys, base URLs and SDK exceptions.
Everything it raises is a ProviderError with a kind; SDK exceptions stop here.
"""

import asyncio
import logging

import openai
from openai import AsyncOpenAI

from src.gateway.config import settings
from src.gateway.core.errors import ProviderError, ProviderErrorKind

log = logging.getLogger(__name__)

_client: AsyncOpenAI | None = None
_lock = asyncio.Lock()


async def get_llm() -> AsyncOpenAI:
    """
    Get or create the shared client. SDK retries are off: one call here is one call upstream.
    """
    global _client
    if _client is not None:
        return _client

    async with _lock:
        if _client is not None:
            return _client

        if not settings.provider_api_key:
            raise ProviderError(ProviderErrorKind.UNAVAILABLE, "PROVIDER_API_KEY not set")

        log.info(f"creating AsyncOpenAI client, base_url={settings.provider_base_url} model={settings.provider_model}")
        _client = AsyncOpenAI(
            api_key=settings.provider_api_key,
            base_url=settings.provider_base_url,
            timeout=settings.provider_timeout,
            max_retries=0,
        )
        return _client


def classify(exc: BaseException) -> ProviderErrorKind:
    """map an SDK/transport exception to our taxonomy. order matters, timeouts are connection errors too"""
    if isinstance(exc, (asyncio.TimeoutError, TimeoutError, openai.APITimeoutError)):
        return ProviderErrorKind.TIMEOUT
    if isinstance(exc, openai.RateLimitError):
        return ProviderErrorKind.RATE_LIMITED_UPSTREAM
    if isinstance(exc, (openai.APIConnectionError, openai.InternalServerError)):
        return ProviderErrorKind.UNAVAILABLE
    if isinstance(exc, (openai.AuthenticationError, openai.PermissionDeniedError)):
        # our key is bad, from the caller's side the provider is just not there
        return ProviderErrorKind.UNAVAILABLE
    if isinstance(exc, openai.APIResponseValidationError):
        return ProviderErrorKind.INVALID_UPSTREAM_RESPONSE
    return ProviderErrorKind.UNKNOWN


async def chat_json(system: str, user: str) -> str:
    """
    Send a chat request expecting a JSON object back.
    Returns the raw content string; parsing is the caller's job.
    """
    client = await get_llm()

    try:
        resp = await client.chat.completions.create(
            model=settings.provider_model,
            messages=[
                {"role": "system", "content": system},
                {"role": "user", "content": user}
            ],
            temperature=settings.provider_temperature,
            max_tokens=settings.provider_max_tokens,
            response_format={"type": "json_object"}
        )
    except Exception as e:
        kind = classify(e)
        log.warning(f"provider call failed: {type(e).__name__} -> {kind.value}")
        raise ProviderError(kind, f"{type(e).__name__}: {e}") from e

    if not resp.choices:
        raise ProviderError(ProviderErrorKind.INVALID_UPSTREAM_RESPONSE, "no choices in response")

    choice = resp.choices[0]
    if choice.finish_reason == "length":
        raise ProviderError(ProviderErrorKind.INVALID_UPSTREAM_RESPONSE, "response truncated at max_tokens")

    content = choice.message.content
    if not content:
        raise ProviderError(ProviderErrorKind.INVALID_UPSTREAM_RESPONSE, "empty message content")

    if resp.usage is not None:
        log.debug(f"provider usage: prompt={resp.usage.prompt_tokens} completion={resp.usage.completion_tokens}")
    return content


async def reset_llm() -> None:
    """For testing. Clears the singleton."""
    global _client
    async with _lock:
        _client = None
