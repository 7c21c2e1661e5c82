# Author: Bradley R. Kinnard — gatekeepers

"""FastAPI dependencies for client identity, rate limiting, body parsing and provider lookup."""

import json
import logging
from typing import Annotated, Any

from fastapi import Depends, Request

from src.gateway.adapters.metrics_client import rate_limit_hit_total
from src.gateway.config import settings
from src.gateway.core.errors import PayloadTooLarge, RateLimited, RequestValidationFailed
from src.gateway.core.models import ValidationIssue
from src.gateway.core.rate_limiter import FixedWindowRateLimiter, get_limiter
from src.gateway.logging_config import set_client
from src.gateway.providers.base_provider import BaseProvider
from src.gateway.providers.llm_provider import LLMProvider
from src.gateway.providers.stub_provider import StubProvider

log = logging.getLogger(__name__)

_provider: BaseProvider | None = None


def client_identity(request: Request) -> str:
    """
    who's asking, by network origin. X-Forwarded-For is only honored when
    TRUST_FORWARDED_FOR is on, otherwise any client could pick its own bucket.
    """
    if settings.trust_forwarded_for:
        forwarded = request.headers.get("X-Forwarded-For", "")
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    return request.client.host if request.client else "unknown"


async def check_rate_limit(
    request: Request,
    limiter: Annotated[FixedWindowRateLimiter, Depends(get_limiter)]
) -> None:
    """count this request against the caller's window. raises RateLimited (429) past the ceiling"""
    identity = client_identity(request)
    set_client(identity)

    result = await limiter.is_allowed(identity)
    if not result.allowed:
        rate_limit_hit_total.inc()
        raise RateLimited(retry_after=result.retry_after)


async def read_payload(
    request: Request,
    _: Annotated[None, Depends(check_rate_limit)]
) -> Any:
    """
    raw JSON body, parsed by hand so the rate limit is always checked first and the
    schema check stays in one place. empty body -> None, which the validator rejects.
    bodies over MAX_BODY_BYTES are refused (413) before they are buffered or parsed.
    """
    limit = settings.max_body_bytes
    declared = request.headers.get("Content-Length", "")
    if declared.isdigit() and int(declared) > limit:
        log.warning(f"rejecting body, declared {declared} bytes > {limit}")
        raise PayloadTooLarge(limit)

    # Content-Length can lie or be missing (chunked), so count what actually arrives
    chunks: list[bytes] = []
    size = 0
    async for chunk in request.stream():
        size += len(chunk)
        if size > limit:
            log.warning(f"rejecting body, streamed past {limit} bytes")
            raise PayloadTooLarge(limit)
        chunks.append(chunk)
    raw = b"".join(chunks)

    if not raw.strip():
        return None
    try:
        return json.loads(raw)
    except (ValueError, RecursionError) as e:
        # ValueError covers JSONDecodeError and UnicodeDecodeError, RecursionError is deep nesting
        raise RequestValidationFailed([
            ValidationIssue(field="body", constraint=f"JSON decode error: {e}", type="json_invalid", actual="bytes")
        ]) from None


def get_provider() -> BaseProvider:
    """process-wide provider. stub in STUB_MODE, the real thing otherwise"""
    global _provider
    if _provider is None:
        _provider = StubProvider() if settings.stub_mode else LLMProvider()
        log.info(f"provider selected: {_provider.name}")
    return _provider
