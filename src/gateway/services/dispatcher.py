# Author: Bradley R. Kinnard — one request, one route, one answer

"""
Action dispatcher. Validate, route to the provider, wrap the answer.

Each request walks Received -> Validated -> Dispatched -> Succeeded|Failed, one step at a time.
No domain logic here: the provider does the work, this module picks which coroutine
to await, bounds how long we wait, and turns whatever happened into an Outcome.
"""

import asyncio
import logging
import time
from enum import Enum

from src.gateway.adapters.metrics_client import (
    provider_error_total,
    provider_latency,
    provider_retry_total,
    requests_total,
)
from src.gateway.config import settings
from src.gateway.core.errors import GatewayError, InternalError, ProviderError, ProviderErrorKind
from src.gateway.core.models import Action, ActionRequest, ActionResult, FormatRequest, FormatResult
from src.gateway.providers.base_provider import BaseProvider
from src.gateway.services import envelope
from src.gateway.services.envelope import Outcome
from src.gateway.services.formatter import format_code
from src.gateway.utils.validation import validate_request

log = logging.getLogger(__name__)

# action -> provider coroutine name
OPERATIONS: dict[Action, str] = {
    Action.GENERATE: "generate",
    Action.EXPLAIN: "explain",
    Action.ANALYZE_ERROR: "analyze_error",
    Action.COMPLETE: "complete",
    Action.REFACTOR: "refactor",
    Action.ANALYZE_QUALITY: "analyze_quality",
}

# the only kinds worth a second try. upstream 429 means back off, not hammer
RETRYABLE = {ProviderErrorKind.TIMEOUT, ProviderErrorKind.UNAVAILABLE}


class RequestState(str, Enum):
    RECEIVED = "received"
    VALIDATED = "validated"
    DISPATCHED = "dispatched"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


_TRANSITIONS = {
    RequestState.RECEIVED: {RequestState.VALIDATED, RequestState.FAILED},
    RequestState.VALIDATED: {RequestState.DISPATCHED, RequestState.FAILED},
    RequestState.DISPATCHED: {RequestState.SUCCEEDED, RequestState.FAILED},
}


class RequestLifecycle:
    """tracks where a request is. terminal states can't move"""

    def __init__(self, action: Action):
        self.action = action
        self.state = RequestState.RECEIVED
        self.failure_kind: str | None = None

    def advance(self, to: RequestState) -> None:
        if to not in _TRANSITIONS.get(self.state, set()):
            raise RuntimeError(f"illegal transition {self.state.value} -> {to.value}")
        self.state = to

    def fail(self, kind: str) -> None:
        self.advance(RequestState.FAILED)
        self.failure_kind = kind

    @property
    def done(self) -> bool:
        return self.state in (RequestState.SUCCEEDED, RequestState.FAILED)


async def _call_provider(provider: BaseProvider, req: ActionRequest, timeout: float) -> ActionResult:
    """one upstream attempt, bounded. ProviderError or a result, nothing else from the transport"""
    op = getattr(provider, OPERATIONS[req.action])
    start = time.perf_counter()
    try:
        return await asyncio.wait_for(op(req), timeout=timeout)
    except asyncio.TimeoutError:
        raise ProviderError(ProviderErrorKind.TIMEOUT, f"no answer within {timeout}s") from None
    finally:
        provider_latency.labels(action=req.action.value).observe(time.perf_counter() - start)


async def dispatch(
    req: ActionRequest,
    provider: BaseProvider,
    timeout: float | None = None,
    retries: int | None = None,
) -> ActionResult:
    """
    Route a validated request. /format is answered locally; everything else goes to
    the provider with at most 1 + retries upstream calls. retries defaults to
    settings.dispatch_retries, which defaults to 0.
    """
    if isinstance(req, FormatRequest):
        return FormatResult(formatted_code=format_code(req.code, req.language))

    timeout = settings.provider_timeout if timeout is None else timeout
    retries = settings.dispatch_retries if retries is None else retries
    attempts = 1 + max(0, retries)

    for attempt in range(1, attempts + 1):
        try:
            return await _call_provider(provider, req, timeout)
        except ProviderError as e:
            provider_error_total.labels(kind=e.provider_kind.value).inc()
            if e.provider_kind in RETRYABLE and attempt < attempts:
                provider_retry_total.labels(action=req.action.value).inc()
                log.warning(f"{req.action.value} attempt {attempt}/{attempts} failed ({e.provider_kind.value}), retrying")
                continue
            raise

    # unreachable, the loop either returns or raises
    raise InternalError()


async def handle(action: Action, payload: object, provider: BaseProvider) -> Outcome:
    """
    Full pipeline for one already rate-limited request.
    Never raises (cancellation aside): every path ends in a well-formed Outcome.
    """
    lifecycle = RequestLifecycle(action)
    try:
        req = validate_request(action, payload)
        lifecycle.advance(RequestState.VALIDATED)

        lifecycle.advance(RequestState.DISPATCHED)
        result = await dispatch(req, provider)

        lifecycle.advance(RequestState.SUCCEEDED)
        outcome = envelope.success(result)

    except GatewayError as e:
        if isinstance(e, ProviderError):
            log.warning(f"{action.value} failed: {e.kind} ({e.reason})")
        else:
            log.info(f"{action.value} rejected: {e.kind}")
        outcome = envelope.failure(e)

    except Exception:
        log.exception(f"{action.value} crashed in state {lifecycle.state.value}")
        outcome = envelope.failure(InternalError())

    if not lifecycle.done:
        lifecycle.fail(outcome.kind)

    requests_total.labels(action=action.value, outcome=outcome.kind).inc()
    return outcome
