# Author: Bradley R. Kinnard — same shape, every time

"""
Envelope builder. Result or error in, (status, body, headers) out.
Pure functions, no I/O. Nothing leaves the gateway without passing through here.
"""

from dataclasses import dataclass, field

from fastapi.responses import JSONResponse
from pydantic import BaseModel

from src.gateway.core.errors import GatewayError, RateLimited, RequestValidationFailed
from src.gateway.core.models import ResponseEnvelope, ValidationIssue


@dataclass(frozen=True)
class Outcome:
    status_code: int
    envelope: ResponseEnvelope
    kind: str = "success"
    headers: dict[str, str] = field(default_factory=dict)


def success(result: BaseModel) -> Outcome:
    return Outcome(
        status_code=200,
        envelope=ResponseEnvelope(success=True, data=result.model_dump(mode="json")),
    )


def failure(err: GatewayError) -> Outcome:
    """map any GatewayError to its wire form. the message is already safe to show"""
    headers = {"X-Error-Kind": err.kind}
    details = None

    if isinstance(err, RequestValidationFailed):
        details = err.details or [
            ValidationIssue(field="body", constraint="invalid request", type="value_error", actual="unknown")
        ]
    if isinstance(err, RateLimited):
        headers["Retry-After"] = str(err.retry_after)

    return Outcome(
        status_code=err.status_code,
        envelope=ResponseEnvelope(success=False, error=err.message, details=details),
        kind=err.kind,
        headers=headers,
    )


def render(outcome: Outcome) -> JSONResponse:
    return JSONResponse(
        status_code=outcome.status_code,
        content=outcome.envelope.to_wire(),
        headers=outcome.headers or None,
    )
