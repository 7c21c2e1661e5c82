# Author: Bradley R. Kinnard — every failure gets a name

"""
Error taxonomy. Anything that leaves the gateway as a failure is one of these,
each with a stable kind and HTTP status. The envelope builder only reads .kind,
.status_code, .message and .details, never the original exception.
"""

from enum import Enum
from typing import Any


class ProviderErrorKind(str, Enum):
    TIMEOUT = "timeout"
    RATE_LIMITED_UPSTREAM = "rate_limited_upstream"
    INVALID_UPSTREAM_RESPONSE = "invalid_upstream_response"
    UNAVAILABLE = "unavailable"
    UNKNOWN = "unknown"


# 503 = try again later, 502 = upstream said something we can't use
PROVIDER_STATUS = {
    ProviderErrorKind.TIMEOUT: 503,
    ProviderErrorKind.RATE_LIMITED_UPSTREAM: 503,
    ProviderErrorKind.UNAVAILABLE: 503,
    ProviderErrorKind.INVALID_UPSTREAM_RESPONSE: 502,
    ProviderErrorKind.UNKNOWN: 502,
}

PROVIDER_MESSAGES = {
    ProviderErrorKind.TIMEOUT: "AI provider timed out",
    ProviderErrorKind.RATE_LIMITED_UPSTREAM: "AI provider is rate limiting requests, try again later",
    ProviderErrorKind.UNAVAILABLE: "AI provider unavailable",
    ProviderErrorKind.INVALID_UPSTREAM_RESPONSE: "AI provider returned an invalid response",
    ProviderErrorKind.UNKNOWN: "AI provider request failed",
}


class GatewayError(Exception):
    """base for everything the envelope builder knows how to render"""
    kind: str = "internal_error"
    status_code: int = 500

    def __init__(self, message: str, details: list[Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details


class RequestValidationFailed(GatewayError):
    """client sent junk. details carries one entry per offending field"""
    kind = "validation_error"
    status_code = 400

    def __init__(self, details: list[Any], message: str = "Validation error"):
        super().__init__(message, details=details)


class RateLimited(GatewayError):
    kind = "rate_limited"
    status_code = 429

    def __init__(self, retry_after: int):
        super().__init__(f"Rate limit exceeded, try again in {retry_after}s")
        self.retry_after = retry_after


class PayloadTooLarge(GatewayError):
    """body over MAX_BODY_BYTES, turned away before it is buffered or parsed"""
    kind = "payload_too_large"
    status_code = 413

    def __init__(self, limit: int):
        super().__init__(f"Request body too large (max {limit} bytes)")
        self.limit = limit


class ProviderError(GatewayError):
    """upstream failure, already classified. raw transport exceptions never get past the adapter"""

    def __init__(self, provider_kind: ProviderErrorKind, reason: str = ""):
        super().__init__(PROVIDER_MESSAGES[provider_kind])
        self.provider_kind = provider_kind
        self.reason = reason  # for logs only, never sent to the client
        self.status_code = PROVIDER_STATUS[provider_kind]

    @property
    def kind(self) -> str:  # type: ignore[override]
        return f"provider_error.{self.provider_kind.value}"


class InternalError(GatewayError):
    kind = "internal_error"
    status_code = 500

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)
