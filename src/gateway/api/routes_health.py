# Author: Bradley R. Kinnard — the app's pulse check

"""Health endpoint and /metrics. Neither is rate limited or validated."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Request, Response

from src.gateway.adapters.metrics_client import get_metrics
from src.gateway.config import settings
from src.gateway.core.models import HealthResponse

router = APIRouter(tags=["health"])
log = logging.getLogger(__name__)


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """liveness plus a hint about provider config. never calls the provider"""
    rid = getattr(request.state, "request_id", "unknown")

    if settings.stub_mode:
        provider, model, healthy = "stub", None, True
    else:
        provider, model, healthy = "remote", settings.provider_model, bool(settings.provider_api_key)

    return HealthResponse(
        status="healthy" if healthy else "degraded",
        timestamp=datetime.now(timezone.utc).isoformat(),
        version=settings.app_version,
        provider=provider,
        model=model,
        request_id=rid,
    )


@router.get("/metrics")
async def metrics() -> Response:
    """prometheus metrics endpoint"""
    return Response(content=get_metrics(), media_type="text/plain; charset=utf-8")
