# Author: Bradley R. Kinnard — because code doesn't write itself. yet.

"""
Dev assist gateway. Validates requests, rate limits callers, sends the work to an
AI provider and hands back the same envelope shape no matter what went wrong.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator
import logging
import uuid

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import uvicorn
from src.gateway.adapters.llm_client import reset_llm
from src.gateway.api.routes_assist import router as assist_router
from src.gateway.api.routes_health import router as health_router
from src.gateway.config import settings
from src.gateway.core.errors import GatewayError, InternalError, RequestValidationFailed
from src.gateway.logging_config import setup_logging, set_request_id
from src.gateway.services.envelope import failure, render
from src.gateway.utils.validation import issues_from_errors

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    setup_logging(level=settings.log_level)
    mode = "stub" if settings.stub_mode else settings.provider_base_url
    logger.info(f"Service started; provider={mode} rate_limit={settings.rate_limit}/{settings.rate_window}s")
    yield
    await reset_llm()
    logger.info("Shutdown signal received; wrapping up")


app = FastAPI(
    title="Dev Assist Gateway",
    version=settings.app_version,
    lifespan=lifespan
)


@app.middleware("http")
async def inject_request_id(request: Request, call_next):
    # proxy might send one, otherwise make it up
    rid = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    request.state.request_id = rid
    set_request_id(rid)  # push to structlog context
    try:
        response = await call_next(request)
    except Exception as exc:
        # the Exception handler sits outside this middleware, render here so the header survives
        response = await unhandled_error_handler(request, exc)
    response.headers["X-Request-ID"] = rid
    return response


@app.exception_handler(GatewayError)
async def gateway_error_handler(request: Request, exc: GatewayError) -> JSONResponse:
    # rate limit and body parse failures raised from dependencies land here
    return render(failure(exc))


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # FastAPI's own param validation, same 400 envelope as ours instead of its 422
    return render(failure(RequestValidationFailed(issues_from_errors(exc.errors()))))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"unhandled error on {request.method} {request.url.path}", exc_info=exc)
    response = render(failure(InternalError()))
    rid = getattr(request.state, "request_id", None)
    if rid:
        response.headers["X-Request-ID"] = rid
    return response


app.include_router(health_router)
app.include_router(assist_router, prefix=settings.api_prefix)


if __name__ == "__main__":
    uvicorn.run("src.gateway.main:app", host="0.0.0.0", port=8000, reload=True)
