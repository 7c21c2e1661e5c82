# Author: Bradley R. Kinnard — where code goes to get help

"""
POST one route per action. Rate limit, validate, dispatch, envelope.
The handlers are thin on purpose: everything interesting is in services/dispatcher.py.
"""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from src.gateway.api.dependencies import get_provider, read_payload
from src.gateway.core.models import Action
from src.gateway.providers.base_provider import BaseProvider
from src.gateway.services.dispatcher import handle
from src.gateway.services.envelope import render

router = APIRouter(tags=["assist"])
log = logging.getLogger(__name__)

Payload = Annotated[Any, Depends(read_payload)]
Provider = Annotated[BaseProvider, Depends(get_provider)]


async def _run(action: Action, payload: Any, provider: BaseProvider) -> JSONResponse:
    outcome = await handle(action, payload, provider)
    log.info(f"{action.value} | status={outcome.status_code} outcome={outcome.kind}")
    return render(outcome)


@router.post("/generate")
async def generate_code(payload: Payload, provider: Provider) -> JSONResponse:
    """code from a natural language prompt"""
    return await _run(Action.GENERATE, payload, provider)


@router.post("/explain")
async def explain_code(payload: Payload, provider: Provider) -> JSONResponse:
    return await _run(Action.EXPLAIN, payload, provider)


@router.post("/analyze-error")
async def analyze_error(payload: Payload, provider: Provider) -> JSONResponse:
    """diagnose an error message against the code that produced it"""
    return await _run(Action.ANALYZE_ERROR, payload, provider)


@router.post("/complete")
async def complete_code(payload: Payload, provider: Provider) -> JSONResponse:
    return await _run(Action.COMPLETE, payload, provider)


@router.post("/analyze")
async def analyze_quality(payload: Payload, provider: Provider) -> JSONResponse:
    """quality/performance/security review with a 0-100 score"""
    return await _run(Action.ANALYZE_QUALITY, payload, provider)


@router.post("/refactor")
async def refactor_code(payload: Payload, provider: Provider) -> JSONResponse:
    return await _run(Action.REFACTOR, payload, provider)


@router.post("/format")
async def format_code(payload: Payload, provider: Provider) -> JSONResponse:
    """whitespace cleanup, answered locally. still rate limited and validated"""
    return await _run(Action.FORMAT, payload, provider)
