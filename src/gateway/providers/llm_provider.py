# Author: Bradley R. Kinnard — trust the model, verify the JSON

"""
Real provider. Builds the prompt, makes exactly one upstream call, and parses the answer
into our result models. Missing or mistyped fields are INVALID_UPSTREAM_RESPONSE,
never a half-filled success.
"""

import json
import logging
import time
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from src.gateway.adapters import llm_client
from src.gateway.core.errors import ProviderError, ProviderErrorKind
from src.gateway.core.models import (
    Action,
    AnalyzeErrorRequest,
    AnalyzeQualityRequest,
    CompleteRequest,
    CompletionResult,
    ErrorAnalysisResult,
    ExplainRequest,
    ExplainResult,
    GenerateRequest,
    GenerateResult,
    QualityResult,
    RefactorRequest,
    RefactorResult,
)
from src.gateway.providers import prompts
from src.gateway.providers.base_provider import BaseProvider

log = logging.getLogger(__name__)

R = TypeVar("R", bound=BaseModel)


def parse_json_object(content: str) -> dict[str, Any]:
    """upstream content -> dict, or INVALID_UPSTREAM_RESPONSE"""
    try:
        data = json.loads(content)
    except (ValueError, TypeError, RecursionError) as e:
        raise ProviderError(ProviderErrorKind.INVALID_UPSTREAM_RESPONSE, f"not JSON: {e}") from None
    if not isinstance(data, dict):
        raise ProviderError(ProviderErrorKind.INVALID_UPSTREAM_RESPONSE, f"expected object, got {type(data).__name__}")
    return data


def to_result(data: dict[str, Any], model: type[R]) -> R:
    try:
        return model.model_validate(data)
    except ValidationError as e:
        fields = sorted({".".join(str(p) for p in err["loc"]) for err in e.errors()})
        raise ProviderError(
            ProviderErrorKind.INVALID_UPSTREAM_RESPONSE,
            f"{model.__name__} rejected upstream fields: {', '.join(fields)}"
        ) from None


class LLMProvider(BaseProvider):

    def __init__(self):
        super().__init__("remote")

    async def _ask(self, action: Action, system: str, user: str) -> dict[str, Any]:
        start = time.perf_counter()
        content = await llm_client.chat_json(system, user)
        took = int((time.perf_counter() - start) * 1000)
        log.info(f"provider answered | action={action.value} prompt={prompts.PROMPT_VERSIONS[action]} took={took}ms")
        return parse_json_object(content)

    async def generate(self, req: GenerateRequest) -> GenerateResult:
        data = await self._ask(Action.GENERATE, *prompts.generate(req))
        return to_result(data, GenerateResult)

    async def explain(self, req: ExplainRequest) -> ExplainResult:
        data = await self._ask(Action.EXPLAIN, *prompts.explain(req))
        return to_result(data, ExplainResult)

    async def analyze_error(self, req: AnalyzeErrorRequest) -> ErrorAnalysisResult:
        data = await self._ask(Action.ANALYZE_ERROR, *prompts.analyze_error(req))
        return to_result(data, ErrorAnalysisResult)

    async def complete(self, req: CompleteRequest) -> CompletionResult:
        data = await self._ask(Action.COMPLETE, *prompts.complete(req))
        return to_result(data, CompletionResult)

    async def refactor(self, req: RefactorRequest) -> RefactorResult:
        data = await self._ask(Action.REFACTOR, *prompts.refactor(req))
        # the original is ours, don't let the model echo back something else
        data["original_code"] = req.code
        return to_result(data, RefactorResult)

    async def analyze_quality(self, req: AnalyzeQualityRequest) -> QualityResult:
        data = await self._ask(Action.ANALYZE_QUALITY, *prompts.analyze_quality(req))
        return to_result(data, QualityResult)
