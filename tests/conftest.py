# Author: Bradley R. Kinnard — shared fixtures, no network

"""
Fixtures shared by unit and integration tests.
RecordingProvider stands in for the real provider: deterministic answers, a call log,
and knobs for delay and failures. Nothing here touches the network.
"""

import asyncio

import pytest
from fastapi.testclient import TestClient

from src.gateway.api.dependencies import get_provider
from src.gateway.core.models import (
    CompletionResult,
    ErrorAnalysisResult,
    ExplainResult,
    GenerateResult,
    QualityIssue,
    QualityResult,
    RefactorChange,
    RefactorResult,
)
from src.gateway.core.rate_limiter import FixedWindowRateLimiter, get_limiter
from src.gateway.main import app
from src.gateway.providers.base_provider import BaseProvider

GENERATED = {
    "code": "@Composable\nfun LoginScreen() { }",
    "explanation": "A login screen with two fields and a button",
    "suggestions": ["Validate the email field"],
}


class RecordingProvider(BaseProvider):
    """records every call. set .delay to stall, push onto .errors to fail the next calls in order"""

    def __init__(self):
        super().__init__("recording")
        self.calls: list[str] = []
        self.delay = 0.0
        self.errors: list[BaseException] = []

    async def _answer(self, op: str, result):
        self.calls.append(op)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.errors:
            raise self.errors.pop(0)
        return result

    async def generate(self, req):
        return await self._answer("generate", GenerateResult(**GENERATED))

    async def explain(self, req):
        return await self._answer("explain", ExplainResult(
            explanation="assigns 1 to x", key_concepts=["val"], complexity_level="low"
        ))

    async def analyze_error(self, req):
        return await self._answer("analyze_error", ErrorAnalysisResult(
            analysis="x is null", possible_solutions=["use ?."], prevention_tips=["avoid !!"]
        ))

    async def complete(self, req):
        return await self._answer("complete", CompletionResult(completions=["+ 1"], context="expression"))

    async def refactor(self, req):
        return await self._answer("refactor", RefactorResult(
            original_code=req.code,
            refactored_code=req.code,
            changes=[RefactorChange(type="variable_rename", before="x", after="count", reason="clearer")],
            explanation="renamed",
            benefits=["readability"],
        ))

    async def analyze_quality(self, req):
        return await self._answer("analyze_quality", QualityResult(
            score=90,
            issues=[QualityIssue(type="info", message="fine", line=1, severity="low")],
            suggestions=[],
            metrics={"complexity": "low"},
        ))


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def provider() -> RecordingProvider:
    return RecordingProvider()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def limiter(clock) -> FixedWindowRateLimiter:
    return FixedWindowRateLimiter(limit=100, window=60, clock=clock)


@pytest.fixture
def client(provider, limiter):
    """TestClient with the provider and limiter swapped for test doubles"""
    app.dependency_overrides[get_provider] = lambda: provider
    app.dependency_overrides[get_limiter] = lambda: limiter
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()
