# Author: Bradley R. Kinnard — the provider lies, we check

"""Upstream parsing and failure classification, with the SDK faked out."""

import asyncio
import json
from types import SimpleNamespace

import httpx
import openai
import pytest

from src.gateway.adapters import llm_client
from src.gateway.config import settings
from src.gateway.core.errors import ProviderError, ProviderErrorKind
from src.gateway.core.models import Action
from src.gateway.providers import prompts
from src.gateway.providers.llm_provider import LLMProvider
from src.gateway.utils.validation import validate_request

_REQ = httpx.Request("POST", "https://api.example.test/chat/completions")


def _answer(monkeypatch, content: str):
    """make chat_json return content and record what it was asked"""
    seen = []

    async def fake_chat_json(system: str, user: str) -> str:
        seen.append((system, user))
        return content

    monkeypatch.setattr(llm_client, "chat_json", fake_chat_json)
    return seen


def _completion(content, finish_reason="stop"):
    return SimpleNamespace(
        choices=[SimpleNamespace(finish_reason=finish_reason, message=SimpleNamespace(content=content))],
        usage=None,
    )


def _fake_client(monkeypatch, *, returns=None, raises=None):
    async def create(**kwargs):
        if raises is not None:
            raise raises
        return returns

    client = SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))

    async def fake_get_llm():
        return client

    monkeypatch.setattr(llm_client, "get_llm", fake_get_llm)


@pytest.mark.asyncio
async def test_generate_parses_upstream_json(monkeypatch):
    seen = _answer(monkeypatch, json.dumps({
        "code": "fun main() {}", "explanation": "entry point", "suggestions": ["add args"], "extra": 1
    }))
    req = validate_request(Action.GENERATE, {"prompt": "main function", "context": "cli app"})

    result = await LLMProvider().generate(req)

    assert result.model_dump() == {"code": "fun main() {}", "explanation": "entry point", "suggestions": ["add args"]}
    system, user = seen[0]
    assert "kotlin" in system
    assert "cli app" in user


@pytest.mark.asyncio
@pytest.mark.parametrize("content", [
    "not json at all",
    "[" * 200_000,
    "[1, 2, 3]",
    json.dumps({"code": "x", "explanation": "y"}),
    json.dumps({"code": "x", "explanation": "y", "suggestions": "not a list"}),
])
async def test_malformed_upstream_is_invalid_response(monkeypatch, content):
    _answer(monkeypatch, content)
    req = validate_request(Action.GENERATE, {"prompt": "anything"})

    with pytest.raises(ProviderError) as exc:
        await LLMProvider().generate(req)
    assert exc.value.provider_kind is ProviderErrorKind.INVALID_UPSTREAM_RESPONSE


@pytest.mark.asyncio
async def test_quality_score_out_of_range_is_invalid(monkeypatch):
    _answer(monkeypatch, json.dumps({"score": 140, "issues": [], "suggestions": [], "metrics": {}}))
    req = validate_request(Action.ANALYZE_QUALITY, {"code": "x", "language": "java"})
    with pytest.raises(ProviderError) as exc:
        await LLMProvider().analyze_quality(req)
    assert exc.value.provider_kind is ProviderErrorKind.INVALID_UPSTREAM_RESPONSE


@pytest.mark.asyncio
async def test_refactor_keeps_our_original_code(monkeypatch):
    _answer(monkeypatch, json.dumps({
        "original_code": "something the model made up",
        "refactored_code": "val count = 1",
        "changes": [{"type": "variable_rename", "before": "x", "after": "count", "reason": "clarity"}],
        "explanation": "renamed x",
        "benefits": ["readability"],
    }))
    req = validate_request(Action.REFACTOR, {"code": "val x = 1", "language": "kotlin", "refactorType": "simplify"})
    result = await LLMProvider().refactor(req)
    assert result.original_code == "val x = 1"
    assert result.changes[0].after == "count"


def test_completion_prompt_marks_cursor():
    req = validate_request(Action.COMPLETE, {"code": "val x=1", "language": "kotlin", "cursorPosition": 4})
    _, user = prompts.complete(req)
    assert "val <CURSOR>x=1" in user


def test_every_provider_action_has_a_prompt_version():
    provider_actions = set(Action) - {Action.FORMAT}
    assert set(prompts.PROMPT_VERSIONS) == provider_actions


@pytest.mark.parametrize("exc,kind", [
    (openai.APITimeoutError(request=_REQ), ProviderErrorKind.TIMEOUT),
    (asyncio.TimeoutError(), ProviderErrorKind.TIMEOUT),
    (openai.RateLimitError("slow down", response=httpx.Response(429, request=_REQ), body=None),
     ProviderErrorKind.RATE_LIMITED_UPSTREAM),
    (openai.APIConnectionError(request=_REQ), ProviderErrorKind.UNAVAILABLE),
    (openai.InternalServerError("boom", response=httpx.Response(503, request=_REQ), body=None),
     ProviderErrorKind.UNAVAILABLE),
    (openai.AuthenticationError("bad key", response=httpx.Response(401, request=_REQ), body=None),
     ProviderErrorKind.UNAVAILABLE),
    (openai.BadRequestError("nope", response=httpx.Response(400, request=_REQ), body=None),
     ProviderErrorKind.UNKNOWN),
    (ValueError("who knows"), ProviderErrorKind.UNKNOWN),
])
def test_classify(exc, kind):
    assert llm_client.classify(exc) is kind


@pytest.mark.asyncio
async def test_chat_json_reclassifies_sdk_errors(monkeypatch):
    err = openai.RateLimitError("slow down", response=httpx.Response(429, request=_REQ), body=None)
    _fake_client(monkeypatch, raises=err)

    with pytest.raises(ProviderError) as exc:
        await llm_client.chat_json("sys", "user")
    assert exc.value.provider_kind is ProviderErrorKind.RATE_LIMITED_UPSTREAM
    assert exc.value.status_code == 503


@pytest.mark.asyncio
@pytest.mark.parametrize("resp", [
    SimpleNamespace(choices=[], usage=None),
    _completion(None),
    _completion('{"code": "trunc', finish_reason="length"),
])
async def test_chat_json_rejects_unusable_responses(monkeypatch, resp):
    _fake_client(monkeypatch, returns=resp)
    with pytest.raises(ProviderError) as exc:
        await llm_client.chat_json("sys", "user")
    assert exc.value.provider_kind is ProviderErrorKind.INVALID_UPSTREAM_RESPONSE


@pytest.mark.asyncio
async def test_chat_json_returns_content(monkeypatch):
    _fake_client(monkeypatch, returns=_completion('{"ok": true}'))
    assert await llm_client.chat_json("sys", "user") == '{"ok": true}'


@pytest.mark.asyncio
async def test_missing_api_key_is_unavailable(monkeypatch):
    monkeypatch.setattr(settings, "provider_api_key", "")
    await llm_client.reset_llm()

    with pytest.raises(ProviderError) as exc:
        await llm_client.get_llm()
    assert exc.value.provider_kind is ProviderErrorKind.UNAVAILABLE
