# Author: Bradley R. Kinnard — prove the gate holds

"""Schema validation per action: lengths, enums, defaults, unknown keys."""

import pytest

from src.gateway.core.errors import RequestValidationFailed
from src.gateway.core.models import (
    Action,
    AnalyzeQualityRequest,
    CompleteRequest,
    GenerateRequest,
    RefactorRequest,
)
from src.gateway.utils.validation import validate_request


def _issues(action: Action, payload) -> dict[str, object]:
    with pytest.raises(RequestValidationFailed) as exc:
        validate_request(action, payload)
    assert exc.value.details, "a rejection must say why"
    return {i.field: i for i in exc.value.details}


def test_generate_fills_defaults():
    req = validate_request(Action.GENERATE, {"prompt": "create a login screen"})
    assert isinstance(req, GenerateRequest)
    assert req.language == "kotlin"
    assert req.difficulty == "beginner"
    assert req.context is None


def test_unknown_fields_are_ignored():
    req = validate_request(Action.GENERATE, {"prompt": "hi", "temperature": 2, "model": "gpt-9"})
    assert not hasattr(req, "temperature")


def test_explain_empty_code_rejected():
    issues = _issues(Action.EXPLAIN, {"code": "", "language": "kotlin"})
    assert set(issues) == {"code"}
    assert issues["code"].type == "string_too_short"
    assert issues["code"].actual == "str"


def test_missing_required_fields_reported_as_missing():
    issues = _issues(Action.ANALYZE_ERROR, {"code": "val x = 1"})
    assert issues["error"].actual == "missing"
    assert issues["language"].actual == "missing"
    assert "code" not in issues


def test_prompt_length_ceiling():
    validate_request(Action.GENERATE, {"prompt": "a" * 5000})
    issues = _issues(Action.GENERATE, {"prompt": "a" * 5001})
    assert issues["prompt"].type == "string_too_long"


def test_code_length_ceiling():
    issues = _issues(Action.EXPLAIN, {"code": "x" * 10001, "language": "java"})
    assert "code" in issues


def test_error_length_ceiling():
    issues = _issues(Action.ANALYZE_ERROR, {"error": "e" * 2001, "code": "x", "language": "java"})
    assert "error" in issues


@pytest.mark.parametrize("language", ["python", "Kotlin", "", 3])
def test_language_is_a_closed_set(language):
    issues = _issues(Action.EXPLAIN, {"code": "x", "language": language})
    assert "language" in issues


def test_wrong_type_reports_actual_class():
    issues = _issues(Action.GENERATE, {"prompt": 42})
    assert issues["prompt"].actual == "int"


@pytest.mark.parametrize("payload", [None, [], "prompt", 7])
def test_non_object_body_rejected(payload):
    issues = _issues(Action.GENERATE, payload)
    assert "body" in issues


def test_refactor_requires_refactor_type_by_wire_name():
    issues = _issues(Action.REFACTOR, {"code": "x", "language": "kotlin"})
    assert "refactorType" in issues

    req = validate_request(Action.REFACTOR, {"code": "x", "language": "kotlin", "refactorType": "simplify"})
    assert isinstance(req, RefactorRequest)
    assert req.refactor_type == "simplify"
    assert req.difficulty == "beginner"


def test_analysis_type_default_and_enum():
    req = validate_request(Action.ANALYZE_QUALITY, {"code": "x", "language": "xml"})
    assert isinstance(req, AnalyzeQualityRequest)
    assert req.analysis_type == "quality"

    issues = _issues(Action.ANALYZE_QUALITY, {"code": "x", "language": "xml", "analysisType": "vibes"})
    assert "analysisType" in issues


def test_cursor_position_optional():
    req = validate_request(Action.COMPLETE, {"code": "val x=1", "language": "kotlin"})
    assert isinstance(req, CompleteRequest)
    assert req.cursor_position is None


def test_cursor_position_accepted_inside_code():
    req = validate_request(Action.COMPLETE, {"code": "val x=1", "language": "kotlin", "cursorPosition": 7})
    assert req.cursor_position == 7


@pytest.mark.parametrize("cursor", ["3", 3.5, True, -1, 8])
def test_cursor_position_malformed_is_rejected(cursor):
    issues = _issues(Action.COMPLETE, {"code": "val x=1", "language": "kotlin", "cursorPosition": cursor})
    assert set(issues) == {"cursorPosition"}


def test_validation_collects_every_violation():
    issues = _issues(Action.REFACTOR, {"code": "", "language": "cobol", "refactorType": "rewrite", "difficulty": "god"})
    assert set(issues) == {"code", "language", "refactorType", "difficulty"}


def test_requests_are_frozen():
    req = validate_request(Action.GENERATE, {"prompt": "hi"})
    with pytest.raises(Exception):
        req.prompt = "changed"
