# Author: Bradley R. Kinnard — garbage in, 400 out

"""
Input validation. Reject bad requests before they waste provider tokens.
Pure: no network, no state, no logging side effects. Same payload, same answer.
"""

from typing import Any, Iterable

from pydantic import ValidationError

from src.gateway.core.errors import RequestValidationFailed
from src.gateway.core.models import REQUEST_MODELS, Action, ActionRequest, ValidationIssue


def _value_class(value: Any) -> str:
    if value is None:
        return "null"
    return type(value).__name__


def _field_path(loc: Iterable[Any]) -> str:
    parts = [str(p) for p in loc]
    # FastAPI prefixes body errors with "body"
    if parts and parts[0] == "body":
        parts = parts[1:]
    return ".".join(parts) or "body"


def issues_from_errors(errors: Iterable[dict[str, Any]]) -> list[ValidationIssue]:
    """pydantic/FastAPI error dicts -> our ValidationIssue list"""
    issues = []
    for err in errors:
        err_type = err.get("type", "value_error")
        if err_type == "missing":
            actual = "missing"
        else:
            actual = _value_class(err.get("input"))

        field = "body" if err_type == "json_invalid" else _field_path(err.get("loc", ()))
        issues.append(ValidationIssue(
            field=field,
            constraint=err.get("msg", "invalid value"),
            type=err_type,
            actual=actual,
        ))
    return issues


def validate_request(action: Action, payload: Any) -> ActionRequest:
    """
    Payload in, typed request out. Raises RequestValidationFailed with one issue
    per violation. Call this from the route before doing any real work.
    """
    model = REQUEST_MODELS[action]
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise RequestValidationFailed(issues_from_errors(e.errors(include_url=False))) from None
