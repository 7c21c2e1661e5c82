# Author: Bradley R. Kinnard — where types go to be validated

"""
Pydantic models for actions, results and the response envelope.
Requests are the whole input contract: lengths, enums and defaults live here and nowhere else.
Results are frozen so nothing downstream of the provider can quietly rewrite them.
"""

from enum import Enum
from typing import Annotated, Any, ClassVar, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator


class Action(str, Enum):
    GENERATE = "generate"
    EXPLAIN = "explain"
    ANALYZE_ERROR = "analyze-error"
    COMPLETE = "complete"
    REFACTOR = "refactor"
    ANALYZE_QUALITY = "analyze"
    FORMAT = "format"


Language = Literal["kotlin", "java", "xml", "javascript", "typescript"]
Difficulty = Literal["beginner", "intermediate", "advanced"]
ExplainLevel = Literal["simple", "detailed", "expert"]
AnalysisType = Literal["quality", "performance", "security", "best-practices"]
RefactorType = Literal["simplify", "optimize", "modernize", "extract-method"]

MAX_PROMPT = 5000
MAX_CODE = 10000
MAX_ERROR = 2000

Code = Annotated[str, Field(min_length=1, max_length=MAX_CODE)]


# requests

class _ActionRequest(BaseModel):
    """unknown keys dropped, camelCase on the wire, snake_case in python"""
    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    action: ClassVar[Action]


class GenerateRequest(_ActionRequest):
    action: ClassVar[Action] = Action.GENERATE

    prompt: str = Field(min_length=1, max_length=MAX_PROMPT)
    language: Language = "kotlin"
    context: str | None = Field(default=None, max_length=MAX_PROMPT)
    difficulty: Difficulty = "beginner"


class ExplainRequest(_ActionRequest):
    action: ClassVar[Action] = Action.EXPLAIN

    code: Code
    language: Language
    level: ExplainLevel = "simple"


class AnalyzeErrorRequest(_ActionRequest):
    action: ClassVar[Action] = Action.ANALYZE_ERROR

    error: str = Field(min_length=1, max_length=MAX_ERROR)
    code: Code
    language: Language


class CompleteRequest(_ActionRequest):
    action: ClassVar[Action] = Action.COMPLETE

    code: Code
    language: Language
    # strict so "12" and true don't sneak through as ints
    cursor_position: Annotated[int, Field(strict=True, ge=0)] | None = Field(default=None, alias="cursorPosition")

    @field_validator("cursor_position")
    @classmethod
    def _cursor_inside_code(cls, v: int | None, info: ValidationInfo) -> int | None:
        code = info.data.get("code")
        if v is not None and code is not None and v > len(code):
            raise ValueError(f"cursorPosition must be between 0 and {len(code)}")
        return v


class AnalyzeQualityRequest(_ActionRequest):
    action: ClassVar[Action] = Action.ANALYZE_QUALITY

    code: Code
    language: Language
    analysis_type: AnalysisType = Field(default="quality", alias="analysisType")


class RefactorRequest(_ActionRequest):
    action: ClassVar[Action] = Action.REFACTOR

    code: Code
    language: Language
    refactor_type: RefactorType = Field(alias="refactorType")
    difficulty: Difficulty = "beginner"


class FormatRequest(_ActionRequest):
    action: ClassVar[Action] = Action.FORMAT

    code: Code
    language: Language


ActionRequest = Union[
    GenerateRequest,
    ExplainRequest,
    AnalyzeErrorRequest,
    CompleteRequest,
    AnalyzeQualityRequest,
    RefactorRequest,
    FormatRequest,
]

REQUEST_MODELS: dict[Action, type[_ActionRequest]] = {
    m.action: m for m in (
        GenerateRequest, ExplainRequest, AnalyzeErrorRequest, CompleteRequest,
        AnalyzeQualityRequest, RefactorRequest, FormatRequest,
    )
}


# results

class _ActionResult(BaseModel):
    model_config = ConfigDict(frozen=True)


class GenerateResult(_ActionResult):
    code: str
    explanation: str
    suggestions: list[str]


class ExplainResult(_ActionResult):
    explanation: str
    key_concepts: list[str]
    complexity_level: str


class ErrorAnalysisResult(_ActionResult):
    analysis: str
    possible_solutions: list[str]
    prevention_tips: list[str]
    corrected_code: str | None = None


class CompletionResult(_ActionResult):
    completions: list[str]
    context: str


class RefactorChange(_ActionResult):
    type: str
    before: str
    after: str
    reason: str


class RefactorResult(_ActionResult):
    original_code: str
    refactored_code: str
    changes: list[RefactorChange]
    explanation: str
    benefits: list[str]


class QualityIssue(_ActionResult):
    type: Literal["error", "warning", "info"]
    message: str
    line: int | None = Field(default=None, ge=1)
    severity: Literal["low", "medium", "high"]


class QualityResult(_ActionResult):
    score: int = Field(ge=0, le=100)
    issues: list[QualityIssue]
    suggestions: list[str]
    metrics: dict[str, str]


class FormatResult(_ActionResult):
    formatted_code: str


ActionResult = Union[
    GenerateResult,
    ExplainResult,
    ErrorAnalysisResult,
    CompletionResult,
    RefactorResult,
    QualityResult,
    FormatResult,
]


# envelope

class ValidationIssue(BaseModel):
    """one bad field. field is a dotted path, 'body' when the whole payload is wrong"""
    model_config = ConfigDict(frozen=True)

    field: str
    constraint: str  # human readable, e.g. "String should have at least 1 character"
    type: str  # machine readable, e.g. "string_too_short"
    actual: str  # class of what we got: "str", "int", "missing", ...


class ResponseEnvelope(BaseModel):
    """What every route returns. success=True means data and no error, and vice versa."""
    model_config = ConfigDict(frozen=True)

    success: bool
    data: dict[str, Any] | None = None
    error: str | None = None
    details: list[ValidationIssue] | None = None

    @model_validator(mode="after")
    def _one_of_data_or_error(self) -> "ResponseEnvelope":
        if self.success and (self.data is None or self.error is not None or self.details is not None):
            raise ValueError("successful envelope needs data and nothing else")
        if not self.success and (self.error is None or self.data is not None):
            raise ValueError("failed envelope needs an error and no data")
        return self

    def to_wire(self) -> dict[str, Any]:
        """the JSON body. absent keys are omitted, not null"""
        if self.success:
            return {"success": True, "data": self.data}
        body: dict[str, Any] = {"success": False, "error": self.error}
        if self.details is not None:
            body["details"] = [d.model_dump() for d in self.details]
        return body


class HealthResponse(BaseModel):
    status: Literal["healthy", "degraded"]
    timestamp: str
    version: str
    provider: Literal["stub", "remote"]
    model: str | None = None
    request_id: str
