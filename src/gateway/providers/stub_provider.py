# Author: Bradley R. Kinnard — fake it till the API key shows up

"""
Canned provider for STUB_MODE. Deterministic: same request, same result, no network.
Handy for the mobile app folks who don't have a provider key.
"""

from src.gateway.core.models import (
    AnalyzeErrorRequest,
    AnalyzeQualityRequest,
    CompleteRequest,
    CompletionResult,
    ErrorAnalysisResult,
    ExplainRequest,
    ExplainResult,
    GenerateRequest,
    GenerateResult,
    QualityIssue,
    QualityResult,
    RefactorChange,
    RefactorRequest,
    RefactorResult,
)
from src.gateway.providers.base_provider import BaseProvider

_HELLO = {
    "kotlin": 'fun main() {\n    println("Hello, World!")\n}',
    "java": 'public class Main {\n    public static void main(String[] args) {\n        System.out.println("Hello, World!");\n    }\n}',
    "xml": '<TextView\n    android:layout_width="wrap_content"\n    android:layout_height="wrap_content"\n    android:text="Hello, World!" />',
    "javascript": 'console.log("Hello, World!");',
    "typescript": 'const greeting: string = "Hello, World!";\nconsole.log(greeting);',
}


class StubProvider(BaseProvider):

    def __init__(self):
        super().__init__("stub")

    async def generate(self, req: GenerateRequest) -> GenerateResult:
        return GenerateResult(
            code=_HELLO[req.language],
            explanation=f"Stub {req.difficulty} {req.language} snippet. Set PROVIDER_API_KEY for real output.",
            suggestions=["Add error handling", "Extract constants", "Write a unit test"],
        )

    async def explain(self, req: ExplainRequest) -> ExplainResult:
        lines = req.code.count("\n") + 1
        return ExplainResult(
            explanation=f"This {req.language} snippet has {lines} line(s). Stub explanation at '{req.level}' level.",
            key_concepts=["variables", "functions"],
            complexity_level="low" if lines < 20 else "medium",
        )

    async def analyze_error(self, req: AnalyzeErrorRequest) -> ErrorAnalysisResult:
        return ErrorAnalysisResult(
            analysis=f"Stub diagnosis for: {req.error.splitlines()[0][:200]}",
            possible_solutions=["Check for null values before use", "Verify imports and dependencies"],
            prevention_tips=["Enable strict null checks", "Add tests around the failing path"],
            corrected_code=None,
        )

    async def complete(self, req: CompleteRequest) -> CompletionResult:
        return CompletionResult(
            completions=["()", ".toString()", ".let { }"],
            context="stub completion",
        )

    async def refactor(self, req: RefactorRequest) -> RefactorResult:
        return RefactorResult(
            original_code=req.code,
            refactored_code=req.code,
            changes=[RefactorChange(type="variable_rename", before="x", after="itemCount", reason="More descriptive name")],
            explanation=f"Stub {req.refactor_type} refactor, code returned unchanged",
            benefits=["Improved readability", "Better maintainability"],
        )

    async def analyze_quality(self, req: AnalyzeQualityRequest) -> QualityResult:
        return QualityResult(
            score=85,
            issues=[QualityIssue(type="warning", message="Consider using more descriptive variable names", line=1, severity="medium")],
            suggestions=["Add null safety checks", "Consider using const for immutable values", "Add error handling"],
            metrics={"complexity": "low", "maintainability": "high", "testability": "medium"},
        )
