# Author: Bradley R. Kinnard — words that cost money

"""
Prompt templates, one per action. Each returns (system, user).
Bump the version next to a template whenever its wording or its JSON contract changes,
the version rides along in the log line for every provider call.
"""

from src.gateway.core.models import (
    Action,
    AnalyzeErrorRequest,
    AnalyzeQualityRequest,
    CompleteRequest,
    ExplainRequest,
    GenerateRequest,
    RefactorRequest,
)

PROMPT_VERSIONS: dict[Action, str] = {
    Action.GENERATE: "generate-v2",
    Action.EXPLAIN: "explain-v1",
    Action.ANALYZE_ERROR: "analyze-error-v1",
    Action.COMPLETE: "complete-v1",
    Action.REFACTOR: "refactor-v1",
    Action.ANALYZE_QUALITY: "analyze-v1",
}

_PREAMBLE = (
    "You are an assistant inside a mobile IDE for people learning Android and web development. "
    "You MUST respond with a single valid JSON object and nothing else."
)

_AUDIENCE = {
    "beginner": "The user is a beginner: prefer simple constructs and explain every step.",
    "intermediate": "The user is comfortable with the basics: skip the trivial parts.",
    "advanced": "The user is experienced: idiomatic, concise code, explain only the non-obvious.",
}

_DEPTH = {
    "simple": "Explain in plain words, a short paragraph, no jargon.",
    "detailed": "Explain section by section, naming the language features used.",
    "expert": "Explain at expert depth: performance, threading, lifecycle and edge cases.",
}


def _fence(code: str, language: str) -> str:
    return f"```{language}\n{code}\n```"


def generate(req: GenerateRequest) -> tuple[str, str]:
    system = f"""{_PREAMBLE}
Write {req.language} code for the user's request. {_AUDIENCE[req.difficulty]}

Response format:
{{"code": "the complete code", "explanation": "what it does and how", "suggestions": ["next step or best practice", ...]}}"""
    user = req.prompt
    if req.context:
        user = f"{user}\n\nProject context:\n{req.context}"
    return system, user


def explain(req: ExplainRequest) -> tuple[str, str]:
    system = f"""{_PREAMBLE}
Explain the {req.language} code the user sends. {_DEPTH[req.level]}

Response format:
{{"explanation": "...", "key_concepts": ["concept", ...], "complexity_level": "low|medium|high"}}"""
    return system, _fence(req.code, req.language)


def analyze_error(req: AnalyzeErrorRequest) -> tuple[str, str]:
    system = f"""{_PREAMBLE}
Diagnose the error the user hit in their {req.language} code and propose fixes.

Response format:
{{"analysis": "root cause", "possible_solutions": ["fix", ...], "prevention_tips": ["tip", ...], "corrected_code": "full fixed code or null"}}"""
    user = f"Error:\n{req.error}\n\nCode:\n{_fence(req.code, req.language)}"
    return system, user


def complete(req: CompleteRequest) -> tuple[str, str]:
    system = f"""{_PREAMBLE}
Suggest up to 5 completions for {req.language} code at the cursor, marked <CURSOR>.
Each completion is only the text to insert, not the surrounding code.

Response format:
{{"completions": ["inserted text", ...], "context": "what is being completed, e.g. 'function call argument'"}}"""
    cursor = len(req.code) if req.cursor_position is None else req.cursor_position
    marked = req.code[:cursor] + "<CURSOR>" + req.code[cursor:]
    return system, _fence(marked, req.language)


def refactor(req: RefactorRequest) -> tuple[str, str]:
    system = f"""{_PREAMBLE}
Refactor the user's {req.language} code. Goal: {req.refactor_type}. {_AUDIENCE[req.difficulty]}
Keep behavior identical.

Response format:
{{"refactored_code": "...", "changes": [{{"type": "variable_rename|extract_method|...", "before": "...", "after": "...", "reason": "..."}}], "explanation": "...", "benefits": ["...", ...]}}"""
    return system, _fence(req.code, req.language)


def analyze_quality(req: AnalyzeQualityRequest) -> tuple[str, str]:
    system = f"""{_PREAMBLE}
Review the user's {req.language} code with a focus on {req.analysis_type}.

Response format:
{{"score": 0-100, "issues": [{{"type": "error|warning|info", "message": "...", "line": 1-based line or null, "severity": "low|medium|high"}}], "suggestions": ["...", ...], "metrics": {{"complexity": "low|medium|high", "maintainability": "low|medium|high", "testability": "low|medium|high"}}}}"""
    return system, _fence(req.code, req.language)
