# Author: Bradley R. Kinnard — all providers inherit from this or they don't exist

"""
ABC for providers. One coroutine per action, typed request in, typed result out.
Failures leave as ProviderError with a kind, never as whatever the transport threw.
The dispatcher only ever talks to this interface, so swapping the real thing for a stub
touches nothing above it.
"""

from abc import ABC, abstractmethod

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
    QualityResult,
    RefactorRequest,
    RefactorResult,
)


class BaseProvider(ABC):

    name: str

    def __init__(self, name: str):
        self.name = name

    @abstractmethod
    async def generate(self, req: GenerateRequest) -> GenerateResult: ...

    @abstractmethod
    async def explain(self, req: ExplainRequest) -> ExplainResult: ...

    @abstractmethod
    async def analyze_error(self, req: AnalyzeErrorRequest) -> ErrorAnalysisResult: ...

    @abstractmethod
    async def complete(self, req: CompleteRequest) -> CompletionResult: ...

    @abstractmethod
    async def refactor(self, req: RefactorRequest) -> RefactorResult: ...

    @abstractmethod
    async def analyze_quality(self, req: AnalyzeQualityRequest) -> QualityResult: ...
