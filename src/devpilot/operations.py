"""Operation names with their typed parameter and result variants.

Each operation has exactly one parameter dataclass and one result type.
``generate``, ``docs``, ``test`` and ``chat`` produce plain text; the others
produce the structured results below.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

from .core import Session
from .errors import UnknownOperation


class Operation(str, Enum):
    GENERATE = "generate"
    REVIEW = "review"
    REFACTOR = "refactor"
    DOCS = "docs"
    TEST = "test"
    CHAT = "chat"
    ANALYZE = "analyze"
    OPTIMIZE = "optimize"


SEVERITIES = ("info", "warning", "error", "critical")


# ── Parameters ───────────────────────────────────────────────────


@dataclass
class GenerateParams:
    type: str
    prompt: str
    context: str = ""
    template: Optional[str] = None


@dataclass
class ReviewParams:
    code: str
    file: str
    focus: str = "all"
    severity: str = "info"


@dataclass
class RefactorParams:
    code: str
    target: str
    type: str = "optimize"
    scope: str = "function"


@dataclass
class DocsParams:
    code: str
    target: str
    type: str = "api"
    format: str = "markdown"
    include_examples: bool = False


@dataclass
class TestParams:
    __test__ = False  # not a pytest test class

    code: str
    target: str
    framework: str = "jest"
    coverage: str = "unit"
    mocks: bool = False


@dataclass
class ChatParams:
    message: str
    session: Session


@dataclass
class AnalyzeParams:
    code: str
    target: str
    aspect: str = "all"
    suggestions: bool = False


@dataclass
class OptimizeParams:
    code: str
    target: str
    focus: str = "speed"


# ── Results ──────────────────────────────────────────────────────


@dataclass
class Issue:
    severity: str  # one of SEVERITIES
    description: str
    line: Optional[int] = None
    suggestion: Optional[str] = None


@dataclass
class ReviewResult:
    issues: list[Issue] = field(default_factory=list)
    suggestions: list[str] = field(default_factory=list)
    score: int = 100


@dataclass
class Change:
    description: str
    content: Optional[str] = None  # full replacement text for the target, if any


@dataclass
class RefactorPlan:
    description: str
    changes: list[Change] = field(default_factory=list)


@dataclass
class OptimizationPlan:
    description: str
    changes: list[Change] = field(default_factory=list)


@dataclass
class AnalysisResult:
    complexity: str
    maintainability: str
    suggestions: list[str] = field(default_factory=list)


OperationParams = Union[
    GenerateParams, ReviewParams, RefactorParams, DocsParams,
    TestParams, ChatParams, AnalyzeParams, OptimizeParams,
]
OperationResult = Union[str, ReviewResult, RefactorPlan, OptimizationPlan, AnalysisResult]

PARAM_TYPES: dict[Operation, type] = {
    Operation.GENERATE: GenerateParams,
    Operation.REVIEW: ReviewParams,
    Operation.REFACTOR: RefactorParams,
    Operation.DOCS: DocsParams,
    Operation.TEST: TestParams,
    Operation.CHAT: ChatParams,
    Operation.ANALYZE: AnalyzeParams,
    Operation.OPTIMIZE: OptimizeParams,
}

RESULT_TYPES: dict[Operation, type] = {
    Operation.GENERATE: str,
    Operation.REVIEW: ReviewResult,
    Operation.REFACTOR: RefactorPlan,
    Operation.DOCS: str,
    Operation.TEST: str,
    Operation.CHAT: str,
    Operation.ANALYZE: AnalysisResult,
    Operation.OPTIMIZE: OptimizationPlan,
}


def resolve_operation(name: Union[str, Operation]) -> Operation:
    """Map an operation name to an ``Operation``, or raise ``UnknownOperation``."""
    if isinstance(name, Operation):
        return name
    try:
        return Operation(name)
    except ValueError:
        raise UnknownOperation(str(name)) from None


def check_params(operation: Operation, params: object) -> None:
    expected = PARAM_TYPES[operation]
    if not isinstance(params, expected):
        raise TypeError(
            f"{operation.value} expects {expected.__name__}, got {type(params).__name__}"
        )


def check_result(operation: Operation, result: object) -> None:
    expected = RESULT_TYPES[operation]
    if not isinstance(result, expected):
        raise TypeError(
            f"{operation.value} must return {expected.__name__}, got {type(result).__name__}"
        )


def severity_rank(severity: str) -> int:
    """Rank a severity name; unknown names rank as ``info``."""
    try:
        return SEVERITIES.index(severity.lower())
    except ValueError:
        return 0
