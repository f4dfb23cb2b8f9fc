"""Offline provider returning canned responses.

Stands in for a real AI service: every operation returns a fixed result of
the right shape, which keeps the CLI usable without network access.
"""

from ..operations import (
    AnalysisResult,
    Operation,
    OperationParams,
    OperationResult,
    OptimizationPlan,
    RefactorPlan,
    ReviewResult,
)
from ..provider import AIProvider


class MockProvider(AIProvider):
    """Provider with fixed, deterministic responses."""

    name = "mock"

    def call(self, operation: Operation, params: OperationParams) -> OperationResult:
        if operation is Operation.GENERATE:
            return (
                f"// Generated {params.type} code\n"
                f"function {params.type}() {{\n"
                "  // Implementation here\n"
                "}"
            )
        if operation is Operation.REVIEW:
            return ReviewResult(issues=[], suggestions=[], score=95)
        if operation is Operation.REFACTOR:
            return RefactorPlan(description="Refactoring plan", changes=[])
        if operation is Operation.DOCS:
            return f"# {params.target} Documentation\n\nGenerated documentation..."
        if operation is Operation.TEST:
            return (
                "// Generated tests\n"
                f"describe('{params.target}', () => {{\n"
                "  // Tests here\n"
                "});"
            )
        if operation is Operation.CHAT:
            return f"You said: {params.message}"
        if operation is Operation.ANALYZE:
            return AnalysisResult(complexity="low", maintainability="high", suggestions=[])
        if operation is Operation.OPTIMIZE:
            return OptimizationPlan(description="Optimization plan", changes=[])
        raise AssertionError(f"unhandled operation: {operation}")
