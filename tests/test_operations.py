"""Tests for operation variants and the provider invoke contract."""

import pytest

from devpilot.backends import available_providers, get_provider
from devpilot.backends.mock import MockProvider
from devpilot.core import new_session
from devpilot.errors import DevpilotError, UnknownOperation
from devpilot.operations import (
    PARAM_TYPES,
    RESULT_TYPES,
    AnalysisResult,
    AnalyzeParams,
    ChatParams,
    DocsParams,
    GenerateParams,
    Operation,
    OptimizationPlan,
    OptimizeParams,
    RefactorParams,
    RefactorPlan,
    ReviewParams,
    ReviewResult,
    TestParams,
    resolve_operation,
    severity_rank,
)

SAMPLE_PARAMS = {
    Operation.GENERATE: GenerateParams(type="component", prompt="a button"),
    Operation.REVIEW: ReviewParams(code="x = 1", file="a.py"),
    Operation.REFACTOR: RefactorParams(code="x = 1", target="a.py"),
    Operation.DOCS: DocsParams(code="x = 1", target="a.py"),
    Operation.TEST: TestParams(code="x = 1", target="a.py"),
    Operation.CHAT: ChatParams(message="hello", session=new_session()),
    Operation.ANALYZE: AnalyzeParams(code="x = 1", target="a.py"),
    Operation.OPTIMIZE: OptimizeParams(code="x = 1", target="a.py"),
}


def test_every_operation_has_one_param_and_result_variant():
    assert set(PARAM_TYPES) == set(Operation)
    assert set(RESULT_TYPES) == set(Operation)
    assert set(SAMPLE_PARAMS) == set(Operation)


@pytest.mark.parametrize("operation", list(Operation))
def test_mock_results_match_declared_variant(operation):
    result = MockProvider().invoke(operation, SAMPLE_PARAMS[operation])
    assert isinstance(result, RESULT_TYPES[operation])


@pytest.mark.parametrize("operation", list(Operation))
def test_invoke_accepts_operation_names(operation):
    result = MockProvider().invoke(operation.value, SAMPLE_PARAMS[operation])
    assert isinstance(result, RESULT_TYPES[operation])


def test_mock_responses():
    provider = MockProvider()
    assert provider.invoke("generate", SAMPLE_PARAMS[Operation.GENERATE]).startswith(
        "// Generated component code\nfunction component() {"
    )
    review = provider.invoke("review", SAMPLE_PARAMS[Operation.REVIEW])
    assert review == ReviewResult(issues=[], suggestions=[], score=95)
    assert provider.invoke("refactor", SAMPLE_PARAMS[Operation.REFACTOR]) == RefactorPlan("Refactoring plan", [])
    assert provider.invoke("docs", SAMPLE_PARAMS[Operation.DOCS]).startswith("# a.py Documentation")
    assert "describe('a.py'" in provider.invoke("test", SAMPLE_PARAMS[Operation.TEST])
    assert provider.invoke("chat", SAMPLE_PARAMS[Operation.CHAT]) == "You said: hello"
    assert provider.invoke("analyze", SAMPLE_PARAMS[Operation.ANALYZE]) == AnalysisResult("low", "high", [])
    assert provider.invoke("optimize", SAMPLE_PARAMS[Operation.OPTIMIZE]) == OptimizationPlan("Optimization plan", [])


def test_unknown_operation_is_rejected_before_calling_backend(recording_provider):
    with pytest.raises(UnknownOperation) as exc_info:
        recording_provider.invoke("deploy", SAMPLE_PARAMS[Operation.GENERATE])

    assert exc_info.value.code == "UNKNOWN_OPERATION"
    assert exc_info.value.recoverable is False
    assert "deploy" in exc_info.value.format_message()
    assert recording_provider.calls == []


def test_resolve_operation():
    assert resolve_operation("review") is Operation.REVIEW
    assert resolve_operation(Operation.CHAT) is Operation.CHAT
    with pytest.raises(UnknownOperation):
        resolve_operation("Review")


def test_mismatched_params_raise_type_error(recording_provider):
    with pytest.raises(TypeError, match="review expects ReviewParams"):
        recording_provider.invoke("review", SAMPLE_PARAMS[Operation.GENERATE])
    assert recording_provider.calls == []


def test_mismatched_result_raises_type_error(recording_provider):
    recording_provider.responses[Operation.REVIEW] = "looks fine"
    with pytest.raises(TypeError, match="review must return ReviewResult"):
        recording_provider.invoke("review", SAMPLE_PARAMS[Operation.REVIEW])


def test_severity_rank_orders_levels():
    assert severity_rank("info") < severity_rank("warning") < severity_rank("error") < severity_rank("critical")
    assert severity_rank("ERROR") == severity_rank("error")
    assert severity_rank("bogus") == severity_rank("info")


class TestRegistry:
    def test_default_provider_is_mock(self):
        assert isinstance(get_provider(), MockProvider)
        assert isinstance(get_provider("mock"), MockProvider)

    def test_unknown_provider(self):
        with pytest.raises(DevpilotError) as exc_info:
            get_provider("openai")
        assert exc_info.value.code == "PROVIDER_NOT_FOUND"
        assert "mock" in exc_info.value.message

    def test_available_providers(self):
        assert [p.name for p in available_providers()] == ["mock"]
