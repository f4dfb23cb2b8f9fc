"""Error types shared by the devpilot commands.

Every command wraps its failures in a ``DevpilotError`` carrying a stable
code such as ``AI_REVIEW_FAILED``. These are ``click.ClickException``
subclasses, so Click prints ``Error: [CODE] message`` to stderr and exits
with status 1.
"""

import logging
from contextlib import contextmanager
from typing import Any, Iterator, Optional

import click

logger = logging.getLogger(__name__)

OPERATION_KINDS = (
    "GENERATE",
    "REVIEW",
    "REFACTOR",
    "DOCS",
    "TEST",
    "CHAT",
    "ANALYZE",
    "OPTIMIZE",
    "CONFIG_SET",
    "CONFIG_GET",
    "SESSIONS",
)

KIND_MESSAGES = {
    "GENERATE": "Failed to generate code",
    "REVIEW": "Failed to review code",
    "REFACTOR": "Failed to refactor code",
    "DOCS": "Failed to generate documentation",
    "TEST": "Failed to generate tests",
    "CHAT": "Failed to run chat session",
    "ANALYZE": "Failed to analyze code",
    "OPTIMIZE": "Failed to optimize code",
    "CONFIG_SET": "Failed to set AI configuration",
    "CONFIG_GET": "Failed to get AI configuration",
    "SESSIONS": "Failed to read chat sessions",
}


class DevpilotError(click.ClickException):
    """A user-facing failure with a stable code and the inputs that caused it."""

    exit_code = 1

    def __init__(
        self,
        code: str,
        message: str,
        context: Optional[dict[str, Any]] = None,
        recoverable: bool = True,
    ):
        super().__init__(message)
        self.code = code
        self.context = context or {}
        self.recoverable = recoverable

    def format_message(self) -> str:
        text = f"[{self.code}] {self.message}"
        cause = self.__cause__
        if cause is not None and str(cause):
            text += f": {cause}"
        return text


class UnknownOperation(DevpilotError):
    def __init__(self, operation: str):
        super().__init__(
            "UNKNOWN_OPERATION",
            f"Unknown AI operation: {operation}",
            {"operation": operation},
            recoverable=False,
        )
        self.operation = operation


class ConfigError(DevpilotError):
    def __init__(self, message: str, context: Optional[dict[str, Any]] = None):
        super().__init__("CONFIG_INVALID", message, context, recoverable=False)


def error_code(kind: str) -> str:
    return f"AI_{kind}_FAILED"


@contextmanager
def wrap_errors(kind: str, **context: Any) -> Iterator[None]:
    """Re-raise anything raised in the block as ``AI_<kind>_FAILED``.

    Click's own control-flow exceptions (abort, exit) pass through untouched,
    as does an error already carrying this kind's code. The recoverable flag
    of a wrapped ``DevpilotError`` is kept.
    """
    if kind not in KIND_MESSAGES:
        raise ValueError(f"Unknown error kind: {kind}")
    try:
        yield
    except (click.Abort, click.exceptions.Exit):
        raise
    except DevpilotError as exc:
        if exc.code == error_code(kind):
            raise
        logger.debug("%s failed: %r", kind, exc)
        raise DevpilotError(
            error_code(kind), KIND_MESSAGES[kind], context, recoverable=exc.recoverable
        ) from exc
    except Exception as exc:
        logger.debug("%s failed: %r", kind, exc, exc_info=True)
        raise DevpilotError(
            error_code(kind), KIND_MESSAGES[kind], context, recoverable=True
        ) from exc
