"""Abstract base class for AI providers."""

import logging
from abc import ABC, abstractmethod
from typing import Union

from .operations import (
    Operation,
    OperationParams,
    OperationResult,
    check_params,
    check_result,
    resolve_operation,
)

logger = logging.getLogger(__name__)


class AIProvider(ABC):
    """Base class for the services that execute AI operations.

    Backends implement ``call``. Commands and the chat loop only use
    ``invoke``, which validates the operation name and the shapes flowing in
    and out, so a backend can be swapped without touching its callers.
    """

    name: str  # "mock", ...

    def is_available(self) -> bool:
        """Return True if this provider can be used on this machine."""
        return True

    @abstractmethod
    def call(self, operation: Operation, params: OperationParams) -> OperationResult:
        """Execute one operation. ``params`` already matches the operation."""
        ...

    def invoke(self, operation: Union[str, Operation], params: OperationParams) -> OperationResult:
        op = resolve_operation(operation)
        check_params(op, params)
        logger.debug("Calling %s provider for operation: %s", self.name, op.value)
        result = self.call(op, params)
        check_result(op, result)
        return result
