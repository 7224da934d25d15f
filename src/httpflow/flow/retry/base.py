"""Base interface for retry handlers."""

import typing as t
from abc import ABC, abstractmethod

T = t.TypeVar("T")


class BaseRetryHandler(ABC):
    """Abstract base class for retry handlers.

    Lets the pipeline run with a retrying handler or a single-shot one
    interchangeably.
    """

    @abstractmethod
    async def execute_with_retry(
        self,
        operation: t.Callable[[], t.Awaitable[T]],
        url: str,
        request_id: str = "",
        method: str = "GET",
    ) -> T:
        """Execute an attempt, re-issuing it while the policy allows.

        Args:
            operation: Async callable performing one attempt. It raises a
                FlowError when the attempt fails.
            url: URL of the request, for logging and events.
            request_id: Identifier correlating events of one request.
            method: HTTP method, for events.

        Returns:
            The result of the successful attempt.

        Raises:
            FlowError: The terminal error of the request.
        """
        pass
