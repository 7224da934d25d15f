"""Retry handler driving the per-request retry state machine."""

import asyncio
import typing as t

from ...domain.exceptions import RetryFailedError
from ...domain.retry import ErrorCategory, RetryPolicy
from ...events import (
    BaseEmitter,
    ErrorInfo,
    EventEmitter,
    RequestEventType,
    RequestRetryingEvent,
)
from ...infrastructure.logging import get_logger
from .base import BaseRetryHandler
from .categoriser import ErrorCategoriser

if t.TYPE_CHECKING:
    import loguru

T = t.TypeVar("T")


class RetryHandler(BaseRetryHandler):
    """Re-issues failed attempts according to a RetryPolicy.

    For every failure, in order:

    1. If the budget is spent, give up with ``RetryFailedError`` wrapping
       the last failure.
    2. If the failure is not transient, re-raise it unchanged.
    3. Otherwise wait ``policy.calculate_delay(consumed + 1)``, count the
       retry and run the operation again.

    Retry state lives in ``execute_with_retry`` so one handler can serve
    any number of concurrent requests. Waiting happens with
    ``asyncio.sleep`` inside the request's task; cancelling the task during
    the wait stops the request without another attempt.
    """

    def __init__(
        self,
        policy: RetryPolicy,
        logger: "loguru.Logger" = get_logger(__name__),
        emitter: BaseEmitter | None = None,
        categoriser: ErrorCategoriser | None = None,
    ) -> None:
        """
        Initialise retry handler.

        Args:
            policy: Retry budget, delay and delay strategy
            logger: Logger for recording retry decisions
            emitter: Event emitter for broadcasting retry events.
                    If None, a new EventEmitter will be created.
            categoriser: Decides which errors are transient.
                        If None, the default ErrorCategoriser is used.
        """
        self.policy = policy
        self.logger = logger
        self.emitter = emitter if emitter is not None else EventEmitter(logger)
        self.categoriser = categoriser if categoriser is not None else ErrorCategoriser()

    async def execute_with_retry(
        self,
        operation: t.Callable[[], t.Awaitable[T]],
        url: str,
        request_id: str = "",
        method: str = "GET",
    ) -> T:
        """
        Execute an attempt, retrying transient failures within the budget.

        Args:
            operation: Async callable performing one attempt
            url: URL being requested (for logging/events)
            request_id: Identifier correlating events of one request
            method: HTTP method (for events)

        Returns:
            Result of the first successful attempt

        Raises:
            RetryFailedError: If a failure occurs after the budget is spent
            Exception: A permanent failure, unchanged
        """
        if not self.policy.retries_enabled:
            return await operation()

        state = self.policy.new_state()

        while True:
            try:
                return await operation()

            except Exception as error:
                if state.exhausted:
                    self.logger.error(
                        f"Request failed after {state.attempts_consumed} retries: {url}"
                    )
                    raise RetryFailedError(
                        error,
                        attempts_configured=state.max_attempts,
                        attempts_remaining=0,
                        attempts_consumed=state.attempts_consumed,
                    ) from error

                category = self.categoriser.categorise(error)
                if category is not ErrorCategory.TRANSIENT:
                    self.logger.debug(
                        f"Non-transient error ({category.value}), "
                        f"not retrying {url}: {error}"
                    )
                    raise

                retry_number = state.attempts_consumed + 1
                delay = self.policy.calculate_delay(retry_number)

                await self.emitter.emit(
                    RequestEventType.RETRYING,
                    RequestRetryingEvent(
                        request_id=request_id,
                        url=url,
                        method=method,
                        retry=retry_number,
                        max_retries=state.max_attempts,
                        delay_seconds=delay,
                        error=ErrorInfo.from_exception(error),
                    ),
                )

                self.logger.warning(
                    f"Retrying request (attempt {retry_number + 1}/"
                    f"{state.max_attempts + 1}) in {delay:.2f}s: {url}"
                )

                await asyncio.sleep(delay)
                state.record_retry()
