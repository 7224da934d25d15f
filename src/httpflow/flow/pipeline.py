"""Request execution pipeline.

One ``execute`` call is one logical request: it sends the descriptor through
the transport, classifies each outcome, lets the retry handler decide about
failures, and parses the final payload on the background executor.
"""

import asyncio
import typing as t
import uuid
from concurrent.futures import Executor

from ..domain.exceptions import FlowError
from ..domain.headers import Headers
from ..domain.outcome import Success
from ..domain.request import RequestDescriptor
from ..domain.retry import RetryPolicy
from ..events import (
    BaseEmitter,
    ErrorInfo,
    NullEmitter,
    RequestCompletedEvent,
    RequestEventType,
    RequestFailedEvent,
    RequestStartedEvent,
)
from ..infrastructure.http.base import BaseTransport
from ..infrastructure.logging import get_logger
from .classifier import classify, raise_for_outcome
from .parsers import Parser, run_parser
from .retry import RetryHandlerFactory, create_retry_handler

if t.TYPE_CHECKING:
    import loguru

T = t.TypeVar("T")


class RequestPipeline:
    """Runs requests against a shared transport.

    Implementation decisions:
    - Attempts are strictly sequential: the next attempt is only issued after
      the retry handler has decided about the previous outcome
    - The same immutable descriptor is sent on every attempt
    - Parsing happens once, after the retry loop, so parse errors never
      trigger a retry
    - Parsers run on ``background`` (the loop's default executor when None),
      never on the event loop or the delivery context
    - CancelledError always propagates; cancelling the task running
      ``execute`` cancels the in-flight transport call
    """

    def __init__(
        self,
        transport: BaseTransport,
        *,
        background: Executor | None = None,
        emitter: BaseEmitter | None = None,
        logger: "loguru.Logger" = get_logger(__name__),
        retry_handler_factory: RetryHandlerFactory = create_retry_handler,
    ) -> None:
        """Initialise the pipeline.

        Args:
            transport: Adapter issuing HTTP calls; shared by all requests
            background: Executor running parsers
            emitter: Event emitter for request lifecycle events.
                    If None, events are dropped.
            logger: Logger for request lifecycle messages
            retry_handler_factory: Creates the retry handler for a policy
        """
        self.transport = transport
        self.background = background
        self.emitter = emitter if emitter is not None else NullEmitter()
        self._logger = logger
        self._retry_handler_factory = retry_handler_factory

    async def execute(
        self,
        descriptor: RequestDescriptor,
        parser: Parser[T],
        policy: RetryPolicy,
    ) -> tuple[T, Headers]:
        """Run one request to its terminal state.

        Args:
            descriptor: Request to send on every attempt
            parser: Decodes the successful payload
            policy: Retry budget and delay

        Returns:
            The decoded value and the response headers

        Raises:
            FlowError: The single terminal error of the request
        """
        request_id = uuid.uuid4().hex
        url = descriptor.full_url
        method = str(descriptor.method)
        retry_handler = self._retry_handler_factory(policy, self._logger, self.emitter)
        attempts = 0

        async def attempt() -> Success:
            nonlocal attempts
            attempts += 1
            self._logger.debug(f"Sending {method} {url} (attempt {attempts})")
            result = await self.transport.send(descriptor)
            return raise_for_outcome(classify(result))

        await self.emitter.emit(
            RequestEventType.STARTED,
            RequestStartedEvent(request_id=request_id, url=url, method=method),
        )

        try:
            success = await retry_handler.execute_with_retry(
                attempt, url=url, request_id=request_id, method=method
            )
            value = await self._parse(parser, success.payload)

        except asyncio.CancelledError:
            # Cancellation is not a failure: no event, and it must propagate
            self._logger.debug(f"Request cancelled: {method} {url}")
            raise

        except FlowError as error:
            self._logger.error(f"{method} {url} failed: {error}")
            await self.emitter.emit(
                RequestEventType.FAILED,
                RequestFailedEvent(
                    request_id=request_id,
                    url=url,
                    method=method,
                    error=ErrorInfo.from_exception(error),
                ),
            )
            raise

        self._logger.debug(
            f"{method} {url} completed with {success.status_code} "
            f"after {attempts} attempt(s)"
        )
        await self.emitter.emit(
            RequestEventType.COMPLETED,
            RequestCompletedEvent(
                request_id=request_id,
                url=url,
                method=method,
                status_code=success.status_code,
                attempts=attempts,
            ),
        )
        return value, success.headers

    async def _parse(self, parser: Parser[T], payload: bytes) -> T:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self.background, run_parser, parser, payload)
