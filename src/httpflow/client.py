"""Client owning the transport, executors and delivery context of flows."""

import asyncio
import typing as t
from concurrent.futures import Executor, ThreadPoolExecutor

from .config.settings import Settings
from .domain.exceptions import ClientNotInitialisedError
from .domain.headers import Headers
from .domain.request import RequestDescriptor
from .domain.retry import DelayStrategy, RetryPolicy
from .events import BaseEmitter, EventEmitter
from .flow.observable import Flow
from .flow.parsers import Parser
from .flow.pipeline import RequestPipeline
from .flow.retry import RetryHandlerFactory, create_retry_handler
from .flow.scheduling import BaseScheduler, LoopScheduler
from .infrastructure.http import AiohttpTransport, BaseTransport
from .infrastructure.logging import get_logger
from .target import Target

if t.TYPE_CHECKING:
    import loguru

T = t.TypeVar("T")


class FlowClient:
    """Entry point for building and running requests.

    The client binds to the event loop it is opened on. Every flow it creates
    runs its request on that loop, parses on the background executor and
    delivers on the delivery scheduler (the same loop unless configured
    otherwise).

    Key responsibilities:
    - Transport lifecycle (created and closed here unless supplied)
    - Background executor for parsers (created here unless supplied)
    - Request lifecycle events through ``emitter``
    - Cancelling running requests on close

    Usage:
        async with FlowClient(default_headers={"User-Agent": "demo"}) as client:
            value, headers = await client.target(url, retries=2).get()

    Or from another thread, delivering to a queue drained by that thread:
        main = QueueScheduler()
        subscription = target.get().subscribe(on_next=show, scheduler=main)
        main.run_until(lambda: subscription.done)
    """

    def __init__(
        self,
        transport: BaseTransport | None = None,
        *,
        default_headers: t.Mapping[str, str] | None = None,
        settings: Settings | None = None,
        delivery: BaseScheduler | None = None,
        background: Executor | None = None,
        emitter: BaseEmitter | None = None,
        logger: "loguru.Logger" = get_logger(__name__),
        retry_handler_factory: RetryHandlerFactory = create_retry_handler,
    ) -> None:
        """Initialise the client.

        Args:
            transport: Transport adapter. If None, an AiohttpTransport with the
                      settings' timeout is created and owned by the client.
            default_headers: Headers seeded into every target
            settings: Retry defaults, JSON mode and executor size.
                     If None, defaults are used.
            delivery: Default context for subscriber callbacks.
                     If None, callbacks run on the client's event loop.
            background: Executor running parsers. If None, a thread pool with
                       ``settings.parser_workers`` threads is created.
            emitter: Event emitter for request events. If None, an
                    EventEmitter is created; pass NullEmitter() to disable.
            logger: Logger for client and pipeline messages
            retry_handler_factory: Creates the retry handler for each request
        """
        self.settings = settings if settings is not None else Settings()
        self._logger = logger
        self._owns_transport = transport is None
        self._transport = (
            transport
            if transport is not None
            else AiohttpTransport(timeout=self.settings.timeout, logger=logger)
        )
        self._default_headers = dict(default_headers or {})
        self._delivery = delivery
        self._background = background
        self._owns_background = False
        self.emitter = emitter if emitter is not None else EventEmitter(logger)
        self._retry_handler_factory = retry_handler_factory

        self._loop: asyncio.AbstractEventLoop | None = None
        self._pipeline: RequestPipeline | None = None
        self._tasks: set[asyncio.Task[t.Any]] = set()

    @property
    def transport(self) -> BaseTransport:
        return self._transport

    @property
    def is_open(self) -> bool:
        return self._pipeline is not None

    @property
    def active_requests(self) -> int:
        """Number of subscribed requests still running."""
        return len(self._tasks)

    async def open(self) -> None:
        """Bind to the running loop and open the transport. Idempotent."""
        if self._pipeline is not None:
            return

        self._loop = asyncio.get_running_loop()
        await self._transport.open()

        if self._background is None:
            self._background = ThreadPoolExecutor(
                max_workers=self.settings.parser_workers,
                thread_name_prefix="httpflow-parser",
            )
            self._owns_background = True
        if self._delivery is None:
            self._delivery = LoopScheduler(self._loop)

        self._pipeline = RequestPipeline(
            self._transport,
            background=self._background,
            emitter=self.emitter,
            logger=self._logger,
            retry_handler_factory=self._retry_handler_factory,
        )
        self._logger.debug("Flow client opened")

    async def close(self) -> None:
        """Cancel running requests and release owned resources.

        Subscribed requests end cancelled without callbacks; awaited ones
        raise CancelledError in the awaiting coroutine.
        """
        if self._pipeline is None:
            return

        pending = [task for task in self._tasks if not task.done()]
        if pending:
            self._logger.debug(f"Cancelling {len(pending)} running requests")
            for task in pending:
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)

        if self._owns_transport:
            await self._transport.close()
        if self._owns_background and self._background is not None:
            self._background.shutdown(wait=False, cancel_futures=True)
            self._background = None
            self._owns_background = False

        self._pipeline = None
        self._logger.debug("Flow client closed")

    async def __aenter__(self) -> "FlowClient":
        await self.open()
        return self

    async def __aexit__(self, *args: t.Any) -> None:
        await self.close()

    async def invalidate_and_cancel(self) -> None:
        """Invalidate the shared transport.

        In-flight calls of every request fail with a CommunicationError
        caused by SessionInvalidatedError, and so do all later sends.
        """
        await self._transport.invalidate_and_cancel()

    def target(
        self,
        url: str,
        retries: int | None = None,
        delay: float | None = None,
        strategy: DelayStrategy | None = None,
    ) -> Target:
        """Create a target for ``url``.

        Args:
            url: Endpoint URL, optionally with a query string
            retries: Retry budget; defaults to ``settings.default_retries``
            delay: Base delay in seconds; defaults to ``settings.default_delay``
            strategy: Delay strategy; defaults to ``settings.delay_strategy``

        Raises:
            ConfigurationError: If ``retries`` or ``delay`` is negative
        """
        policy = RetryPolicy(
            max_attempts=retries if retries is not None else self.settings.default_retries,
            delay=delay if delay is not None else self.settings.default_delay,
            strategy=strategy if strategy is not None else self.settings.delay_strategy,
        )
        return Target(
            url=url,
            client=self,
            retry_policy=policy,
            request_headers=self._default_headers,
        )

    def flow(
        self,
        descriptor: RequestDescriptor,
        parser: Parser[T],
        policy: RetryPolicy,
    ) -> Flow[tuple[T, Headers]]:
        """Create a cold flow running ``descriptor`` on this client.

        Raises:
            ClientNotInitialisedError: If the client is not open
        """
        pipeline = self._pipeline
        if pipeline is None or self._loop is None or self._delivery is None:
            raise ClientNotInitialisedError(
                "FlowClient must be used as a context manager or opened first"
            )

        def execute() -> t.Coroutine[t.Any, t.Any, tuple[T, Headers]]:
            return pipeline.execute(descriptor, parser, policy)

        return Flow(
            execute,
            self._loop,
            self._delivery,
            logger=self._logger,
            tasks=self._tasks,
        )
