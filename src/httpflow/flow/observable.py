"""Cold single-value flows and their subscriptions.

A ``Flow`` describes a request without starting it. Each ``subscribe`` (or
``await``) runs the request once, as its own asyncio task on the client's
event loop, and produces exactly one terminal signal: a value followed by
completion, or an error. Cancelling suppresses both.
"""

import asyncio
import enum
import threading
import typing as t

from ..infrastructure.logging import get_logger
from .scheduling import BaseScheduler

if t.TYPE_CHECKING:
    import loguru

T = t.TypeVar("T")

OnNext = t.Callable[[T], None]
OnError = t.Callable[[BaseException], None]
OnCompleted = t.Callable[[], None]


class SubscriptionState(enum.StrEnum):
    """Lifecycle of a subscription. Leaves RUNNING exactly once."""

    RUNNING = "running"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


def _running_on(loop: asyncio.AbstractEventLoop) -> bool:
    try:
        return asyncio.get_running_loop() is loop
    except RuntimeError:
        return False


def _register(
    task: "asyncio.Task[T]", tasks: set[asyncio.Task[t.Any]] | None
) -> "asyncio.Task[T]":
    if tasks is not None:
        tasks.add(task)
        task.add_done_callback(tasks.discard)
    return task


class Subscription(t.Generic[T]):
    """Handle for one running request.

    ``cancel`` is idempotent and safe to call from any thread. Cancelling
    before the terminal signal is delivered cancels the request task (and
    with it the in-flight transport call), prevents further attempts, and
    guarantees that no callback is invoked.

    The state transition out of RUNNING is guarded by a lock because
    delivery and cancellation may happen on different threads.
    """

    def __init__(
        self,
        loop: asyncio.AbstractEventLoop,
        scheduler: BaseScheduler,
        on_next: OnNext[T] | None = None,
        on_error: OnError | None = None,
        on_completed: OnCompleted | None = None,
        logger: "loguru.Logger" = get_logger(__name__),
        tasks: set[asyncio.Task[t.Any]] | None = None,
    ) -> None:
        self._loop = loop
        self._scheduler = scheduler
        self._on_next = on_next
        self._on_error = on_error
        self._on_completed = on_completed
        self._logger = logger
        self._tasks = tasks
        self._lock = threading.Lock()
        self._state = SubscriptionState.RUNNING
        self._task: asyncio.Task[T] | None = None

    @property
    def state(self) -> SubscriptionState:
        return self._state

    @property
    def done(self) -> bool:
        """True once a terminal signal was delivered or the subscription cancelled."""
        return self._state is not SubscriptionState.RUNNING

    @property
    def cancelled(self) -> bool:
        return self._state is SubscriptionState.CANCELLED

    def cancel(self) -> None:
        """Cancel the request. Has no effect after delivery or a prior cancel."""
        with self._lock:
            if self._state is not SubscriptionState.RUNNING:
                return
            self._state = SubscriptionState.CANCELLED

        if _running_on(self._loop):
            self._cancel_task()
        elif not self._loop.is_closed():
            self._loop.call_soon_threadsafe(self._cancel_task)

    def _start(self, factory: t.Callable[[], t.Coroutine[t.Any, t.Any, T]]) -> None:
        if _running_on(self._loop):
            self._spawn(factory)
        else:
            self._loop.call_soon_threadsafe(self._spawn, factory)

    def _spawn(self, factory: t.Callable[[], t.Coroutine[t.Any, t.Any, T]]) -> None:
        # Runs on the loop; a cancel that won the race leaves nothing to start
        if self._state is not SubscriptionState.RUNNING:
            return
        self._task = _register(self._loop.create_task(factory()), self._tasks)
        self._task.add_done_callback(self._on_task_done)

    def _cancel_task(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()

    def _on_task_done(self, task: asyncio.Task[T]) -> None:
        if task.cancelled():
            # Cancelled from outside (client shutdown) counts as cancellation
            with self._lock:
                if self._state is SubscriptionState.RUNNING:
                    self._state = SubscriptionState.CANCELLED
            return

        error = task.exception()
        if error is None:
            self._scheduler.schedule(self._deliver_value, task.result())
        else:
            self._scheduler.schedule(self._deliver_error, error)

    def _claim_delivery(self) -> bool:
        with self._lock:
            if self._state is not SubscriptionState.RUNNING:
                return False
            self._state = SubscriptionState.COMPLETED
            return True

    def _deliver_value(self, value: T) -> None:
        if not self._claim_delivery():
            return
        if self._on_next is not None:
            self._invoke(self._on_next, value)
        if self._on_completed is not None:
            self._invoke(self._on_completed)

    def _deliver_error(self, error: BaseException) -> None:
        if not self._claim_delivery():
            return
        if self._on_error is None:
            self._logger.opt(exception=error).error(
                f"Unhandled flow error: {type(error).__name__}: {error}"
            )
            return
        self._invoke(self._on_error, error)

    def _invoke(self, callback: t.Callable[..., None], *args: t.Any) -> None:
        try:
            callback(*args)
        except Exception as exc:
            self._logger.opt(exception=exc).error(f"Subscriber callback {callback} failed")


class Flow(t.Generic[T]):
    """Cold stream producing one value (or one error) per subscription.

    Usage:
        flow = client.target(url).get()

        # Push style: callbacks run on the delivery scheduler
        subscription = flow.subscribe(on_next=print, on_error=report)
        subscription.cancel()

        # Pull style: await the value on the client loop or any other loop
        value, headers = await flow
    """

    def __init__(
        self,
        execute: t.Callable[[], t.Coroutine[t.Any, t.Any, T]],
        loop: asyncio.AbstractEventLoop,
        scheduler: BaseScheduler,
        logger: "loguru.Logger" = get_logger(__name__),
        tasks: set[asyncio.Task[t.Any]] | None = None,
    ) -> None:
        """
        Args:
            execute: Creates the coroutine running the request once
            loop: Event loop owning the transport; requests run here
            scheduler: Default delivery context for subscriber callbacks
            logger: Logger for unhandled errors and callback failures
            tasks: Registry of running request tasks, for shutdown
        """
        self._execute = execute
        self._loop = loop
        self._scheduler = scheduler
        self._logger = logger
        self._tasks = tasks

    def subscribe(
        self,
        on_next: OnNext[T] | None = None,
        on_error: OnError | None = None,
        on_completed: OnCompleted | None = None,
        *,
        scheduler: BaseScheduler | None = None,
    ) -> Subscription[T]:
        """Start the request; safe to call from any thread.

        Args:
            on_next: Receives the value
            on_error: Receives the terminal error
            on_completed: Called after ``on_next``
            scheduler: Delivery context overriding the flow's default

        Returns:
            Subscription used to cancel the request
        """
        subscription: Subscription[T] = Subscription(
            self._loop,
            scheduler if scheduler is not None else self._scheduler,
            on_next=on_next,
            on_error=on_error,
            on_completed=on_completed,
            logger=self._logger,
            tasks=self._tasks,
        )
        subscription._start(self._execute)
        return subscription

    def __await__(self) -> t.Generator[t.Any, None, T]:
        return self._result().__await__()

    async def _result(self) -> T:
        if _running_on(self._loop):
            return await self._run_registered()
        # Bridge to the client loop; cancelling the await cancels the request
        future = asyncio.run_coroutine_threadsafe(self._run_registered(), self._loop)
        return await asyncio.wrap_future(future)

    async def _run_registered(self) -> T:
        # Awaited requests are tracked like subscribed ones; close() cancels both
        task = _register(self._loop.create_task(self._execute()), self._tasks)
        return await task
