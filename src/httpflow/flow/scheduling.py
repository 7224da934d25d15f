"""Delivery contexts for flow results.

A scheduler decides where subscriber callbacks run. The pipeline hands each
terminal result to its scheduler; the scheduler moves it across a queue to
the destination context.
"""

import asyncio
import queue
import threading
import time
import typing as t
from abc import ABC, abstractmethod
from concurrent.futures import Executor

Callback = t.Callable[..., None]


class BaseScheduler(ABC):
    """Runs callbacks on a designated execution context."""

    @abstractmethod
    def schedule(self, callback: Callback, *args: t.Any) -> None:
        """Arrange for ``callback(*args)`` to run on this context.

        Must be safe to call from any thread.
        """


class ImmediateScheduler(BaseScheduler):
    """Runs callbacks inline on the calling context."""

    def schedule(self, callback: Callback, *args: t.Any) -> None:
        callback(*args)


class LoopScheduler(BaseScheduler):
    """Runs callbacks on an asyncio event loop.

    This is the default delivery context: the loop the client was opened on.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop) -> None:
        self.loop = loop

    def schedule(self, callback: Callback, *args: t.Any) -> None:
        self.loop.call_soon_threadsafe(callback, *args)


class ExecutorScheduler(BaseScheduler):
    """Runs callbacks on a ``concurrent.futures`` executor."""

    def __init__(self, executor: Executor) -> None:
        self.executor = executor

    def schedule(self, callback: Callback, *args: t.Any) -> None:
        self.executor.submit(callback, *args)


class QueueScheduler(BaseScheduler):
    """Queues callbacks for an owner thread to drain.

    Models a "main thread" delivery context: the owner (a UI loop, a
    synchronous script) calls ``run_pending`` or ``run_until`` and the
    callbacks execute on that thread.

    Usage:
        main = QueueScheduler()
        subscription = target.get().subscribe(on_next=show, scheduler=main)
        main.run_until(lambda: subscription.done, timeout=5.0)
    """

    def __init__(self) -> None:
        self._queue: queue.SimpleQueue[tuple[Callback, tuple[t.Any, ...]]] = (
            queue.SimpleQueue()
        )
        self.thread_id: int | None = None

    def schedule(self, callback: Callback, *args: t.Any) -> None:
        self._queue.put((callback, args))

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def run_pending(self) -> int:
        """Run every queued callback on the calling thread.

        Returns:
            Number of callbacks executed
        """
        self.thread_id = threading.get_ident()
        executed = 0
        while True:
            try:
                callback, args = self._queue.get_nowait()
            except queue.Empty:
                return executed
            callback(*args)
            executed += 1

    def run_until(
        self, predicate: t.Callable[[], bool], timeout: float | None = None
    ) -> bool:
        """Block the calling thread running callbacks until ``predicate()`` holds.

        Returns:
            True if the predicate became true, False on timeout
        """
        self.thread_id = threading.get_ident()
        deadline = None if timeout is None else time.monotonic() + timeout
        while not predicate():
            remaining = None if deadline is None else deadline - time.monotonic()
            if remaining is not None and remaining <= 0:
                return False
            try:
                callback, args = self._queue.get(timeout=remaining)
            except queue.Empty:
                return predicate()
            callback(*args)
        return True
