"""Tests for Flow and Subscription."""

import asyncio
import threading

import pytest

from httpflow.flow.observable import Flow, SubscriptionState
from httpflow.flow.scheduling import ImmediateScheduler, QueueScheduler


class Source:
    """Coroutine factory recording how often and where it runs."""

    def __init__(self, value="value", error: Exception | None = None) -> None:
        self.value = value
        self.error = error
        self.started = 0
        self.cancelled = 0
        self.threads: list[int] = []
        self.gate: asyncio.Event | None = None

    async def __call__(self):
        self.started += 1
        self.threads.append(threading.get_ident())
        if self.gate is not None:
            try:
                await self.gate.wait()
            except asyncio.CancelledError:
                self.cancelled += 1
                raise
        if self.error is not None:
            raise self.error
        return self.value


class Observer:
    def __init__(self) -> None:
        self.events: list[tuple] = []
        self.threads: list[int] = []

    def on_next(self, value) -> None:
        self.threads.append(threading.get_ident())
        self.events.append(("next", value))

    def on_error(self, error) -> None:
        self.threads.append(threading.get_ident())
        self.events.append(("error", error))

    def on_completed(self) -> None:
        self.events.append(("completed",))

    def subscribe(self, flow: Flow, **kwargs):
        return flow.subscribe(self.on_next, self.on_error, self.on_completed, **kwargs)


@pytest.fixture
def tasks():
    return set()


@pytest.fixture
def make_flow(mock_logger, tasks):
    def factory(source: Source, scheduler=None) -> Flow:
        return Flow(
            source,
            asyncio.get_running_loop(),
            scheduler or ImmediateScheduler(),
            logger=mock_logger,
            tasks=tasks,
        )

    return factory


async def settle(tasks: set) -> None:
    """Wait for running request tasks and their done callbacks."""
    if tasks:
        await asyncio.gather(*tasks, return_exceptions=True)
    await asyncio.sleep(0)


class TestDelivery:
    @pytest.mark.asyncio
    async def test_value_then_completed(self, make_flow, tasks) -> None:
        observer = Observer()

        subscription = observer.subscribe(make_flow(Source("v")))
        await settle(tasks)

        assert observer.events == [("next", "v"), ("completed",)]
        assert subscription.done
        assert subscription.state is SubscriptionState.COMPLETED
        assert not subscription.cancelled

    @pytest.mark.asyncio
    async def test_error_only(self, make_flow, tasks) -> None:
        error = ValueError("bad")
        observer = Observer()

        observer.subscribe(make_flow(Source(error=error)))
        await settle(tasks)

        assert observer.events == [("error", error)]

    @pytest.mark.asyncio
    async def test_flow_is_cold(self, make_flow, tasks) -> None:
        source = Source()
        flow = make_flow(source)

        assert source.started == 0
        flow.subscribe()
        flow.subscribe()
        await settle(tasks)

        assert source.started == 2

    @pytest.mark.asyncio
    async def test_queue_scheduler_defers_to_owner(self, make_flow, tasks) -> None:
        main = QueueScheduler()
        observer = Observer()

        subscription = observer.subscribe(make_flow(Source("v")), scheduler=main)
        await settle(tasks)

        assert observer.events == []
        assert not subscription.done
        assert main.run_pending() == 1
        assert observer.events == [("next", "v"), ("completed",)]
        assert subscription.done

    @pytest.mark.asyncio
    async def test_callback_errors_are_logged(
        self, make_flow, tasks, mock_logger
    ) -> None:
        completed = []

        def broken(value):
            raise RuntimeError("callback bug")

        make_flow(Source()).subscribe(broken, on_completed=lambda: completed.append(1))
        await settle(tasks)

        assert completed == [1]
        mock_logger.opt.return_value.error.assert_called_once()

    @pytest.mark.asyncio
    async def test_unhandled_error_is_logged(self, make_flow, tasks, mock_logger) -> None:
        make_flow(Source(error=ValueError("bad"))).subscribe()
        await settle(tasks)

        mock_logger.opt.return_value.error.assert_called_once()
        assert "Unhandled" in mock_logger.opt.return_value.error.call_args[0][0]


class TestCancellation:
    @pytest.mark.asyncio
    async def test_cancel_before_start_never_runs(self, make_flow, tasks) -> None:
        source = Source()
        observer = Observer()

        subscription = observer.subscribe(make_flow(source))
        subscription.cancel()
        await settle(tasks)

        assert source.started == 0
        assert observer.events == []
        assert subscription.cancelled

    @pytest.mark.asyncio
    async def test_cancel_in_flight_suppresses_delivery(self, make_flow, tasks) -> None:
        source = Source()
        source.gate = asyncio.Event()
        observer = Observer()

        subscription = observer.subscribe(make_flow(source))
        while not source.started:
            await asyncio.sleep(0)
        subscription.cancel()
        await settle(tasks)

        assert source.cancelled == 1
        assert observer.events == []
        assert subscription.state is SubscriptionState.CANCELLED

    @pytest.mark.asyncio
    async def test_cancel_is_idempotent(self, make_flow, tasks) -> None:
        source = Source()
        source.gate = asyncio.Event()

        subscription = make_flow(source).subscribe()
        while not source.started:
            await asyncio.sleep(0)
        task = next(iter(tasks))

        subscription.cancel()
        subscription.cancel()

        assert task.cancelling() == 1
        await settle(tasks)
        assert source.cancelled == 1

    @pytest.mark.asyncio
    async def test_cancel_after_result_before_delivery(self, make_flow, tasks) -> None:
        main = QueueScheduler()
        observer = Observer()

        subscription = observer.subscribe(make_flow(Source("v")), scheduler=main)
        await settle(tasks)
        subscription.cancel()
        main.run_pending()

        assert observer.events == []
        assert subscription.cancelled

    @pytest.mark.asyncio
    async def test_cancel_after_delivery_has_no_effect(self, make_flow, tasks) -> None:
        observer = Observer()

        subscription = observer.subscribe(make_flow(Source("v")))
        await settle(tasks)
        subscription.cancel()

        assert subscription.state is SubscriptionState.COMPLETED
        assert not subscription.cancelled

    @pytest.mark.asyncio
    async def test_cancel_from_another_thread(self, make_flow, tasks) -> None:
        source = Source()
        source.gate = asyncio.Event()
        observer = Observer()

        subscription = observer.subscribe(make_flow(source))
        while not source.started:
            await asyncio.sleep(0)

        await asyncio.to_thread(subscription.cancel)
        await settle(tasks)

        assert source.cancelled == 1
        assert observer.events == []

    @pytest.mark.asyncio
    async def test_external_task_cancel_counts_as_cancelled(
        self, make_flow, tasks
    ) -> None:
        source = Source()
        source.gate = asyncio.Event()
        observer = Observer()

        subscription = observer.subscribe(make_flow(source))
        while not source.started:
            await asyncio.sleep(0)
        for task in tasks:
            task.cancel()
        await settle(tasks)

        assert subscription.cancelled
        assert observer.events == []


class TestThreading:
    @pytest.mark.asyncio
    async def test_subscribe_from_another_thread_runs_on_loop(
        self, make_flow, tasks
    ) -> None:
        source = Source("v")
        observer = Observer()
        flow = make_flow(source)

        subscription = await asyncio.to_thread(observer.subscribe, flow)
        while not subscription.done:
            await asyncio.sleep(0.001)

        assert source.threads == [threading.get_ident()]
        assert observer.events == [("next", "v"), ("completed",)]

    @pytest.mark.asyncio
    async def test_tasks_registry_is_emptied(self, make_flow, tasks) -> None:
        make_flow(Source()).subscribe()
        assert len(tasks) == 1

        await settle(tasks)

        assert tasks == set()


class TestAwait:
    @pytest.mark.asyncio
    async def test_await_returns_value(self, make_flow) -> None:
        assert await make_flow(Source("v")) == "v"

    @pytest.mark.asyncio
    async def test_await_raises_error(self, make_flow) -> None:
        with pytest.raises(ValueError, match="bad"):
            await make_flow(Source(error=ValueError("bad")))

    @pytest.mark.asyncio
    async def test_await_from_another_loop_runs_on_flow_loop(self, make_flow) -> None:
        source = Source("v")
        flow = make_flow(source)

        async def consume():
            return await flow

        value = await asyncio.to_thread(asyncio.run, consume())

        assert value == "v"
        assert source.threads == [threading.get_ident()]

    @pytest.mark.asyncio
    async def test_awaited_request_is_registered_while_running(
        self, make_flow, tasks
    ) -> None:
        source = Source("v")
        source.gate = asyncio.Event()
        flow = make_flow(source)

        async def consume():
            return await flow

        waiter = asyncio.create_task(consume())
        while not source.started:
            await asyncio.sleep(0)
        assert len(tasks) == 1

        source.gate.set()

        assert await waiter == "v"
        await settle(tasks)
        assert tasks == set()

    @pytest.mark.asyncio
    async def test_cancelling_registered_task_cancels_awaiter(
        self, make_flow, tasks
    ) -> None:
        source = Source("v")
        source.gate = asyncio.Event()
        flow = make_flow(source)

        async def consume():
            return await flow

        waiter = asyncio.create_task(consume())
        while not source.started:
            await asyncio.sleep(0)
        for task in list(tasks):
            task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await waiter
        assert source.cancelled == 1
