"""Throughput benchmark scenarios."""

import asyncio

from httpflow import FlowClient, Settings
from httpflow.config import Environment, LogLevel

SETTINGS = Settings(environment=Environment.TESTING, log_level=LogLevel.ERROR)


def test_throughput_100_json_gets(benchmark, benchmark_server: str) -> None:
    """Benchmark 100 concurrent GETs parsing a 200-item JSON array each."""

    async def fetch_batch() -> None:
        async with FlowClient(settings=SETTINGS) as client:
            target = client.target(f"{benchmark_server}/items/200")
            results = await asyncio.gather(*(target.get() for _ in range(100)))
            assert all(len(value) == 200 for value, _ in results)

    benchmark(lambda: asyncio.run(fetch_batch()))


def test_throughput_subscriptions_with_retries(benchmark, benchmark_server: str) -> None:
    """Benchmark 50 subscribed requests against an endpoint failing half the time."""

    async def subscribe_batch() -> None:
        async with FlowClient(settings=SETTINGS) as client:
            loop = asyncio.get_running_loop()
            pending = [loop.create_future() for _ in range(50)]
            target = client.target(f"{benchmark_server}/flaky", retries=3)
            for future in pending:
                target.get().subscribe(
                    on_next=future.set_result,
                    on_error=future.set_exception,
                )
            await asyncio.gather(*pending)

    benchmark(lambda: asyncio.run(subscribe_batch()))
