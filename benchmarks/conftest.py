"""Shared fixtures for benchmarking."""

import asyncio
import json
import threading
import typing as t

import pytest
from aiohttp import web


async def _items_handler(request: web.Request) -> web.Response:
    """Serve a JSON array with the requested number of items."""
    count = int(request.match_info["count"])
    items = [{"id": i, "name": f"item-{i}", "tags": ["a", "b"]} for i in range(count)]
    return web.Response(body=json.dumps(items), content_type="application/json")


async def _flaky_handler(request: web.Request) -> web.Response:
    """Fail every other call so retries are exercised."""
    state = request.app["flaky"]
    state["calls"] += 1
    if state["calls"] % 2:
        return web.Response(status=503)
    return web.Response(body=b"{}", content_type="application/json")


class _BenchmarkServer:
    """aiohttp server running on its own loop in a background thread."""

    def __init__(self) -> None:
        self.base_url: str | None = None
        self._loop = asyncio.new_event_loop()
        self._runner: web.AppRunner | None = None
        self._thread = threading.Thread(target=self._loop.run_forever, daemon=True)

    def start(self) -> str:
        self._thread.start()
        future = asyncio.run_coroutine_threadsafe(self._start_server(), self._loop)
        self.base_url = future.result(timeout=10)
        return self.base_url

    def stop(self) -> None:
        if self._runner is not None:
            asyncio.run_coroutine_threadsafe(
                self._runner.cleanup(), self._loop
            ).result(timeout=5)
        self._loop.call_soon_threadsafe(self._loop.stop)
        self._thread.join(timeout=5)
        self._loop.close()

    async def _start_server(self) -> str:
        app = web.Application()
        app["flaky"] = {"calls": 0}
        app.router.add_get("/items/{count}", _items_handler)
        app.router.add_get("/flaky", _flaky_handler)

        self._runner = web.AppRunner(app)
        await self._runner.setup()
        site = web.TCPSite(self._runner, host="127.0.0.1", port=0)
        await site.start()

        sockets = site._server.sockets if site._server else []
        if not sockets:
            raise RuntimeError("Failed to bind server socket")
        return f"http://127.0.0.1:{sockets[0].getsockname()[1]}"


@pytest.fixture(scope="session")
def benchmark_server() -> t.Iterator[str]:
    """Start a local HTTP server and yield its base URL.

    The server has its own loop and thread because pytest-benchmark runs
    sync test functions, each of which starts a fresh client loop.
    """
    server = _BenchmarkServer()
    base_url = server.start()
    try:
        yield base_url
    finally:
        server.stop()
