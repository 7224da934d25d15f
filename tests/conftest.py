"""Pytest configuration and fixtures for httpflow tests."""

import asyncio
import typing as t
from types import SimpleNamespace

import loguru
import pytest
import pytest_asyncio

from httpflow.app import create_app
from httpflow.client import FlowClient
from httpflow.config.settings import Environment, LogLevel, Settings
from httpflow.domain.exceptions import SessionInvalidatedError
from httpflow.domain.request import RequestDescriptor
from httpflow.events import BaseEmitter, EventEmitter
from httpflow.flow.scheduling import ImmediateScheduler
from httpflow.infrastructure.http import BaseTransport, HttpResponseMeta, TransportResult
from httpflow.infrastructure.logging import reset_logging


class ScriptedTransport(BaseTransport):
    """In-memory transport replaying a script of results.

    The last result repeats once the script runs out. When ``gate`` is set,
    every send waits on it, which keeps calls in flight for cancellation tests.
    """

    def __init__(self, results: t.Sequence[TransportResult] = ()) -> None:
        self.results = list(results) or [ok(b"")]
        self.calls: list[RequestDescriptor] = []
        self.cancelled_calls = 0
        self.gate: asyncio.Event | None = None
        self.opened = False
        self.closed = False
        self._invalidated = False

    @property
    def invalidated(self) -> bool:
        return self._invalidated

    async def open(self) -> None:
        self.opened = True

    async def close(self) -> None:
        self.closed = True

    async def send(self, descriptor: RequestDescriptor) -> TransportResult:
        if self._invalidated:
            return TransportResult(error=SessionInvalidatedError())
        self.calls.append(descriptor)
        if self.gate is not None:
            try:
                await self.gate.wait()
            except asyncio.CancelledError:
                self.cancelled_calls += 1
                raise
        index = min(len(self.calls), len(self.results)) - 1
        return self.results[index]

    async def invalidate_and_cancel(self) -> None:
        self._invalidated = True


def ok(body: bytes, status: int = 200, headers: t.Any = ()) -> TransportResult:
    """Result of an HTTP response with ``status`` and ``body``."""
    return TransportResult(
        response=HttpResponseMeta(status_code=status, headers=headers), body=body
    )


def status(code: int) -> TransportResult:
    return ok(b"", status=code)


def failure(error: BaseException | None = None) -> TransportResult:
    return TransportResult(error=error)


@pytest.fixture
def test_settings():
    """Provide test-specific settings."""
    return Settings(
        environment=Environment.TESTING,
        log_level=LogLevel.CRITICAL,  # Minimal logging during tests
        parser_workers=2,
    )


@pytest.fixture
def test_app(test_settings):
    """Provide a test app with clean logging state."""
    reset_logging()
    app = create_app(settings=test_settings)
    yield app
    reset_logging()


@pytest.fixture
def mock_logger(mocker):
    """Provide a mock logger for testing that captures log calls."""
    logger = mocker.Mock(spec=loguru.logger)
    return logger


@pytest.fixture
def mock_emitter(mocker):
    """Provide a mock event emitter for testing event emission."""
    emitter = mocker.Mock(spec=BaseEmitter)
    return emitter


@pytest.fixture
def real_emitter(mock_logger):
    """Provide a real EventEmitter for tests that subscribe handlers."""
    return EventEmitter(mock_logger)


@pytest.fixture(autouse=True)
def clean_logging_state():
    """Automatically reset logging before each test for isolation."""
    reset_logging()
    yield
    reset_logging()


@pytest.fixture
def results():
    """Result constructors for scripted transports."""
    return SimpleNamespace(ok=ok, status=status, failure=failure)


@pytest.fixture
def scripted_transport():
    """Factory for ScriptedTransport instances."""
    return ScriptedTransport


@pytest_asyncio.fixture
async def make_client(test_settings, mock_logger, real_emitter):
    """Factory opening FlowClients over a scripted transport.

    Delivery is immediate (on the loop) unless a scheduler is passed.
    Clients are closed when the test ends.
    """
    clients: list[FlowClient] = []

    async def factory(
        *script: TransportResult, **kwargs: t.Any
    ) -> tuple[FlowClient, ScriptedTransport]:
        transport = kwargs.pop("transport", None) or ScriptedTransport(script)
        kwargs.setdefault("settings", test_settings)
        kwargs.setdefault("delivery", ImmediateScheduler())
        kwargs.setdefault("logger", mock_logger)
        kwargs.setdefault("emitter", real_emitter)
        client = FlowClient(transport, **kwargs)
        await client.open()
        clients.append(client)
        return client, transport

    yield factory

    for client in clients:
        await client.close()
