"""aiohttp implementation of the transport adapter."""

import asyncio
import typing as t

import aiohttp

from ...domain.exceptions import ClientNotInitialisedError, SessionInvalidatedError
from ...domain.request import RequestDescriptor
from ..logging import get_logger
from .base import BaseTransport, HttpResponseMeta, TransportResult
from .factories import create_secure_connector

if t.TYPE_CHECKING:
    import loguru


class AiohttpTransport(BaseTransport):
    """Issues requests through a shared aiohttp ClientSession.

    The transport either owns its session (created in ``open`` with a
    certifi-verified connector) or wraps a session supplied by the caller,
    which it then never closes.

    Every send runs in its own task so ``invalidate_and_cancel`` can cancel
    in-flight calls. A call cancelled that way returns a
    ``SessionInvalidatedError`` result instead of propagating cancellation,
    so the owning request fails rather than hangs.

    Usage:
        async with AiohttpTransport(timeout=10.0) as transport:
            result = await transport.send(descriptor)
    """

    def __init__(
        self,
        session: aiohttp.ClientSession | None = None,
        *,
        timeout: float | None = None,
        logger: "loguru.Logger" = get_logger(__name__),
    ) -> None:
        """
        Initialise the transport.

        Args:
            session: Session to use. If None, one is created by ``open``.
            timeout: Total timeout per call in seconds for an owned session.
            logger: Logger for transport events.
        """
        self._session = session
        self._owns_session = False
        self._timeout = timeout
        self._logger = logger
        self._in_flight: set[asyncio.Task[TransportResult]] = set()
        self._invalidated = False

    @property
    def closed(self) -> bool:
        return self._session is None or self._session.closed

    @property
    def invalidated(self) -> bool:
        return self._invalidated

    @property
    def in_flight(self) -> int:
        return len(self._in_flight)

    async def open(self) -> None:
        """Create the owned session. Idempotent."""
        if self._session is not None:
            return
        self._session = aiohttp.ClientSession(
            connector=create_secure_connector(),
            timeout=aiohttp.ClientTimeout(total=self._timeout),
        )
        self._owns_session = True
        self._logger.debug("Opened aiohttp session")

    async def close(self) -> None:
        """Close the session if this transport created it."""
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._logger.debug("Closed aiohttp session")
        self._session = None
        self._owns_session = False

    async def send(self, descriptor: RequestDescriptor) -> TransportResult:
        """Issue ``descriptor`` and collect status, headers and body.

        Raises:
            ClientNotInitialisedError: If ``open`` was not called.
        """
        if self._invalidated:
            return TransportResult(error=SessionInvalidatedError())
        if self._session is None:
            raise ClientNotInitialisedError("Transport not initialised, call open()")
        if self._session.closed:
            return TransportResult(error=SessionInvalidatedError("Session is closed"))

        call = asyncio.ensure_future(self._perform(self._session, descriptor))
        self._in_flight.add(call)
        call.add_done_callback(self._in_flight.discard)

        try:
            return await call
        except asyncio.CancelledError:
            current = asyncio.current_task()
            # Only the call was cancelled, by invalidate_and_cancel
            if self._invalidated and current is not None and current.cancelling() == 0:
                return TransportResult(error=SessionInvalidatedError())
            raise

    async def invalidate_and_cancel(self) -> None:
        """Cancel every in-flight call and refuse later sends."""
        self._invalidated = True
        pending = [call for call in self._in_flight if not call.done()]
        self._logger.debug(f"Invalidating session, cancelling {len(pending)} calls")
        for call in pending:
            call.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        await self.close()

    async def _perform(
        self, session: aiohttp.ClientSession, descriptor: RequestDescriptor
    ) -> TransportResult:
        url = descriptor.full_url
        self._logger.debug(f"HTTP {descriptor.method} {url}")
        try:
            async with session.request(
                descriptor.method.value,
                url,
                headers=dict(descriptor.headers),
                data=descriptor.body,
            ) as response:
                body = await response.read()
                return TransportResult(
                    response=HttpResponseMeta(
                        status_code=response.status, headers=response.headers
                    ),
                    body=body,
                )
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError, OSError) as exc:
            # aiohttp raises ValueError for malformed URLs and header values
            self._logger.debug(
                f"Transport error for {url}: {type(exc).__name__}: {exc}"
            )
            return TransportResult(error=exc)
