"""Transport adapter interface consumed by the request pipeline."""

import typing as t
from abc import ABC, abstractmethod
from dataclasses import dataclass

from ...domain.headers import RawHeaders
from ...domain.request import RequestDescriptor


@dataclass(frozen=True, slots=True)
class HttpResponseMeta:
    """Status line and headers of an HTTP response."""

    status_code: int
    headers: RawHeaders = ()


@dataclass(frozen=True, slots=True)
class TransportResult:
    """Raw outcome of one transport call.

    ``response`` is an ``HttpResponseMeta`` for HTTP responses; adapters for
    other protocols may put any object there. ``error`` is set when the call
    failed before a response and body were obtained.
    """

    response: object | None = None
    body: bytes | None = None
    error: BaseException | None = None


class BaseTransport(ABC):
    """Issues HTTP calls for request descriptors.

    One transport is shared by every request of a client. ``send`` must be
    cancellable: cancelling the awaiting task cancels the in-flight call.
    """

    @abstractmethod
    async def send(self, descriptor: RequestDescriptor) -> TransportResult:
        """Issue one call and return its raw outcome.

        Transport-level failures are returned in ``TransportResult.error``
        rather than raised.
        """

    async def open(self) -> None:
        """Acquire resources (sessions, connectors) before the first send."""

    async def close(self) -> None:
        """Release resources acquired by ``open``."""

    @abstractmethod
    async def invalidate_and_cancel(self) -> None:
        """Fail every in-flight call and refuse new ones."""

    @property
    @abstractmethod
    def invalidated(self) -> bool:
        """True once ``invalidate_and_cancel`` has been called."""

    async def __aenter__(self) -> t.Self:
        await self.open()
        return self

    async def __aexit__(self, *exc_info: t.Any) -> None:
        await self.close()
