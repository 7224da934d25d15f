"""Retry handler that never retries."""

import typing as t

from .base import BaseRetryHandler

T = t.TypeVar("T")


class NullRetryHandler(BaseRetryHandler):
    """Runs the attempt once; its failure is delivered unwrapped.

    Used for policies with ``max_attempts == 0``.
    """

    async def execute_with_retry(
        self,
        operation: t.Callable[[], t.Awaitable[T]],
        url: str,
        request_id: str = "",
        method: str = "GET",
    ) -> T:
        return await operation()
