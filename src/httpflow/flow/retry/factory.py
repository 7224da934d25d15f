"""Retry handler selection by policy."""

import typing as t

from ...domain.retry import RetryPolicy
from ...events import BaseEmitter
from .base import BaseRetryHandler
from .handler import RetryHandler
from .null import NullRetryHandler

if t.TYPE_CHECKING:
    import loguru

# Factory signature: creates a handler for a target's policy
RetryHandlerFactory = t.Callable[
    [RetryPolicy, "loguru.Logger", BaseEmitter],
    BaseRetryHandler,
]


def create_retry_handler(
    policy: RetryPolicy, logger: "loguru.Logger", emitter: BaseEmitter
) -> BaseRetryHandler:
    """Return a RetryHandler, or a NullRetryHandler when retries are disabled.

    With ``max_attempts == 0`` the first failure must reach the subscriber
    unwrapped, which is exactly the null handler's behaviour.
    """
    if not policy.retries_enabled:
        return NullRetryHandler()
    return RetryHandler(policy, logger=logger, emitter=emitter)
