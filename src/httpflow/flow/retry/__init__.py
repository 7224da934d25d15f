"""Retry controller - handlers and error categorisation."""

from .base import BaseRetryHandler
from .categoriser import ErrorCategoriser
from .factory import RetryHandlerFactory, create_retry_handler
from .handler import RetryHandler
from .null import NullRetryHandler

__all__ = [
    "BaseRetryHandler",
    "ErrorCategoriser",
    "NullRetryHandler",
    "RetryHandler",
    "RetryHandlerFactory",
    "create_retry_handler",
]
