"""Event data models."""

from .base import BaseEvent
from .error_info import ErrorInfo
from .request import (
    RequestCompletedEvent,
    RequestEvent,
    RequestEventType,
    RequestFailedEvent,
    RequestRetryingEvent,
    RequestStartedEvent,
)

__all__ = [
    "BaseEvent",
    "ErrorInfo",
    "RequestEvent",
    "RequestEventType",
    "RequestStartedEvent",
    "RequestRetryingEvent",
    "RequestCompletedEvent",
    "RequestFailedEvent",
]
