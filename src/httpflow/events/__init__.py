"""Event infrastructure - emitters and request event models."""

from .base import BaseEmitter, EventHandler
from .emitter import EventEmitter
from .models import (
    BaseEvent,
    ErrorInfo,
    RequestCompletedEvent,
    RequestEvent,
    RequestEventType,
    RequestFailedEvent,
    RequestRetryingEvent,
    RequestStartedEvent,
)
from .null import NullEmitter

__all__ = [
    # Emitters
    "BaseEmitter",
    "EventEmitter",
    "EventHandler",
    "NullEmitter",
    # Models
    "BaseEvent",
    "ErrorInfo",
    "RequestEvent",
    "RequestEventType",
    "RequestStartedEvent",
    "RequestRetryingEvent",
    "RequestCompletedEvent",
    "RequestFailedEvent",
]
