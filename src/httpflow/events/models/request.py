"""Events emitted by the request pipeline."""

import enum

from pydantic import Field

from .base import BaseEvent
from .error_info import ErrorInfo


class RequestEventType(enum.StrEnum):
    """Event type identifiers for request lifecycle events."""

    STARTED = "request.started"
    RETRYING = "request.retrying"
    COMPLETED = "request.completed"
    FAILED = "request.failed"


class RequestEvent(BaseEvent):
    """Base class for request lifecycle events.

    All request events carry the request_id assigned when the pipeline
    started, so retries of one request can be correlated.
    """

    request_id: str = Field(description="Unique identifier for this request")
    url: str = Field(description="Full request URL including query")
    method: str = Field(default="GET", description="HTTP method")


class RequestStartedEvent(RequestEvent):
    """Emitted once, before the first attempt is sent."""

    event_type: str = Field(default=RequestEventType.STARTED)


class RequestRetryingEvent(RequestEvent):
    """Emitted before waiting for a retry."""

    event_type: str = Field(default=RequestEventType.RETRYING)
    retry: int = Field(ge=1, description="Retry number (1-indexed)")
    max_retries: int = Field(ge=1, description="Retry budget of the policy")
    delay_seconds: float = Field(ge=0, description="Wait before the retry")
    error: ErrorInfo = Field(description="Failure that triggered the retry")


class RequestCompletedEvent(RequestEvent):
    """Emitted when the response was parsed successfully."""

    event_type: str = Field(default=RequestEventType.COMPLETED)
    status_code: int = Field(description="HTTP status of the final attempt")
    attempts: int = Field(ge=1, description="Transport calls made")


class RequestFailedEvent(RequestEvent):
    """Emitted when the request ends with an error."""

    event_type: str = Field(default=RequestEventType.FAILED)
    error: ErrorInfo = Field(description="Terminal error")
