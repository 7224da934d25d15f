"""Domain models - requests, retry policy, outcomes and errors."""

from .exceptions import (
    ClientNotInitialisedError,
    CommunicationError,
    ConfigurationError,
    FlowError,
    HttpFlowError,
    NonHttpResponseError,
    ParseError,
    RetryFailedError,
    SessionInvalidatedError,
    UnsupportedStatusCodeError,
)
from .headers import Headers, flatten_headers
from .outcome import (
    AttemptOutcome,
    CommunicationFailure,
    NonHttpResponse,
    Success,
    UnsupportedStatus,
)
from .parsing import JsonMode
from .request import HTTPMethod, RequestDescriptor
from .retry import DelayStrategy, ErrorCategory, RetryPolicy, RetryState

__all__ = [
    # Request
    "HTTPMethod",
    "RequestDescriptor",
    "Headers",
    "flatten_headers",
    # Retry
    "DelayStrategy",
    "ErrorCategory",
    "RetryPolicy",
    "RetryState",
    # Outcomes
    "AttemptOutcome",
    "Success",
    "CommunicationFailure",
    "NonHttpResponse",
    "UnsupportedStatus",
    # Parsing
    "JsonMode",
    # Errors
    "HttpFlowError",
    "ConfigurationError",
    "ClientNotInitialisedError",
    "SessionInvalidatedError",
    "FlowError",
    "CommunicationError",
    "UnsupportedStatusCodeError",
    "NonHttpResponseError",
    "ParseError",
    "RetryFailedError",
]
