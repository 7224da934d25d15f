"""Custom exceptions for httpflow.

Request failures form a closed taxonomy under ``FlowError``. Every terminal
error a subscriber can observe is one of its subclasses.
"""

import typing as t


class HttpFlowError(Exception):
    """Base exception for all httpflow errors."""

    pass


class ConfigurationError(HttpFlowError):
    """Raised when settings or retry policies hold invalid values."""

    pass


class ClientNotInitialisedError(HttpFlowError):
    """Raised when a client or transport is used before it has been opened.

    This typically occurs when issuing requests without entering the
    ``FlowClient`` async context manager.
    """

    pass


class SessionInvalidatedError(HttpFlowError):
    """Raised (as a cause) when the shared transport session was invalidated."""

    def __init__(self, message: str = "Transport session was invalidated") -> None:
        super().__init__(message)


class FlowError(HttpFlowError):
    """Base exception for errors delivered through a flow's error channel."""

    pass


class CommunicationError(FlowError):
    """No response or no body was obtained from the transport."""

    def __init__(self, cause: BaseException | None = None) -> None:
        self.cause = cause
        detail = f": {type(cause).__name__}: {cause}" if cause is not None else ""
        super().__init__(f"Communication failed{detail}")


class UnsupportedStatusCodeError(FlowError):
    """The server answered with a non-2xx status code."""

    def __init__(self, status_code: int, headers: t.Mapping[str, str]) -> None:
        self.status_code = status_code
        self.headers = headers
        super().__init__(f"Unsupported status code {status_code}")


class NonHttpResponseError(FlowError):
    """The transport produced a response that is not an HTTP response."""

    def __init__(self, response: object) -> None:
        self.response = response
        super().__init__(f"Non-HTTP response: {type(response).__name__}")


class ParseError(FlowError):
    """The decode function failed on a successful payload."""

    def __init__(self, cause: BaseException | None = None) -> None:
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Failed to parse response{detail}")


class RetryFailedError(FlowError):
    """The retry budget was exhausted.

    Attributes:
        last_error: The failure of the final attempt
        attempts_configured: The policy's max_attempts
        attempts_remaining: Always 0 once raised
        attempts_consumed: Number of retries that were issued
    """

    def __init__(
        self,
        last_error: BaseException,
        attempts_configured: int,
        attempts_remaining: int = 0,
        attempts_consumed: int | None = None,
    ) -> None:
        self.last_error = last_error
        self.attempts_configured = attempts_configured
        self.attempts_remaining = attempts_remaining
        self.attempts_consumed = (
            attempts_consumed if attempts_consumed is not None else attempts_configured
        )
        super().__init__(
            f"Request failed after {self.attempts_consumed} retries: {last_error}"
        )
