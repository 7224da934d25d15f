"""Response classification: raw transport results to attempt outcomes."""

import typing as t

from ..domain.exceptions import (
    CommunicationError,
    FlowError,
    NonHttpResponseError,
    UnsupportedStatusCodeError,
)
from ..domain.headers import flatten_headers
from ..domain.outcome import (
    AttemptOutcome,
    CommunicationFailure,
    NonHttpResponse,
    Success,
    UnsupportedStatus,
)
from ..infrastructure.http.base import HttpResponseMeta, TransportResult


def is_success_status(status_code: int) -> bool:
    return status_code // 100 == 2


def classify(result: TransportResult) -> AttemptOutcome:
    """Label one transport result.

    Rules, in order: a missing response or body is a communication failure,
    a response that is not HTTP is a non-HTTP response, a non-2xx status is
    an unsupported status, and anything left is a success.
    """
    if result.response is None or result.body is None:
        return CommunicationFailure(cause=result.error)

    match result.response:
        case HttpResponseMeta(status_code=status_code, headers=raw_headers):
            headers = flatten_headers(raw_headers)
            if not is_success_status(status_code):
                return UnsupportedStatus(status_code=status_code, headers=headers)
            return Success(payload=result.body, status_code=status_code, headers=headers)
        case other:
            return NonHttpResponse(raw=other)


def outcome_error(outcome: AttemptOutcome) -> FlowError | None:
    """Map a failed outcome to the error delivered to subscribers."""
    match outcome:
        case Success():
            return None
        case CommunicationFailure(cause=cause):
            return CommunicationError(cause)
        case NonHttpResponse(raw=raw):
            return NonHttpResponseError(raw)
        case UnsupportedStatus(status_code=status_code, headers=headers):
            return UnsupportedStatusCodeError(status_code, headers)


def raise_for_outcome(outcome: AttemptOutcome) -> Success:
    """Return the outcome if it is a success, otherwise raise its error.

    Raises:
        CommunicationError: No response or body
        NonHttpResponseError: Response is not HTTP
        UnsupportedStatusCodeError: Non-2xx status
    """
    error = outcome_error(outcome)
    if error is not None:
        raise error
    return t.cast(Success, outcome)
