"""Per-attempt outcome variants produced by the response classifier."""

from dataclasses import dataclass

from .headers import Headers


@dataclass(frozen=True, slots=True)
class Success:
    """2xx HTTP response with a body."""

    payload: bytes
    status_code: int
    headers: Headers


@dataclass(frozen=True, slots=True)
class CommunicationFailure:
    """No response or no body was obtained."""

    cause: BaseException | None = None


@dataclass(frozen=True, slots=True)
class NonHttpResponse:
    """A response arrived but it is not an HTTP response."""

    raw: object


@dataclass(frozen=True, slots=True)
class UnsupportedStatus:
    """HTTP response with a non-2xx status code."""

    status_code: int
    headers: Headers


AttemptOutcome = Success | CommunicationFailure | NonHttpResponse | UnsupportedStatus
