"""Error categorisation for retry decisions."""

from ...domain.exceptions import CommunicationError, UnsupportedStatusCodeError
from ...domain.retry import ErrorCategory


class ErrorCategoriser:
    """Decides whether a failed attempt may be retried.

    The retryable set is a closed allow-list: communication failures and
    unsupported status codes are transient. Non-HTTP responses, parse errors
    and anything else are permanent, whatever budget is left.
    """

    def categorise(self, error: BaseException) -> ErrorCategory:
        match error:
            case CommunicationError() | UnsupportedStatusCodeError():
                return ErrorCategory.TRANSIENT
            case _:
                return ErrorCategory.PERMANENT

    def is_transient(self, error: BaseException) -> bool:
        return self.categorise(error) is ErrorCategory.TRANSIENT
