"""Domain models for retry configuration and per-request retry state."""

import enum
from dataclasses import dataclass

from .exceptions import ConfigurationError


class ErrorCategory(enum.Enum):
    """Classification of request errors for retry decisions."""

    TRANSIENT = "transient"  # Communication or status problem, retry
    PERMANENT = "permanent"  # Response shape or decode problem, never retry


class DelayStrategy(enum.StrEnum):
    """How the configured delay grows between retries."""

    LINEAR = "linear"  # delay * attempts consumed
    FIXED = "fixed"  # the same delay before every retry


@dataclass(frozen=True)
class RetryPolicy:
    """Retry configuration attached to a target for its whole lifetime.

    ``max_attempts`` counts retries issued after the first attempt, so a
    request makes at most ``max_attempts + 1`` transport calls. Zero disables
    retrying: the first failure is terminal and delivered unwrapped.
    """

    max_attempts: int = 0
    delay: float = 0.0  # Seconds
    strategy: DelayStrategy = DelayStrategy.LINEAR

    def __post_init__(self) -> None:
        if self.max_attempts < 0:
            raise ConfigurationError(
                f"max_attempts must be non-negative, got {self.max_attempts}"
            )
        if self.delay < 0:
            raise ConfigurationError(f"delay must be non-negative, got {self.delay}")

    @property
    def retries_enabled(self) -> bool:
        return self.max_attempts > 0

    def calculate_delay(self, attempts_consumed: int) -> float:
        """
        Calculate the wait before a retry.

        Args:
            attempts_consumed: Retries consumed once this retry is counted
                (1 for the first retry)

        Returns:
            Delay in seconds

        Examples:
            >>> policy = RetryPolicy(max_attempts=3, delay=0.5)
            >>> policy.calculate_delay(1)
            0.5
            >>> policy.calculate_delay(3)
            1.5
        """
        if self.strategy is DelayStrategy.FIXED:
            return self.delay
        return self.delay * attempts_consumed

    def new_state(self) -> "RetryState":
        return RetryState(
            max_attempts=self.max_attempts, attempts_remaining=self.max_attempts
        )


@dataclass
class RetryState:
    """Mutable retry bookkeeping owned by one logical request.

    Counters only move forward; ``attempts_consumed + attempts_remaining``
    always equals ``max_attempts``.
    """

    max_attempts: int
    attempts_remaining: int
    attempts_consumed: int = 0

    @property
    def exhausted(self) -> bool:
        return self.attempts_remaining <= 0

    def record_retry(self) -> None:
        """Count one retry against the budget."""
        self.attempts_consumed += 1
        self.attempts_remaining -= 1
