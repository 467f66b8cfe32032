"""
Retry policy.

Immutable description of how many times and how patiently an operation
is retried.
"""

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from dapp_client.config.constants import (
    RETRY_BACKOFF_FACTOR,
    RETRY_INITIAL_DELAY,
    RETRY_MAX_ATTEMPTS,
    RETRY_MAX_DELAY,
    TX_WATCH_INITIAL_DELAY,
)

if TYPE_CHECKING:
    from dapp_client.config.settings import Settings


@dataclass(frozen=True)
class RetryPolicy:
    """
    Exponential backoff policy.

    Attributes:
        max_attempts: Retries allowed after the first attempt, so the
            operation runs at most ``max_attempts + 1`` times
        initial_delay: Delay before the first retry (seconds)
        backoff_factor: Multiplier applied to the delay per retry (> 1)
        max_delay: Upper bound for any single delay (seconds)
    """

    max_attempts: int = RETRY_MAX_ATTEMPTS
    initial_delay: float = RETRY_INITIAL_DELAY
    backoff_factor: float = RETRY_BACKOFF_FACTOR
    max_delay: float = RETRY_MAX_DELAY

    def __post_init__(self) -> None:
        if self.max_attempts < 0:
            raise ValueError(f"max_attempts must be >= 0, got {self.max_attempts}")
        if self.initial_delay < 0:
            raise ValueError(f"initial_delay must be >= 0, got {self.initial_delay}")
        if self.backoff_factor <= 1:
            raise ValueError(f"backoff_factor must be > 1, got {self.backoff_factor}")
        if self.max_delay < self.initial_delay:
            raise ValueError("max_delay must not be smaller than initial_delay")

    @property
    def total_attempts(self) -> int:
        """Maximum number of times the operation is invoked."""
        return self.max_attempts + 1

    def delay_for(self, retry_index: int) -> float:
        """
        Delay before retry number ``retry_index`` (0-based).

        Returns:
            ``min(initial_delay * backoff_factor ** retry_index, max_delay)``
        """
        if retry_index < 0:
            raise ValueError(f"retry_index must be >= 0, got {retry_index}")
        try:
            delay = self.initial_delay * self.backoff_factor ** retry_index
        except OverflowError:
            return self.max_delay
        return min(delay, self.max_delay)

    def delays(self) -> list[float]:
        """All delays this policy would wait through before giving up."""
        return [self.delay_for(i) for i in range(self.max_attempts)]

    def with_initial_delay(self, initial_delay: float) -> "RetryPolicy":
        """Copy of this policy starting from a different delay."""
        return replace(self, initial_delay=initial_delay)

    @classmethod
    def from_settings(cls, settings: "Settings") -> "RetryPolicy":
        """Build the default read policy from settings."""
        return cls(
            max_attempts=settings.retry_max_attempts,
            initial_delay=settings.retry_initial_delay,
            backoff_factor=settings.retry_backoff_factor,
            max_delay=settings.retry_max_delay,
        )

    @classmethod
    def tx_watch_from_settings(cls, settings: "Settings") -> "RetryPolicy":
        """Build the transaction-watch policy from settings."""
        return cls.from_settings(settings).with_initial_delay(
            settings.tx_watch_initial_delay
        )


DEFAULT_POLICY = RetryPolicy()

# Chain finality can take much longer than ordinary reads
TX_WATCH_POLICY = DEFAULT_POLICY.with_initial_delay(TX_WATCH_INITIAL_DELAY)
