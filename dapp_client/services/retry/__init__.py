"""
Retry services.

Bounded retry-with-backoff for fallible asynchronous operations.
"""

from .executor import execute_with_retry, retry_with_backoff, with_timeout
from .policy import DEFAULT_POLICY, TX_WATCH_POLICY, RetryPolicy


__all__ = [
    "DEFAULT_POLICY",
    "TX_WATCH_POLICY",
    "RetryPolicy",
    "execute_with_retry",
    "retry_with_backoff",
    "with_timeout",
]
