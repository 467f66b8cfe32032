"""
Exception types for the client layer.

Defines categorized exception types for proper error handling.
"""

import asyncio

import aiohttp


class DappClientError(Exception):
    """Base exception for client layer errors."""
    pass


class ConfigurationError(DappClientError):
    """Raised when a required endpoint or seed is missing. Never retried."""
    pass


class RetryExhaustedError(DappClientError):
    """Raised when an operation still fails after every allowed attempt."""

    def __init__(self, label: str, attempts: int, last_error: BaseException) -> None:
        self.label = label
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(
            f"{label} failed after {attempts} attempts: {last_error}"
        )


class SnapshotError(DappClientError):
    """Raised when a persisted wallet snapshot cannot be read or parsed."""
    pass


class WalletSyncTimeoutError(DappClientError):
    """Raised when a freshly built wallet does not sync before the deadline."""
    pass


class FundingTimeoutError(DappClientError):
    """Raised when no positive native balance shows up before the deadline."""
    pass


class ArtifactFetchError(DappClientError):
    """Raised when a zero-knowledge artifact cannot be downloaded or read."""
    pass


# Exception categories based on handling strategy

# Network-level failures worth retrying
TRANSIENT_ERRORS = (
    ConnectionError,
    TimeoutError,
    asyncio.TimeoutError,
    aiohttp.ClientError,
    OSError,
)

# Programmer or configuration errors: retrying cannot help
FATAL_ERRORS = (
    ConfigurationError,
    TypeError,
    AttributeError,
    NotImplementedError,
)


def is_transient(exc: BaseException) -> bool:
    """
    Check if exception is a transient I/O failure.

    Usable as the ``is_retryable`` predicate of the retry executor
    when callers want fatal errors to short-circuit.

    Args:
        exc: Exception to check

    Returns:
        True if exception is transient and fatal-free
    """
    return isinstance(exc, TRANSIENT_ERRORS) and not isinstance(exc, FATAL_ERRORS)


def is_fatal(exc: BaseException) -> bool:
    """
    Check if exception must never be retried.

    Args:
        exc: Exception to check

    Returns:
        True if exception is fatal
    """
    return isinstance(exc, FATAL_ERRORS)


def describe_error(exc: BaseException) -> str:
    """Short ``Type: message`` description for log lines."""
    message = str(exc)
    return f"{type(exc).__name__}: {message}" if message else type(exc).__name__
