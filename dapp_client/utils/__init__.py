"""Shared utilities: exceptions and logging."""

from .exceptions import (
    ArtifactFetchError,
    ConfigurationError,
    DappClientError,
    FundingTimeoutError,
    RetryExhaustedError,
    SnapshotError,
    WalletSyncTimeoutError,
    describe_error,
    is_fatal,
    is_transient,
)
from .logging import setup_logging, setup_logging_from_settings


__all__ = [
    "ArtifactFetchError",
    "ConfigurationError",
    "DappClientError",
    "FundingTimeoutError",
    "RetryExhaustedError",
    "SnapshotError",
    "WalletSyncTimeoutError",
    "describe_error",
    "is_fatal",
    "is_transient",
    "setup_logging",
    "setup_logging_from_settings",
]
