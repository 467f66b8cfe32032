"""
Client services.

Provides the resilient blockchain client layer through a modular architecture:
- retry: bounded retry-with-backoff executor
- zk_config: artifact fetch backends and the artifact cache
- data_provider: retrying wrapper around the raw indexer provider
- wallet: wallet synchronization, persistence and instrumented providers
"""

from .callbacks import ProviderCallback, ProviderCallbackEvent, notify
from .data_provider import ResilientDataProvider
from .health import check_proof_server
from .retry import DEFAULT_POLICY, TX_WATCH_POLICY, RetryPolicy, execute_with_retry
from .wallet import WalletSynchronizer
from .zk_config import CachedArtifactProvider, FileArtifactFetcher, HttpArtifactFetcher


__all__ = [
    "CachedArtifactProvider",
    "DEFAULT_POLICY",
    "FileArtifactFetcher",
    "HttpArtifactFetcher",
    "ProviderCallback",
    "ProviderCallbackEvent",
    "ResilientDataProvider",
    "RetryPolicy",
    "TX_WATCH_POLICY",
    "WalletSynchronizer",
    "check_proof_server",
    "execute_with_retry",
    "notify",
]
