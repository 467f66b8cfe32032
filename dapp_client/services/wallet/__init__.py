"""
Wallet services.

Wallet construction and synchronization against a possibly-reset chain,
snapshot persistence, bounded waits and instrumented providers.
"""

from .persistence import FilesystemPersistence, Persistence, SnapshotStore
from .protocols import PrivateStateStore, TransactingWallet, WalletHandle, WalletSDK
from .providers import InstrumentedWalletProvider, LoggingPrivateStateProvider
from .synchronizer import WalletSynchronizer, generate_seed, is_chain_reset
from .types import (
    PersistedWalletSnapshot,
    SyncPhase,
    SyncState,
    WaitOutcome,
    WaitStatus,
    WalletState,
    WalletSyncReport,
)
from .waiters import (
    WalletStreamClosedError,
    wait_for_funds,
    wait_for_state,
    wait_for_sync,
    wait_for_sync_progress,
)


__all__ = [
    "FilesystemPersistence",
    "InstrumentedWalletProvider",
    "LoggingPrivateStateProvider",
    "Persistence",
    "PersistedWalletSnapshot",
    "PrivateStateStore",
    "SnapshotStore",
    "SyncPhase",
    "SyncState",
    "TransactingWallet",
    "WaitOutcome",
    "WaitStatus",
    "WalletHandle",
    "WalletSDK",
    "WalletState",
    "WalletStreamClosedError",
    "WalletSyncReport",
    "WalletSynchronizer",
    "generate_seed",
    "is_chain_reset",
    "wait_for_funds",
    "wait_for_state",
    "wait_for_sync",
    "wait_for_sync_progress",
]
