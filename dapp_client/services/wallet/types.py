"""
Wallet synchronization types.

Records produced by the wallet's state stream, the persisted snapshot,
and the tagged results of the bounded waits.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError

from dapp_client.config.constants import NATIVE_TOKEN
from dapp_client.utils.exceptions import SnapshotError


@dataclass(frozen=True)
class SyncState:
    """Sync progress reported by the wallet."""

    applied_lag: int = 0
    source_lag: int = 0
    is_fully_synced: bool = False
    transaction_count: int = 0
    persisted_offset: int = 0


@dataclass(frozen=True)
class WalletState:
    """
    One record of the wallet's state stream.

    ``sync`` is None until the wallet has reported any sync progress.
    """

    address: str | None = None
    balances: Mapping[str, int] = field(default_factory=dict)
    sync: SyncState | None = None
    coin_public_key: str | None = None
    encryption_public_key: str | None = None

    @property
    def native_balance(self) -> int:
        """Balance of the native token (0 when absent)."""
        return self.balances.get(NATIVE_TOKEN, 0) or 0

    @property
    def is_fully_synced(self) -> bool:
        return self.sync is not None and self.sync.is_fully_synced

    def describe_progress(self) -> str:
        """Progress line used by the wait loops."""
        sync = self.sync or SyncState()
        return (
            f"Backend lag: {sync.source_lag}, wallet lag: {sync.applied_lag}, "
            f"transactions={sync.transaction_count}"
        )


class _SnapshotHeader(BaseModel):
    """Fields of the serialized wallet state the synchronizer relies on."""

    model_config = ConfigDict(extra="ignore")

    offset: int


@dataclass(frozen=True)
class PersistedWalletSnapshot:
    """Serialized wallet state together with the block offset it covers."""

    serialized_state: str
    offset: int

    @classmethod
    def parse(cls, serialized: str | bytes) -> "PersistedWalletSnapshot":
        """
        Parse serialized wallet state.

        Args:
            serialized: JSON produced by the wallet's serialize_state()

        Returns:
            Parsed snapshot

        Raises:
            SnapshotError: If the data is not valid JSON with an integer offset
        """
        if isinstance(serialized, bytes):
            try:
                serialized = serialized.decode("utf-8")
            except UnicodeDecodeError as e:
                raise SnapshotError(f"Snapshot is not valid UTF-8: {e}") from e

        try:
            header = _SnapshotHeader.model_validate_json(serialized)
        except ValidationError as e:
            raise SnapshotError(f"Snapshot cannot be parsed: {e}") from e

        return cls(serialized_state=serialized, offset=header.offset)


class WaitStatus(StrEnum):
    """Outcome of a bounded wait."""

    READY = "ready"
    TIMED_OUT = "timed_out"
    FAILED = "failed"


@dataclass(frozen=True)
class WaitOutcome:
    """Tagged result of a bounded wait on the wallet's state stream."""

    status: WaitStatus
    state: WalletState | None = None
    error: BaseException | None = None

    @property
    def is_ready(self) -> bool:
        return self.status is WaitStatus.READY


class SyncPhase(StrEnum):
    """Phases the synchronizer passes through while building a wallet."""

    NO_PERSISTED_STATE = "no_persisted_state"
    ATTEMPT_RESTORE = "attempt_restore"
    RESTORED_AND_SYNCING = "restored_and_syncing"
    CHAIN_RESET_DETECTED = "chain_reset_detected"
    REBUILD_FROM_SCRATCH = "rebuild_from_scratch"
    SYNCED = "synced"
    FUNDS_PENDING = "funds_pending"
    READY = "ready"


@dataclass
class WalletSyncReport:
    """Result of building a wallet: the handle plus how it was obtained."""

    wallet: Any
    restored: bool
    balance: int
    address: str | None = None
    phases: list[SyncPhase] = field(default_factory=list)
