"""
Wallet Synchronizer.

Builds a ready-to-use wallet: restores it from a persisted snapshot when
possible, detects that the remote chain was reset since the snapshot was
taken, falls back to a full rebuild whenever the cached state is missing,
corrupted or stale, waits for sync and for funds with explicit deadlines,
and persists the wallet state again on shutdown.

A corrupted or stale local cache never blocks wallet construction: in the
worst case it costs a slower rebuild. Only configuration errors and the
failure of the rebuild path itself are surfaced to the caller.
"""

import secrets
import time

from loguru import logger

from dapp_client.config.constants import (
    CHAIN_RESET_OFFSET_TOLERANCE,
    DEFAULT_SNAPSHOT_NAME,
    GENESIS_MINT_WALLET_SEED,
    WALLET_SEED_BYTES,
)
from dapp_client.config.networks import NetworkName
from dapp_client.config.settings import Settings, get_settings
from dapp_client.utils.exceptions import (
    ConfigurationError,
    FundingTimeoutError,
    WalletSyncTimeoutError,
    describe_error,
)

from .persistence import FilesystemPersistence, Persistence, SnapshotStore
from .protocols import WalletHandle, WalletSDK
from .types import (
    PersistedWalletSnapshot,
    SyncPhase,
    WalletState,
    WalletSyncReport,
)
from .waiters import Clock, wait_for_funds, wait_for_sync, wait_for_sync_progress


def generate_seed() -> str:
    """Random hex seed for a brand-new wallet."""
    return secrets.token_hex(WALLET_SEED_BYTES)


def is_chain_reset(live_offset: int, persisted_offset: int) -> bool:
    """
    Decide whether the remote chain was reset since a snapshot was taken.

    The chain counts as reset when the restored wallet's live offset lies
    more than one block behind the persisted offset.
    """
    return live_offset < persisted_offset - CHAIN_RESET_OFFSET_TOLERANCE


class WalletSynchronizer:
    """
    Orchestrates wallet construction, synchronization and persistence.

    The synchronizer owns every wallet it builds until the caller receives
    it from ``build_wallet``; wallets discarded along the way are closed
    here. Building again saves and closes the previous wallet first. Used
    as an async context manager it saves and closes the wallet it built
    on exit.

    Usage:
        async with WalletSynchronizer(sdk, settings) as synchronizer:
            report = await synchronizer.build_wallet(seed)
            ...
    """

    def __init__(
        self,
        sdk: WalletSDK,
        settings: Settings | None = None,
        persistence: Persistence | None = None,
        snapshot_name: str = DEFAULT_SNAPSHOT_NAME,
        clock: Clock = time.monotonic,
    ) -> None:
        """
        Initialize wallet synchronizer.

        Args:
            sdk: Wallet SDK used to build and restore wallets
            settings: Client settings (defaults to the process settings)
            persistence: Snapshot storage (defaults to the local filesystem)
            snapshot_name: Snapshot file name inside the sync cache directory
            clock: Monotonic clock for progress log throttling
        """
        self.sdk = sdk
        self.settings = settings or get_settings()
        self.snapshots = SnapshotStore(
            persistence or FilesystemPersistence(),
            self.settings.sync_cache,
            snapshot_name,
        )
        self.clock = clock
        self._wallet: WalletHandle | None = None

    @property
    def wallet(self) -> WalletHandle | None:
        """Wallet built by this synchronizer, if any."""
        return self._wallet

    async def __aenter__(self) -> "WalletSynchronizer":
        return self

    async def __aexit__(self, *exc_info) -> None:
        if self._wallet is not None:
            await self.save_state()
            await self.close()

    # ------------------------------------------------------------------
    # Build path
    # ------------------------------------------------------------------

    async def build_wallet(self, seed: str, use_snapshot: bool = True) -> WalletSyncReport:
        """
        Build a synced, funded wallet for ``seed``.

        Args:
            seed: Wallet seed (hex)
            use_snapshot: Try restoring from the persisted snapshot first

        Returns:
            Report holding the ready wallet and the phases it went through

        Raises:
            ConfigurationError: If the seed or an endpoint is missing
            WalletSyncTimeoutError: If a freshly built wallet does not sync in time
            FundingTimeoutError: If no funds arrive before the deadline
        """
        self._check_configuration(seed)
        if self._wallet is not None:
            # One live wallet per synchronizer
            logger.info("Replacing previously built wallet")
            await self.save_state()
            await self.close()
        phases: list[SyncPhase] = []

        restored = None
        if use_snapshot:
            restored = await self._try_restore(seed, phases)
        else:
            phases.append(SyncPhase.NO_PERSISTED_STATE)

        if restored is not None:
            wallet, state = restored
        else:
            wallet, state = await self._build_from_scratch(seed, phases)
        phases.append(SyncPhase.SYNCED)

        try:
            state = await self._wait_for_funds(wallet, state, phases)
        except BaseException:
            await self._close_quietly(wallet)
            raise

        phases.append(SyncPhase.READY)
        self._wallet = wallet
        logger.info(f"Your wallet address is: {state.address}")
        logger.info(f"Your wallet balance is: {state.native_balance}")
        return WalletSyncReport(
            wallet=wallet,
            restored=restored is not None,
            balance=state.native_balance,
            address=state.address,
            phases=phases,
        )

    async def build_and_wait_for_funds(self, seed: str) -> WalletHandle:
        """Build a wallet for ``seed`` and return just the handle."""
        report = await self.build_wallet(seed)
        return report.wallet

    async def build_fresh_wallet(self) -> WalletSyncReport:
        """Build a wallet from a newly generated seed, ignoring any snapshot."""
        return await self.build_wallet(generate_seed(), use_snapshot=False)

    async def build_genesis_wallet(self) -> WalletSyncReport:
        """
        Build the wallet holding the genesis mint of a local standalone node.

        Raises:
            ConfigurationError: If the network is not standalone
        """
        if self.settings.network is not NetworkName.STANDALONE:
            raise ConfigurationError(
                f"Genesis wallet only exists on a standalone network, not {self.settings.network}"
            )
        return await self.build_wallet(GENESIS_MINT_WALLET_SEED)

    def _check_configuration(self, seed: str) -> None:
        if not seed or not seed.strip():
            raise ConfigurationError("Wallet seed must not be empty")
        for name in ("indexer_url", "indexer_ws_url", "node_url", "proof_server_url"):
            value = getattr(self.settings, name, None)
            if not value or not value.strip():
                raise ConfigurationError(f"Endpoint '{name}' is not configured")
        if not self.settings.network_id:
            raise ConfigurationError("Network id is not configured")

    async def _try_restore(
        self, seed: str, phases: list[SyncPhase]
    ) -> tuple[WalletHandle, WalletState] | None:
        """
        Restore and sync a wallet from the snapshot.

        Returns:
            The synced wallet and its state, or None when a rebuild is needed
        """
        if not self.snapshots.enabled:
            logger.info("File path for save file not found, building wallet from scratch")
            phases.append(SyncPhase.NO_PERSISTED_STATE)
            return None

        try:
            present = await self.snapshots.exists()
        except Exception as e:
            logger.warning(f"Cannot check for wallet save file: {describe_error(e)}")
            present = False
        if not present:
            logger.info("Wallet save file not found, building wallet from scratch")
            phases.append(SyncPhase.NO_PERSISTED_STATE)
            return None

        phases.append(SyncPhase.ATTEMPT_RESTORE)
        wallet: WalletHandle | None = None
        try:
            snapshot = await self.snapshots.load()
            if snapshot is None:
                logger.info("Wallet save file disappeared, building wallet from scratch")
                return None

            wallet = await self.sdk.restore(
                self.settings.indexer_url,
                self.settings.indexer_ws_url,
                self.settings.proof_server_url,
                self.settings.node_url,
                seed,
                snapshot.serialized_state,
                self._sdk_log_level(),
            )
            wallet.start()
            phases.append(SyncPhase.RESTORED_AND_SYNCING)

            if await self._is_another_chain(wallet, snapshot.offset):
                phases.append(SyncPhase.CHAIN_RESET_DETECTED)
                logger.warning("The chain was reset, building wallet from scratch")
                await self._close_quietly(wallet)
                return None

            outcome = await wait_for_sync(
                wallet,
                timeout=self.settings.sync_timeout,
                log_interval=self.settings.sync_log_interval,
                clock=self.clock,
            )
        except Exception as e:
            logger.warning(f"Restore failed: {describe_error(e)}")
            logger.info(
                "Wallet was not able to restore using the stored state, "
                "building wallet from scratch"
            )
            if wallet is not None:
                await self._close_quietly(wallet)
            return None
        except BaseException:
            if wallet is not None:
                await self._close_quietly(wallet)
            raise

        if not outcome.is_ready or outcome.state is None:
            logger.info(f"Offset: {snapshot.offset}, sync outcome: {outcome.status}")
            logger.info(
                "Wallet was not able to sync from restored state, "
                "building wallet from scratch"
            )
            await self._close_quietly(wallet)
            return None

        logger.success("Wallet was able to sync from restored state")
        return wallet, outcome.state

    async def _is_another_chain(self, wallet: WalletHandle, persisted_offset: int) -> bool:
        """
        Compare the restored wallet's live offset with the persisted one.

        Raises:
            WalletSyncTimeoutError: If the wallet reports no sync progress in time
            SnapshotError: If the live serialized state has no usable offset
        """
        progress = await wait_for_sync_progress(
            wallet,
            timeout=self.settings.sync_timeout,
            log_interval=self.settings.sync_log_interval,
            clock=self.clock,
        )
        if not progress.is_ready:
            raise WalletSyncTimeoutError(
                f"Restored wallet reported no sync progress ({progress.status})"
            )

        # The wallet does not expose its offset directly; read it from its state
        live_offset = PersistedWalletSnapshot.parse(await wallet.serialize_state()).offset
        if is_chain_reset(live_offset, persisted_offset):
            logger.info(
                f"Live offset {live_offset}, restored offset {persisted_offset}: "
                f"another chain"
            )
            return True

        logger.info(f"Live offset {live_offset}, restored offset {persisted_offset}: ok")
        return False

    async def _build_from_scratch(
        self, seed: str, phases: list[SyncPhase]
    ) -> tuple[WalletHandle, WalletState]:
        """
        Build a brand-new wallet and wait for it to sync.

        Raises:
            WalletSyncTimeoutError: If the new wallet does not sync in time
        """
        phases.append(SyncPhase.REBUILD_FROM_SCRATCH)
        logger.info("Building wallet from scratch")
        wallet = await self.sdk.build(
            self.settings.indexer_url,
            self.settings.indexer_ws_url,
            self.settings.proof_server_url,
            self.settings.node_url,
            seed,
            str(self.settings.network_id),
            self._sdk_log_level(),
        )
        try:
            wallet.start()
            outcome = await wait_for_sync(
                wallet,
                timeout=self.settings.sync_timeout,
                log_interval=self.settings.sync_log_interval,
                clock=self.clock,
            )
        except BaseException:
            await self._close_quietly(wallet)
            raise

        if not outcome.is_ready or outcome.state is None:
            await self._close_quietly(wallet)
            raise WalletSyncTimeoutError(
                f"Wallet did not sync within {self.settings.sync_timeout}s "
                f"({outcome.status})"
            ) from outcome.error
        return wallet, outcome.state

    async def _wait_for_funds(
        self, wallet: WalletHandle, state: WalletState, phases: list[SyncPhase]
    ) -> WalletState:
        if state.native_balance > 0:
            return state

        phases.append(SyncPhase.FUNDS_PENDING)
        logger.info("Your wallet balance is: 0")
        logger.info("Waiting to receive tokens...")
        outcome = await wait_for_funds(
            wallet,
            timeout=self.settings.funds_timeout,
            log_interval=self.settings.funds_log_interval,
            clock=self.clock,
        )
        if not outcome.is_ready or outcome.state is None:
            raise FundingTimeoutError(
                f"No funds received within {self.settings.funds_timeout}s "
                f"({outcome.status})"
            ) from outcome.error
        return outcome.state

    def _sdk_log_level(self) -> str:
        return self.settings.log_level.lower()

    # ------------------------------------------------------------------
    # Shutdown path
    # ------------------------------------------------------------------

    async def save_state(self, wallet: WalletHandle | None = None) -> bool:
        """
        Persist the wallet's serialized state to the sync cache.

        Failures are logged and swallowed so shutdown always proceeds.

        Args:
            wallet: Wallet to save (defaults to the one built here)

        Returns:
            True if the state was written
        """
        wallet = wallet or self._wallet
        if not self.snapshots.enabled:
            logger.info("Not saving cache as sync cache was not defined")
            return False
        if wallet is None:
            logger.warning("No wallet to save")
            return False

        logger.info(f"Saving state in {self.snapshots.path}")
        try:
            serialized = await wallet.serialize_state()
            path = await self.snapshots.save(serialized)
        except Exception as e:
            logger.error(f"Failed to save wallet state: {describe_error(e)}")
            return False

        logger.info(f"File '{path}' written successfully.")
        return True

    async def close(self) -> None:
        """Close the wallet built by this synchronizer."""
        wallet, self._wallet = self._wallet, None
        if wallet is not None:
            await self._close_quietly(wallet)

    async def _close_quietly(self, wallet: WalletHandle) -> None:
        try:
            await wallet.close()
        except Exception as e:
            logger.warning(f"Error closing wallet: {describe_error(e)}")
