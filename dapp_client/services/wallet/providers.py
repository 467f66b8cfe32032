"""
Instrumented wallet-facing providers.

Thin wrappers that report transaction lifecycle events to the UI callback
and trace private-state access.
"""

from typing import Any

from loguru import logger

from dapp_client.services.callbacks import (
    ProviderCallback,
    ProviderCallbackEvent,
    notify,
)

from .protocols import PrivateStateStore, TransactingWallet


class InstrumentedWalletProvider:
    """
    Wallet and submission provider emitting started/done event pairs.

    Every "done" event fires even when the wrapped call raises.
    """

    def __init__(
        self,
        wallet: TransactingWallet,
        callback: ProviderCallback | None = None,
        coin_public_key: str | None = None,
        encryption_public_key: str | None = None,
    ) -> None:
        self.wallet = wallet
        self.callback = callback
        self.coin_public_key = coin_public_key
        self.encryption_public_key = encryption_public_key

    @classmethod
    async def from_wallet(
        cls, wallet: TransactingWallet, callback: ProviderCallback | None = None
    ) -> "InstrumentedWalletProvider":
        """Create a provider with public keys taken from the wallet's first state."""
        stream = wallet.state()
        try:
            state = await anext(stream)
        finally:
            aclose = getattr(stream, "aclose", None)
            if aclose is not None:
                await aclose()
        return cls(
            wallet,
            callback,
            coin_public_key=state.coin_public_key,
            encryption_public_key=state.encryption_public_key,
        )

    async def balance_tx(self, tx: Any, new_coins: list[Any] | None = None) -> Any:
        notify(self.callback, ProviderCallbackEvent.BALANCE_TX_STARTED)
        try:
            return await self.wallet.balance_transaction(tx, new_coins or [])
        finally:
            notify(self.callback, ProviderCallbackEvent.BALANCE_TX_DONE)

    async def prove_tx(self, tx: Any) -> Any:
        notify(self.callback, ProviderCallbackEvent.PROVE_TX_STARTED)
        try:
            return await self.wallet.prove_transaction(tx)
        finally:
            notify(self.callback, ProviderCallbackEvent.PROVE_TX_DONE)

    async def balance_and_prove_tx(self, tx: Any, new_coins: list[Any] | None = None) -> Any:
        """Balance then prove, as the CLI wallet does before submission."""
        balanced = await self.balance_tx(tx, new_coins)
        return await self.prove_tx(balanced)

    async def submit_tx(self, tx: Any) -> str:
        notify(self.callback, ProviderCallbackEvent.SUBMIT_TX_STARTED)
        try:
            return await self.wallet.submit_transaction(tx)
        finally:
            notify(self.callback, ProviderCallbackEvent.SUBMIT_TX_DONE)


class LoggingPrivateStateProvider:
    """Private-state store pass-through that traces every access."""

    def __init__(self, store: PrivateStateStore) -> None:
        self.store = store

    async def set(self, key: str, state: Any) -> None:
        logger.trace(f"Setting private state for key: {key}")
        await self.store.set(key, state)

    async def get(self, key: str) -> Any | None:
        logger.trace(f"Getting private state for key: {key}")
        return await self.store.get(key)

    async def remove(self, key: str) -> None:
        logger.trace(f"Removing private state for key: {key}")
        await self.store.remove(key)

    async def clear(self) -> None:
        logger.trace("Clearing private state")
        await self.store.clear()

    async def set_signing_key(self, key: str, signing_key: Any) -> None:
        logger.trace(f"Setting signing key for key: {key}")
        await self.store.set_signing_key(key, signing_key)

    async def get_signing_key(self, key: str) -> Any | None:
        logger.trace(f"Getting signing key for key: {key}")
        return await self.store.get_signing_key(key)

    async def remove_signing_key(self, key: str) -> None:
        logger.trace(f"Removing signing key for key: {key}")
        await self.store.remove_signing_key(key)

    async def clear_signing_keys(self) -> None:
        logger.trace("Clearing signing keys")
        await self.store.clear_signing_keys()
