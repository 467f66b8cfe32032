"""
Tests for instrumented wallet and private-state providers.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from dapp_client.services.callbacks import ProviderCallbackEvent as Event
from dapp_client.services.wallet import (
    InstrumentedWalletProvider,
    LoggingPrivateStateProvider,
    WalletState,
)


@pytest.fixture
def transacting_wallet():
    wallet = MagicMock()
    wallet.balance_transaction = AsyncMock(return_value="balanced-tx")
    wallet.prove_transaction = AsyncMock(return_value="proven-tx")
    wallet.submit_transaction = AsyncMock(return_value="tx-id-1")
    return wallet


class TestInstrumentedWalletProvider:
    """Tests for started/done event pairs."""

    @pytest.mark.asyncio
    async def test_balance_and_prove_emit_pairs_in_order(
        self, transacting_wallet, callback_events
    ):
        provider = InstrumentedWalletProvider(transacting_wallet, callback_events)

        result = await provider.balance_and_prove_tx("tx", ["coin"])

        assert result == "proven-tx"
        transacting_wallet.balance_transaction.assert_awaited_once_with("tx", ["coin"])
        transacting_wallet.prove_transaction.assert_awaited_once_with("balanced-tx")
        assert callback_events.events == [
            Event.BALANCE_TX_STARTED,
            Event.BALANCE_TX_DONE,
            Event.PROVE_TX_STARTED,
            Event.PROVE_TX_DONE,
        ]

    @pytest.mark.asyncio
    async def test_submit_returns_transaction_id(self, transacting_wallet, callback_events):
        provider = InstrumentedWalletProvider(transacting_wallet, callback_events)

        assert await provider.submit_tx("proven-tx") == "tx-id-1"
        assert callback_events.events == [Event.SUBMIT_TX_STARTED, Event.SUBMIT_TX_DONE]

    @pytest.mark.asyncio
    async def test_done_emitted_when_proving_fails(self, transacting_wallet, callback_events):
        """A failing prover still closes the event pair."""
        transacting_wallet.prove_transaction.side_effect = ConnectionError("proof server down")
        provider = InstrumentedWalletProvider(transacting_wallet, callback_events)

        with pytest.raises(ConnectionError):
            await provider.prove_tx("tx")

        assert callback_events.events == [Event.PROVE_TX_STARTED, Event.PROVE_TX_DONE]

    @pytest.mark.asyncio
    async def test_balance_defaults_to_no_new_coins(self, transacting_wallet):
        provider = InstrumentedWalletProvider(transacting_wallet)

        await provider.balance_tx("tx")

        transacting_wallet.balance_transaction.assert_awaited_once_with("tx", [])

    @pytest.mark.asyncio
    async def test_from_wallet_reads_public_keys(self, make_wallet, transacting_wallet):
        """Public keys come from the first state record."""
        wallet = make_wallet(
            [WalletState(coin_public_key="cpk", encryption_public_key="epk")]
        )

        provider = await InstrumentedWalletProvider.from_wallet(wallet)

        assert provider.coin_public_key == "cpk"
        assert provider.encryption_public_key == "epk"
        assert provider.wallet is wallet


class TestLoggingPrivateStateProvider:
    """Tests for the private-state pass-through."""

    @pytest.mark.asyncio
    async def test_calls_are_delegated(self):
        store = MagicMock()
        for name in (
            "set", "get", "remove", "clear",
            "set_signing_key", "get_signing_key", "remove_signing_key", "clear_signing_keys",
        ):
            setattr(store, name, AsyncMock())
        store.get.return_value = {"count": 3}
        store.get_signing_key.return_value = "sk"
        provider = LoggingPrivateStateProvider(store)

        await provider.set("counter", {"count": 3})
        assert await provider.get("counter") == {"count": 3}
        await provider.remove("counter")
        await provider.clear()
        await provider.set_signing_key("0200aa", "sk")
        assert await provider.get_signing_key("0200aa") == "sk"
        await provider.remove_signing_key("0200aa")
        await provider.clear_signing_keys()

        store.set.assert_awaited_once_with("counter", {"count": 3})
        store.remove.assert_awaited_once_with("counter")
        store.clear.assert_awaited_once()
        store.set_signing_key.assert_awaited_once_with("0200aa", "sk")
        store.remove_signing_key.assert_awaited_once_with("0200aa")
        store.clear_signing_keys.assert_awaited_once()
