"""
Tests for ResilientDataProvider.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from dapp_client.services.callbacks import ProviderCallbackEvent
from dapp_client.services.data_provider import (
    BlockHeightConfig,
    ContractStateObservableConfig,
    ResilientDataProvider,
)
from dapp_client.services.retry import RetryPolicy
from dapp_client.utils.exceptions import is_transient

FAST_POLICY = RetryPolicy(max_attempts=3, initial_delay=0.0, backoff_factor=2, max_delay=0.0)

ADDRESS = "0200c0ffee"


@pytest.fixture
def raw_provider():
    """Raw indexer provider mock."""
    raw = MagicMock()
    raw.query_contract_state = AsyncMock(return_value={"counter": 1})
    raw.query_zswap_and_contract_state = AsyncMock(return_value=("zswap", {"counter": 1}))
    raw.query_deploy_contract_state = AsyncMock(return_value={"counter": 0})
    raw.watch_for_contract_state = AsyncMock(return_value={"counter": 2})
    raw.watch_for_deploy_tx_data = AsyncMock(return_value={"txId": "deploy"})
    raw.watch_for_tx_data = AsyncMock(return_value={"txId": "tx1"})
    return raw


@pytest.fixture
def provider(raw_provider, callback_events):
    return ResilientDataProvider(
        raw_provider,
        callback=callback_events,
        policy=FAST_POLICY,
        tx_watch_policy=FAST_POLICY,
    )


class TestRetriedQueries:
    """Tests for one-shot queries and watches."""

    @pytest.mark.asyncio
    async def test_query_passes_arguments_through(self, provider, raw_provider):
        config = BlockHeightConfig(block_height=120)

        result = await provider.query_contract_state(ADDRESS, config)

        assert result == {"counter": 1}
        raw_provider.query_contract_state.assert_awaited_once_with(ADDRESS, config)

    @pytest.mark.asyncio
    async def test_query_retries_until_success(self, provider, raw_provider):
        """Transient indexer lag is absorbed by retries."""
        raw_provider.query_contract_state.side_effect = [
            ConnectionError("indexer lag"),
            None,
        ]

        result = await provider.query_contract_state(ADDRESS)

        assert result is None
        assert raw_provider.query_contract_state.await_count == 2

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "method,args",
        [
            ("query_zswap_and_contract_state", (ADDRESS,)),
            ("query_deploy_contract_state", (ADDRESS,)),
            ("watch_for_contract_state", (ADDRESS,)),
            ("watch_for_deploy_tx_data", (ADDRESS,)),
        ],
    )
    async def test_every_one_shot_call_is_retried(self, provider, raw_provider, method, args):
        raw_method = getattr(raw_provider, method)
        expected = raw_method.return_value
        raw_method.side_effect = [OSError("reset"), OSError("reset"), expected]

        result = await getattr(provider, method)(*args)

        assert result == expected
        assert raw_method.await_count == 3

    @pytest.mark.asyncio
    async def test_exhaustion_surfaces_provider_error(self, provider, raw_provider):
        """The wrapper adds no error types: the last provider error propagates."""
        raw_provider.watch_for_contract_state.side_effect = LookupError("no such contract")

        with pytest.raises(LookupError) as exc_info:
            await provider.watch_for_contract_state(ADDRESS)

        assert raw_provider.watch_for_contract_state.await_count == FAST_POLICY.total_attempts
        assert any("watchForContractState" in note for note in exc_info.value.__notes__)

    @pytest.mark.asyncio
    async def test_method_name_used_as_label(self, provider, raw_provider):
        raw_provider.query_zswap_and_contract_state.side_effect = ValueError("bad")

        with pytest.raises(ValueError) as exc_info:
            await provider.query_zswap_and_contract_state(ADDRESS)

        assert any("queryZSwapAndContractState" in note for note in exc_info.value.__notes__)

    @pytest.mark.asyncio
    async def test_predicate_stops_fatal_errors(self, raw_provider):
        provider = ResilientDataProvider(
            raw_provider, policy=FAST_POLICY, is_retryable=is_transient
        )
        raw_provider.query_deploy_contract_state.side_effect = KeyError("schema")

        with pytest.raises(KeyError):
            await provider.query_deploy_contract_state(ADDRESS)

        assert raw_provider.query_deploy_contract_state.await_count == 1


class TestWatchForTxData:
    """Tests for transaction watches."""

    @pytest.mark.asyncio
    async def test_events_paired_on_success(self, provider, callback_events):
        result = await provider.watch_for_tx_data("tx1")

        assert result == {"txId": "tx1"}
        assert callback_events.events == [
            ProviderCallbackEvent.WATCH_FOR_TX_DATA_STARTED,
            ProviderCallbackEvent.WATCH_FOR_TX_DATA_DONE,
        ]

    @pytest.mark.asyncio
    async def test_done_emitted_after_exhaustion(self, provider, raw_provider, callback_events):
        """done fires once even when every attempt fails."""
        raw_provider.watch_for_tx_data.side_effect = TimeoutError("not final")

        with pytest.raises(TimeoutError):
            await provider.watch_for_tx_data("tx1")

        assert callback_events.events == [
            ProviderCallbackEvent.WATCH_FOR_TX_DATA_STARTED,
            ProviderCallbackEvent.WATCH_FOR_TX_DATA_DONE,
        ]
        assert raw_provider.watch_for_tx_data.await_count == 4

    @pytest.mark.asyncio
    async def test_uses_tx_watch_policy(self, raw_provider, monkeypatch):
        """Transaction watches retry with their own, slower policy."""
        seen = []

        async def fake_execute(operation, label, policy, **kwargs):
            seen.append((label, policy))
            return await operation()

        monkeypatch.setattr(
            "dapp_client.services.data_provider.resilient_provider.execute_with_retry",
            fake_execute,
        )
        tx_policy = RetryPolicy(max_attempts=5, initial_delay=1.0, max_delay=30.0)
        provider = ResilientDataProvider(raw_provider, policy=FAST_POLICY, tx_watch_policy=tx_policy)

        await provider.watch_for_tx_data("tx1")
        await provider.query_contract_state(ADDRESS)

        assert seen == [("watchForTxData", tx_policy), ("queryContractState", FAST_POLICY)]

    @pytest.mark.asyncio
    async def test_works_without_callback(self, raw_provider):
        provider = ResilientDataProvider(raw_provider, policy=FAST_POLICY)
        assert await provider.watch_for_tx_data("tx1") == {"txId": "tx1"}


class TestContractStateObservable:
    """Tests for the subscription passthrough."""

    def test_observable_is_not_wrapped(self, provider, raw_provider):
        stream = object()
        raw_provider.contract_state_observable.return_value = stream
        config = ContractStateObservableConfig(start="all")

        assert provider.contract_state_observable(ADDRESS, config) is stream
        raw_provider.contract_state_observable.assert_called_once_with(ADDRESS, config)


class TestFromSettings:
    """Tests for ResilientDataProvider.from_settings."""

    def test_policies_follow_settings(self, raw_provider, callback_events):
        from dapp_client.config.settings import Settings

        settings = Settings(
            _env_file=None,
            retry_max_attempts=4,
            retry_initial_delay=0.5,
            retry_backoff_factor=3,
            retry_max_delay=20.0,
            tx_watch_initial_delay=5.0,
        )

        provider = ResilientDataProvider.from_settings(
            raw_provider, settings, callback=callback_events
        )

        assert provider.policy == RetryPolicy(
            max_attempts=4, initial_delay=0.5, backoff_factor=3, max_delay=20.0
        )
        assert provider.tx_watch_policy == RetryPolicy(
            max_attempts=4, initial_delay=5.0, backoff_factor=3, max_delay=20.0
        )
        assert provider.callback is callback_events
        assert provider.wrapped is raw_provider

    @pytest.mark.asyncio
    async def test_configured_attempts_bound_calls(self, raw_provider):
        """retry_max_attempts=1 allows exactly two calls."""
        from dapp_client.config.settings import Settings

        settings = Settings(
            _env_file=None,
            retry_max_attempts=1,
            retry_initial_delay=0.0,
            retry_max_delay=0.0,
            tx_watch_initial_delay=0.0,
        )
        raw_provider.watch_for_tx_data.side_effect = ConnectionError("node down")
        provider = ResilientDataProvider.from_settings(raw_provider, settings)

        with pytest.raises(ConnectionError):
            await provider.watch_for_tx_data("tx1")

        assert raw_provider.watch_for_tx_data.await_count == 2
