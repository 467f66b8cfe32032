"""
Resilient data provider.

Wraps a raw indexer-backed data provider so that every one-shot query or
watch is retried with backoff. The wrapper adds no error types of its own:
once attempts run out the caller sees the provider's last error.
"""

from collections.abc import AsyncIterator
from typing import TYPE_CHECKING

from loguru import logger

from dapp_client.services.callbacks import (
    ProviderCallback,
    ProviderCallbackEvent,
    notify,
)
from dapp_client.services.retry import (
    DEFAULT_POLICY,
    TX_WATCH_POLICY,
    RetryPolicy,
    execute_with_retry,
)
from dapp_client.services.retry.executor import RetryPredicate

from .protocols import (
    ContractAddress,
    ContractState,
    ContractStateObservableConfig,
    FinalizedTxData,
    QueryConfig,
    RawDataProvider,
    TransactionId,
    ZswapChainState,
)

if TYPE_CHECKING:
    from dapp_client.config.settings import Settings


class ResilientDataProvider:
    """
    Data provider with retry-with-backoff on every one-shot call.

    Features:
    - Method name used as the retry label
    - watchForTxDataStarted/watchForTxDataDone events around transaction
      watches, "done" emitted whatever the outcome
    - Longer initial delay for transaction watches
    - Contract state subscriptions passed through unmodified

    Usage:
        provider = ResilientDataProvider(indexer_provider, callback=ui_callback)
        state = await provider.query_contract_state(address)
    """

    def __init__(
        self,
        wrapped: RawDataProvider,
        callback: ProviderCallback | None = None,
        policy: RetryPolicy = DEFAULT_POLICY,
        tx_watch_policy: RetryPolicy = TX_WATCH_POLICY,
        is_retryable: RetryPredicate | None = None,
    ) -> None:
        """
        Initialize resilient provider.

        Args:
            wrapped: Raw data provider from the chain SDK
            callback: Lifecycle callback for transaction watches
            policy: Retry policy for queries and ordinary watches
            tx_watch_policy: Retry policy for watch_for_tx_data
            is_retryable: Optional predicate to stop retrying fatal errors
        """
        self.wrapped = wrapped
        self.callback = callback
        self.policy = policy
        self.tx_watch_policy = tx_watch_policy
        self.is_retryable = is_retryable

    @classmethod
    def from_settings(
        cls,
        wrapped: RawDataProvider,
        settings: "Settings",
        callback: ProviderCallback | None = None,
        is_retryable: RetryPredicate | None = None,
    ) -> "ResilientDataProvider":
        """Build a provider whose retry policies come from settings."""
        return cls(
            wrapped,
            callback,
            policy=RetryPolicy.from_settings(settings),
            tx_watch_policy=RetryPolicy.tx_watch_from_settings(settings),
            is_retryable=is_retryable,
        )

    async def query_contract_state(
        self, contract_address: ContractAddress, config: QueryConfig | None = None
    ) -> ContractState | None:
        return await execute_with_retry(
            lambda: self.wrapped.query_contract_state(contract_address, config),
            "queryContractState",
            self.policy,
            is_retryable=self.is_retryable,
        )

    async def query_zswap_and_contract_state(
        self, contract_address: ContractAddress, config: QueryConfig | None = None
    ) -> tuple[ZswapChainState, ContractState] | None:
        return await execute_with_retry(
            lambda: self.wrapped.query_zswap_and_contract_state(contract_address, config),
            "queryZSwapAndContractState",
            self.policy,
            is_retryable=self.is_retryable,
        )

    async def query_deploy_contract_state(
        self, contract_address: ContractAddress
    ) -> ContractState | None:
        return await execute_with_retry(
            lambda: self.wrapped.query_deploy_contract_state(contract_address),
            "queryDeployContractState",
            self.policy,
            is_retryable=self.is_retryable,
        )

    async def watch_for_contract_state(
        self, contract_address: ContractAddress
    ) -> ContractState:
        return await execute_with_retry(
            lambda: self.wrapped.watch_for_contract_state(contract_address),
            "watchForContractState",
            self.policy,
            is_retryable=self.is_retryable,
        )

    async def watch_for_deploy_tx_data(
        self, contract_address: ContractAddress
    ) -> FinalizedTxData:
        return await execute_with_retry(
            lambda: self.wrapped.watch_for_deploy_tx_data(contract_address),
            "watchForDeployTxData",
            self.policy,
            is_retryable=self.is_retryable,
        )

    async def watch_for_tx_data(self, tx_id: TransactionId) -> FinalizedTxData:
        """
        Wait until a transaction is final, retrying with the tx-watch policy.

        Args:
            tx_id: Transaction identifier

        Returns:
            Finalized transaction data
        """
        notify(self.callback, ProviderCallbackEvent.WATCH_FOR_TX_DATA_STARTED)
        try:
            return await execute_with_retry(
                lambda: self.wrapped.watch_for_tx_data(tx_id),
                "watchForTxData",
                self.tx_watch_policy,
                is_retryable=self.is_retryable,
            )
        finally:
            notify(self.callback, ProviderCallbackEvent.WATCH_FOR_TX_DATA_DONE)

    def contract_state_observable(
        self,
        contract_address: ContractAddress,
        config: ContractStateObservableConfig,
    ) -> AsyncIterator[ContractState]:
        """Continuous subscription; not retried."""
        logger.debug(f"Subscribing to contract state of {contract_address}")
        return self.wrapped.contract_state_observable(contract_address, config)
