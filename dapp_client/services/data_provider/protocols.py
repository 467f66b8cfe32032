"""
Raw chain-data provider interface.

The indexer client itself is supplied by the chain SDK; this module only
declares what the resilient wrapper needs from it.
"""

from collections.abc import AsyncIterator
from dataclasses import dataclass
from typing import Any, Protocol

ContractAddress = str
TransactionId = str

# Opaque SDK values
ContractState = Any
ZswapChainState = Any
FinalizedTxData = Any


@dataclass(frozen=True)
class BlockHeightConfig:
    """Query contract state as of a block height."""

    block_height: int


@dataclass(frozen=True)
class BlockHashConfig:
    """Query contract state as of a block hash."""

    block_hash: str


QueryConfig = BlockHeightConfig | BlockHashConfig


@dataclass(frozen=True)
class ContractStateObservableConfig:
    """Where a contract state subscription starts."""

    start: str = "latest"
    block_height: int | None = None
    block_hash: str | None = None
    inclusive: bool = True


class RawDataProvider(Protocol):
    """Indexer-backed chain data provider."""

    async def query_contract_state(
        self, contract_address: ContractAddress, config: QueryConfig | None = None
    ) -> ContractState | None: ...

    async def query_zswap_and_contract_state(
        self, contract_address: ContractAddress, config: QueryConfig | None = None
    ) -> tuple[ZswapChainState, ContractState] | None: ...

    async def query_deploy_contract_state(
        self, contract_address: ContractAddress
    ) -> ContractState | None: ...

    async def watch_for_contract_state(
        self, contract_address: ContractAddress
    ) -> ContractState: ...

    async def watch_for_deploy_tx_data(
        self, contract_address: ContractAddress
    ) -> FinalizedTxData: ...

    async def watch_for_tx_data(self, tx_id: TransactionId) -> FinalizedTxData: ...

    def contract_state_observable(
        self,
        contract_address: ContractAddress,
        config: ContractStateObservableConfig,
    ) -> AsyncIterator[ContractState]: ...
