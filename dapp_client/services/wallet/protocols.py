"""
Wallet SDK interfaces.

The wallet itself (transaction balancing, proving, the indexer sync
engine) is supplied by the chain SDK. These protocols describe the parts
the synchronizer drives.
"""

from collections.abc import AsyncIterator
from typing import Any, Protocol

from .types import WalletState


class WalletHandle(Protocol):
    """A live wallet instance. Must be closed by whoever built it."""

    def state(self) -> AsyncIterator[WalletState]:
        """Push stream of wallet state records, in emission order."""
        ...

    async def serialize_state(self) -> str: ...

    def start(self) -> None: ...

    async def close(self) -> None: ...


class TransactingWallet(WalletHandle, Protocol):
    """Wallet that can also balance, prove and submit transactions."""

    async def balance_transaction(self, tx: Any, new_coins: list[Any]) -> Any: ...

    async def prove_transaction(self, tx: Any) -> Any: ...

    async def submit_transaction(self, tx: Any) -> str: ...


class WalletSDK(Protocol):
    """Factory for wallet instances."""

    async def build(
        self,
        indexer_uri: str,
        indexer_ws_uri: str,
        proof_server_uri: str,
        node_uri: str,
        seed: str,
        network_id: str,
        log_level: str,
    ) -> WalletHandle: ...

    async def restore(
        self,
        indexer_uri: str,
        indexer_ws_uri: str,
        proof_server_uri: str,
        node_uri: str,
        seed: str,
        serialized_state: str,
        log_level: str,
    ) -> WalletHandle: ...


class PrivateStateStore(Protocol):
    """Key-value store for contract private state and signing keys."""

    async def set(self, key: str, state: Any) -> None: ...

    async def get(self, key: str) -> Any | None: ...

    async def remove(self, key: str) -> None: ...

    async def clear(self) -> None: ...

    async def set_signing_key(self, key: str, signing_key: Any) -> None: ...

    async def get_signing_key(self, key: str) -> Any | None: ...

    async def remove_signing_key(self, key: str) -> None: ...

    async def clear_signing_keys(self) -> None: ...
