"""
Network presets.

Endpoint sets for the networks the client can talk to.
"""

from dataclasses import dataclass
from enum import StrEnum


class NetworkName(StrEnum):
    """Known network presets."""

    STANDALONE = "standalone"
    TESTNET_LOCAL = "testnet-local"
    TESTNET_REMOTE = "testnet-remote"


class NetworkId(StrEnum):
    """Network identifiers understood by the wallet SDK."""

    UNDEPLOYED = "undeployed"
    DEV_NET = "devnet"
    TEST_NET = "testnet"
    MAIN_NET = "mainnet"


@dataclass(frozen=True)
class NetworkPreset:
    """Endpoints of one network."""

    indexer: str
    indexer_ws: str
    node: str
    proof_server: str
    network_id: NetworkId


_LOCAL_INDEXER = "http://127.0.0.1:8088/api/v1/graphql"
_LOCAL_INDEXER_WS = "ws://127.0.0.1:8088/api/v1/graphql/ws"
_LOCAL_NODE = "http://127.0.0.1:9944"
_LOCAL_PROOF_SERVER = "http://127.0.0.1:6300"

NETWORK_PRESETS: dict[NetworkName, NetworkPreset] = {
    NetworkName.STANDALONE: NetworkPreset(
        indexer=_LOCAL_INDEXER,
        indexer_ws=_LOCAL_INDEXER_WS,
        node=_LOCAL_NODE,
        proof_server=_LOCAL_PROOF_SERVER,
        network_id=NetworkId.UNDEPLOYED,
    ),
    NetworkName.TESTNET_LOCAL: NetworkPreset(
        indexer=_LOCAL_INDEXER,
        indexer_ws=_LOCAL_INDEXER_WS,
        node=_LOCAL_NODE,
        proof_server=_LOCAL_PROOF_SERVER,
        network_id=NetworkId.TEST_NET,
    ),
    NetworkName.TESTNET_REMOTE: NetworkPreset(
        indexer="https://indexer.testnet-02.midnight.network/api/v1/graphql",
        indexer_ws="wss://indexer.testnet-02.midnight.network/api/v1/graphql/ws",
        node="https://rpc.testnet-02.midnight.network",
        proof_server=_LOCAL_PROOF_SERVER,
        network_id=NetworkId.TEST_NET,
    ),
}


def get_preset(name: NetworkName | str) -> NetworkPreset:
    """
    Look up a network preset by name.

    Raises:
        ValueError: If the name is not a known network
    """
    return NETWORK_PRESETS[NetworkName(name)]
