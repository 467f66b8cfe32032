"""
Chain data provider services.

Typed interface of the raw indexer provider and its resilient wrapper.
"""

from .protocols import (
    BlockHashConfig,
    BlockHeightConfig,
    ContractStateObservableConfig,
    QueryConfig,
    RawDataProvider,
)
from .resilient_provider import ResilientDataProvider


__all__ = [
    "BlockHashConfig",
    "BlockHeightConfig",
    "ContractStateObservableConfig",
    "QueryConfig",
    "RawDataProvider",
    "ResilientDataProvider",
]
