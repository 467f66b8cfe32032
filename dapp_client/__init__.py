"""
Resilient blockchain client layer for shielded-chain dApps.

Retrying data provider, cached zero-knowledge artifacts and a wallet
synchronizer that survives stale caches and chain resets.
"""

__version__ = "0.1.0"
