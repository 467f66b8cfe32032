"""Pytest configuration and shared fixtures for all tests."""

import asyncio
import json
import os
import sys
from pathlib import Path

# Minimal environment for tests: local endpoints, no persisted state
os.environ.setdefault("NETWORK", "standalone")
os.environ.setdefault("DEBUG_LEVEL", "DEBUG")

# Add project root to PYTHONPATH
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from unittest.mock import AsyncMock, MagicMock

import pytest

from dapp_client.config.constants import NATIVE_TOKEN
from dapp_client.config.settings import Settings
from dapp_client.services.wallet.types import SyncState, WalletState


class FakeWallet:
    """
    In-memory wallet whose state stream replays a fixed list of records.

    When ``hang`` is set the stream blocks forever after the last record,
    like a live wallet that never reaches the awaited condition.
    """

    def __init__(self, states, live_offset=0, hang=True, serialize_error=None):
        self.states = list(states)
        self.live_offset = live_offset
        self.hang = hang
        self.serialize_error = serialize_error
        self.started = False
        self.closed = False
        self.close = AsyncMock(side_effect=self._close)

    async def _close(self):
        self.closed = True

    async def _stream(self):
        for state in self.states:
            yield state
        if self.hang:
            await asyncio.Event().wait()

    def state(self):
        return self._stream()

    def start(self):
        self.started = True

    async def serialize_state(self):
        if self.serialize_error is not None:
            raise self.serialize_error
        return json.dumps({"offset": self.live_offset, "txHistory": []})


def synced_state(balance=0, address="addr_test1", **sync_kwargs) -> WalletState:
    """Fully synced wallet state with a native balance."""
    sync = SyncState(is_fully_synced=True, **sync_kwargs)
    return WalletState(address=address, balances={NATIVE_TOKEN: balance}, sync=sync)


def syncing_state(applied_lag=10, source_lag=5) -> WalletState:
    """Wallet state with sync progress known but not complete."""
    return WalletState(
        address="addr_test1",
        sync=SyncState(applied_lag=applied_lag, source_lag=source_lag),
    )


@pytest.fixture
def make_wallet():
    """Factory for FakeWallet instances."""
    return FakeWallet


@pytest.fixture
def make_synced_state():
    """Factory for fully synced wallet states."""
    return synced_state


@pytest.fixture
def make_syncing_state():
    """Factory for partially synced wallet states."""
    return syncing_state


@pytest.fixture
def sync_cache(tmp_path):
    """Empty sync cache directory."""
    directory = tmp_path / "sync-cache"
    directory.mkdir()
    return directory


@pytest.fixture
def settings(sync_cache):
    """Settings for a standalone network with short deadlines."""
    return Settings(
        _env_file=None,
        network="standalone",
        sync_cache=sync_cache,
        sync_timeout=0.5,
        funds_timeout=0.5,
        sync_log_interval=0.01,
        funds_log_interval=0.01,
    )


@pytest.fixture
def settings_without_cache():
    """Settings with persistence disabled."""
    return Settings(
        _env_file=None,
        network="standalone",
        sync_cache=None,
        sync_timeout=0.5,
        funds_timeout=0.5,
    )


@pytest.fixture
def mock_sdk():
    """Wallet SDK mock; tests set build/restore return values."""
    sdk = MagicMock()
    sdk.build = AsyncMock()
    sdk.restore = AsyncMock()
    return sdk


@pytest.fixture
def recorded_sleep():
    """Sleep replacement that records requested delays without waiting."""
    delays: list[float] = []

    async def sleep(delay: float) -> None:
        delays.append(delay)

    sleep.delays = delays
    return sleep


@pytest.fixture
def callback_events():
    """Callback that records every lifecycle event it receives."""
    events = []

    def callback(event):
        events.append(event)

    callback.events = events
    return callback
