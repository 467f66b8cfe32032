"""
Tests for wallet state records and persisted snapshots.
"""

import json

import pytest

from dapp_client.config.constants import NATIVE_TOKEN
from dapp_client.services.wallet.types import (
    PersistedWalletSnapshot,
    SyncState,
    WaitOutcome,
    WaitStatus,
    WalletState,
)
from dapp_client.utils.exceptions import SnapshotError


class TestPersistedWalletSnapshot:
    """Tests for PersistedWalletSnapshot.parse."""

    def test_parse_keeps_serialized_text(self):
        """The serialized text is kept verbatim for restore()."""
        serialized = json.dumps({"offset": 1234, "txHistory": [], "state": "abc"})

        snapshot = PersistedWalletSnapshot.parse(serialized)

        assert snapshot.offset == 1234
        assert snapshot.serialized_state == serialized

    def test_parse_bytes(self):
        snapshot = PersistedWalletSnapshot.parse(b'{"offset": 7}')
        assert snapshot.offset == 7
        assert snapshot.serialized_state == '{"offset": 7}'

    def test_numeric_string_offset_accepted(self):
        assert PersistedWalletSnapshot.parse('{"offset": "42"}').offset == 42

    @pytest.mark.parametrize(
        "payload",
        [
            "not json at all",
            "",
            '{"txHistory": []}',
            '{"offset": "abc"}',
            '{"offset": null}',
            "[1, 2, 3]",
        ],
    )
    def test_invalid_snapshots_rejected(self, payload):
        """Corrupted or incomplete snapshots raise SnapshotError."""
        with pytest.raises(SnapshotError):
            PersistedWalletSnapshot.parse(payload)

    def test_invalid_utf8_rejected(self):
        with pytest.raises(SnapshotError):
            PersistedWalletSnapshot.parse(b"\xff\xfe\x00")


class TestWalletState:
    """Tests for WalletState helpers."""

    def test_native_balance_defaults_to_zero(self):
        assert WalletState().native_balance == 0

    def test_native_balance_ignores_other_tokens(self):
        state = WalletState(balances={"0201" + "ab" * 32: 500, NATIVE_TOKEN: 3})
        assert state.native_balance == 3

    def test_fully_synced_requires_sync_record(self):
        assert not WalletState().is_fully_synced
        assert not WalletState(sync=SyncState(is_fully_synced=False)).is_fully_synced
        assert WalletState(sync=SyncState(is_fully_synced=True)).is_fully_synced

    def test_progress_line(self):
        state = WalletState(sync=SyncState(applied_lag=3, source_lag=9, transaction_count=12))
        assert state.describe_progress() == "Backend lag: 9, wallet lag: 3, transactions=12"


class TestWaitOutcome:
    def test_only_ready_is_ready(self):
        assert WaitOutcome(WaitStatus.READY).is_ready
        assert not WaitOutcome(WaitStatus.TIMED_OUT).is_ready
        assert not WaitOutcome(WaitStatus.FAILED, error=RuntimeError()).is_ready
