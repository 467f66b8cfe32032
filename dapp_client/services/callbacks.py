"""
Provider lifecycle callbacks.

Events emitted around long-running provider operations so a UI can show
progress indicators.
"""

from collections.abc import Callable
from enum import StrEnum

from loguru import logger


class ProviderCallbackEvent(StrEnum):
    """Lifecycle notifications emitted by the client layer."""

    DOWNLOAD_PROVER_STARTED = "downloadProverStarted"
    DOWNLOAD_PROVER_DONE = "downloadProverDone"
    PROVE_TX_STARTED = "proveTxStarted"
    PROVE_TX_DONE = "proveTxDone"
    BALANCE_TX_STARTED = "balanceTxStarted"
    BALANCE_TX_DONE = "balanceTxDone"
    SUBMIT_TX_STARTED = "submitTxStarted"
    SUBMIT_TX_DONE = "submitTxDone"
    WATCH_FOR_TX_DATA_STARTED = "watchForTxDataStarted"
    WATCH_FOR_TX_DATA_DONE = "watchForTxDataDone"


ProviderCallback = Callable[[ProviderCallbackEvent], None]


def notify(callback: ProviderCallback | None, event: ProviderCallbackEvent) -> None:
    """
    Invoke a lifecycle callback without letting it affect the caller.

    Args:
        callback: Callback to invoke (no-op if None)
        event: Event to deliver
    """
    if callback is None:
        return
    try:
        callback(event)
    except Exception as e:
        logger.warning(f"Provider callback failed for {event}: {e}")
