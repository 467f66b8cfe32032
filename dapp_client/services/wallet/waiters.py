"""
Bounded waits on the wallet state stream.

Each wait consumes the wallet's push stream until a record satisfies a
condition, logs progress at most once per ``log_interval`` seconds, and
gives up after ``timeout`` seconds. Results are tagged ``WaitOutcome``
values instead of exceptions so callers can pick a fallback.
"""

import asyncio
import time
from collections.abc import Callable

from loguru import logger

from dapp_client.config.constants import FUNDS_LOG_INTERVAL, SYNC_LOG_INTERVAL
from dapp_client.utils.exceptions import describe_error

from .protocols import WalletHandle
from .types import WaitOutcome, WaitStatus, WalletState

StatePredicate = Callable[[WalletState], bool]
Clock = Callable[[], float]


class WalletStreamClosedError(Exception):
    """Raised when the wallet state stream ends before the condition holds."""
    pass


async def _first_matching(
    wallet: WalletHandle,
    predicate: StatePredicate,
    description: str,
    log_interval: float,
    clock: Clock,
) -> WalletState:
    last_logged: float | None = None
    stream = wallet.state()
    try:
        async for state in stream:
            now = clock()
            if last_logged is None or now - last_logged >= log_interval:
                logger.info(f"{description}. {state.describe_progress()}")
                last_logged = now
            if predicate(state):
                return state
    finally:
        aclose = getattr(stream, "aclose", None)
        if aclose is not None:
            await aclose()

    raise WalletStreamClosedError(f"Wallet state stream ended while {description.lower()}")


async def wait_for_state(
    wallet: WalletHandle,
    predicate: StatePredicate,
    description: str,
    timeout: float | None = None,
    log_interval: float = SYNC_LOG_INTERVAL,
    clock: Clock = time.monotonic,
) -> WaitOutcome:
    """
    Wait for the first state record satisfying ``predicate``.

    Args:
        wallet: Wallet whose state stream is consumed
        predicate: Condition on a state record
        description: Progress log prefix, e.g. "Waiting for sync"
        timeout: Deadline in seconds (None waits without bound)
        log_interval: Minimum seconds between progress log lines
        clock: Monotonic clock used for log throttling

    Returns:
        READY with the matching state, TIMED_OUT, or FAILED with the error
    """
    try:
        state = await asyncio.wait_for(
            _first_matching(wallet, predicate, description, log_interval, clock),
            timeout=timeout,
        )
    except TimeoutError:
        logger.warning(f"{description}: gave up after {timeout}s")
        return WaitOutcome(WaitStatus.TIMED_OUT)
    except Exception as e:
        logger.error(f"{description}: failed with {describe_error(e)}")
        return WaitOutcome(WaitStatus.FAILED, error=e)

    return WaitOutcome(WaitStatus.READY, state=state)


async def wait_for_sync_progress(
    wallet: WalletHandle,
    timeout: float | None = None,
    log_interval: float = SYNC_LOG_INTERVAL,
    clock: Clock = time.monotonic,
) -> WaitOutcome:
    """Wait until the wallet reports any sync progress at all."""
    return await wait_for_state(
        wallet,
        lambda state: state.sync is not None,
        "Waiting for sync progress",
        timeout=timeout,
        log_interval=log_interval,
        clock=clock,
    )


async def wait_for_sync(
    wallet: WalletHandle,
    timeout: float | None = None,
    log_interval: float = SYNC_LOG_INTERVAL,
    clock: Clock = time.monotonic,
) -> WaitOutcome:
    """Wait until the wallet is fully synced."""
    return await wait_for_state(
        wallet,
        lambda state: state.is_fully_synced,
        "Waiting for sync",
        timeout=timeout,
        log_interval=log_interval,
        clock=clock,
    )


async def wait_for_funds(
    wallet: WalletHandle,
    timeout: float | None = None,
    log_interval: float = FUNDS_LOG_INTERVAL,
    clock: Clock = time.monotonic,
) -> WaitOutcome:
    """Wait until a fully synced state shows a positive native balance."""
    return await wait_for_state(
        wallet,
        lambda state: state.is_fully_synced and state.native_balance > 0,
        "Waiting for funds",
        timeout=timeout,
        log_interval=log_interval,
        clock=clock,
    )
