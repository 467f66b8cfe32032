"""
Retry executor with exponential backoff.

Turns unreliable, eventually-consistent indexer/node reads into dependable
operations. Every thrown error is treated as retryable unless the caller
supplies an ``is_retryable`` predicate.
"""

import asyncio
from collections.abc import Awaitable, Callable
from functools import wraps
from typing import Any, NoReturn, TypeVar

from loguru import logger

from dapp_client.services.retry.policy import DEFAULT_POLICY, RetryPolicy
from dapp_client.utils.exceptions import RetryExhaustedError, describe_error

T = TypeVar("T")

RetryPredicate = Callable[[BaseException], bool]
SleepFunc = Callable[[float], Awaitable[Any]]


async def with_timeout(
    awaitable: Awaitable[T],
    timeout: float,
    operation_name: str = "operation",
) -> T:
    """
    Await with a timeout.

    Args:
        awaitable: Awaitable to execute
        timeout: Timeout in seconds
        operation_name: Operation name for logging

    Returns:
        Result of the awaitable

    Raises:
        TimeoutError: If operation times out
    """
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout)
    except TimeoutError as e:
        error_msg = f"{operation_name} timed out after {timeout}s"
        logger.warning(error_msg)
        raise TimeoutError(error_msg) from e


def _give_up(
    error: Exception, label: str, attempts: int, wrap_errors: bool
) -> NoReturn:
    if wrap_errors:
        raise RetryExhaustedError(label, attempts, error) from error
    error.add_note(f"[{label}] gave up after {attempts} attempt(s)")
    raise error


async def execute_with_retry(
    operation: Callable[[], Awaitable[T]],
    label: str,
    policy: RetryPolicy = DEFAULT_POLICY,
    *,
    is_retryable: RetryPredicate | None = None,
    attempt_timeout: float | None = None,
    sleep: SleepFunc = asyncio.sleep,
    wrap_errors: bool = False,
) -> T:
    """
    Execute an async operation, retrying failures with exponential backoff.

    Attempts run strictly one after another. The delay before retry ``i``
    (0-based) is ``policy.delay_for(i)``.

    Args:
        operation: Zero-argument callable returning an awaitable
        label: Operation name used in every log line and in the final error
        policy: Retry policy (attempt budget and delays)
        is_retryable: Predicate deciding whether an error may be retried
            (default: every error is retryable)
        attempt_timeout: Optional timeout applied to each attempt
        sleep: Sleep coroutine used between attempts
        wrap_errors: Raise RetryExhaustedError instead of the last error

    Returns:
        Result of the first successful attempt

    Raises:
        Exception: The last error, annotated with the label and attempt count
        RetryExhaustedError: If ``wrap_errors`` is set and attempts ran out
    """
    total_attempts = policy.total_attempts
    attempt = 0

    while True:
        attempt += 1
        try:
            if attempt_timeout is None:
                result = await operation()
            else:
                result = await with_timeout(
                    operation(),
                    timeout=attempt_timeout,
                    operation_name=f"{label} (attempt {attempt}/{total_attempts})",
                )
        except Exception as e:
            logger.error(
                f"[{label}] Operation failed (attempt {attempt}/{total_attempts}): "
                f"{describe_error(e)}"
            )

            if is_retryable is not None and not is_retryable(e):
                logger.error(
                    f"[{label}] Error is not retryable, giving up after "
                    f"{attempt} attempt(s)"
                )
                _give_up(e, label, attempt, wrap_errors)

            if attempt >= total_attempts:
                logger.error(
                    f"[{label}] All retries exhausted after {attempt} attempts. Rejecting."
                )
                _give_up(e, label, attempt, wrap_errors)

            delay = policy.delay_for(attempt - 1)
            logger.info(f"[{label}] Retrying operation in {delay:.2f}s...")
            await sleep(delay)
            continue

        if attempt > 1:
            logger.success(f"[{label}] Operation succeeded after {attempt} attempts")
        return result


def retry_with_backoff(
    label: str | None = None,
    policy: RetryPolicy = DEFAULT_POLICY,
    is_retryable: RetryPredicate | None = None,
):
    """
    Decorator to retry an async function with exponential backoff.

    Usage:
        @retry_with_backoff(policy=RetryPolicy(max_attempts=3))
        async def fetch_block(self, height: int):
            return await self.client.block(height)

    Args:
        label: Operation name for logging (uses function name if None)
        policy: Retry policy
        is_retryable: Optional retryability predicate
    """
    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @wraps(func)
        async def wrapper(*args, **kwargs) -> T:
            return await execute_with_retry(
                lambda: func(*args, **kwargs),
                label or func.__name__,
                policy,
                is_retryable=is_retryable,
            )
        return wrapper
    return decorator
