"""
Retry & polling utilities

- Condition polling for eventually-consistent AWS state (async + sync)
- Exponential backoff retry for AWS control-plane calls

Usage:
    from sfn_verifier.common.retry_utils import wait_for_condition, with_retry_sync

    await wait_for_condition(lambda: bucket_exists(name), timeout_ms=5000)

    @with_retry_sync(max_retries=2, exceptions=(ClientError,))
    def describe():
        ...
"""
import asyncio
import functools
import inspect
import logging
import random
import time
from enum import Enum
from typing import Awaitable, Callable, Dict, Optional, Tuple, Type, Union

from botocore.exceptions import (
    ClientError,
    ConnectionClosedError,
    ConnectTimeoutError,
    EndpointConnectionError,
    ReadTimeoutError,
)

from sfn_verifier.common.constants import PollingDefaults
from sfn_verifier.common.exceptions import ConditionTimeoutError

logger = logging.getLogger(__name__)

Condition = Callable[[], Union[bool, Awaitable[bool]]]


# =============================================================================
# Condition polling
# =============================================================================

async def wait_for_condition(
    condition: Condition,
    timeout_ms: int = PollingDefaults.TIMEOUT_MS,
    interval_ms: int = PollingDefaults.INTERVAL_MS,
) -> None:
    """
    Poll condition until it returns True.

    condition may be sync or return an awaitable. Exceptions raised by it are
    treated as "not yet true". It is evaluated at least once, even when
    timeout_ms is 0.

    Raises:
        ConditionTimeoutError: timeout_ms elapsed without a True result
    """
    deadline = time.monotonic() + timeout_ms / 1000.0
    attempt = 0

    while True:
        attempt += 1
        if await _evaluate_async(condition, attempt):
            return

        if time.monotonic() >= deadline:
            logger.info(f"Condition not met after {attempt} attempts ({timeout_ms}ms)")
            raise ConditionTimeoutError(timeout_ms)

        await asyncio.sleep(interval_ms / 1000.0)


def wait_for_condition_sync(
    condition: Callable[[], bool],
    timeout_ms: int = PollingDefaults.TIMEOUT_MS,
    interval_ms: int = PollingDefaults.INTERVAL_MS,
) -> None:
    """Blocking twin of wait_for_condition for synchronous callers."""
    deadline = time.monotonic() + timeout_ms / 1000.0
    attempt = 0

    while True:
        attempt += 1
        try:
            if condition():
                return
        except Exception as e:
            logger.debug(f"Condition attempt {attempt} raised {type(e).__name__}: {e}")

        if time.monotonic() >= deadline:
            logger.info(f"Condition not met after {attempt} attempts ({timeout_ms}ms)")
            raise ConditionTimeoutError(timeout_ms)

        time.sleep(interval_ms / 1000.0)


async def _evaluate_async(condition: Condition, attempt: int) -> bool:
    try:
        result = condition()
        if inspect.isawaitable(result):
            result = await result
        return bool(result)
    except Exception as e:
        logger.debug(f"Condition attempt {attempt} raised {type(e).__name__}: {e}")
        return False


# =============================================================================
# Retryable error classification
# =============================================================================

class RetryableErrorCategory(Enum):
    """Retryable error categories"""
    TRANSIENT = "transient"
    THROTTLING = "throttling"
    TIMEOUT = "timeout"
    NON_RETRYABLE = "non_retryable"


RETRYABLE_NETWORK_EXCEPTIONS = (
    ConnectionError,
    TimeoutError,
    EndpointConnectionError,
    ConnectionClosedError,
    ReadTimeoutError,
    ConnectTimeoutError,
)


AWS_ERROR_CATEGORIES: Dict[str, RetryableErrorCategory] = {
    # Transient
    "InternalServerError": RetryableErrorCategory.TRANSIENT,
    "ServiceUnavailable": RetryableErrorCategory.TRANSIENT,
    "InternalFailure": RetryableErrorCategory.TRANSIENT,
    "ServiceException": RetryableErrorCategory.TRANSIENT,

    # Throttling
    "ThrottlingException": RetryableErrorCategory.THROTTLING,
    "RequestLimitExceeded": RetryableErrorCategory.THROTTLING,
    "TooManyRequestsException": RetryableErrorCategory.THROTTLING,
    "Throttling": RetryableErrorCategory.THROTTLING,

    # Timeout
    "RequestTimeout": RetryableErrorCategory.TIMEOUT,
    "RequestExpired": RetryableErrorCategory.TIMEOUT,

    # Non-retryable
    "AccessDeniedException": RetryableErrorCategory.NON_RETRYABLE,
    "ValidationException": RetryableErrorCategory.NON_RETRYABLE,
    "InvalidArn": RetryableErrorCategory.NON_RETRYABLE,
    "InvalidExecutionInput": RetryableErrorCategory.NON_RETRYABLE,
    "ExecutionDoesNotExist": RetryableErrorCategory.NON_RETRYABLE,
    "StateMachineDoesNotExist": RetryableErrorCategory.NON_RETRYABLE,
}


def classify_aws_error(error: Exception) -> RetryableErrorCategory:
    """Map a botocore ClientError to a retry category."""
    if not isinstance(error, ClientError):
        return RetryableErrorCategory.NON_RETRYABLE

    error_code = error.response.get('Error', {}).get('Code', '')
    if not error_code:
        return RetryableErrorCategory.NON_RETRYABLE

    return AWS_ERROR_CATEGORIES.get(error_code, RetryableErrorCategory.NON_RETRYABLE)


def is_retryable(error: Exception) -> bool:
    """
    Whitelist-based retry decision.

    Retryable: ClientError in a TRANSIENT/THROTTLING/TIMEOUT category, and
    network/connection errors. Everything else fails immediately.
    """
    if isinstance(error, ClientError):
        return classify_aws_error(error) != RetryableErrorCategory.NON_RETRYABLE

    return isinstance(error, RETRYABLE_NETWORK_EXCEPTIONS)


def calculate_backoff_delay(
    attempt: int,
    base_delay: float = 1.0,
    max_delay: float = 30.0,
    exponential_base: float = 2.0,
    use_jitter: bool = True,
) -> float:
    """Exponential backoff with optional full jitter (seconds)."""
    exponential_delay = min(max_delay, base_delay * (exponential_base ** attempt))

    if not use_jitter:
        return exponential_delay

    return exponential_delay * random.random()


# =============================================================================
# Sync retry decorator
# =============================================================================

def with_retry_sync(
    max_retries: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 30.0,
    exponential_base: float = 2.0,
    exceptions: Tuple[Type[Exception], ...] = (Exception,),
    use_jitter: bool = True,
    on_retry: Optional[Callable[[Exception, int], None]] = None,
    should_retry: Optional[Callable[[Exception], bool]] = None,
):
    """
    Sync retry decorator: exponential backoff + jitter.

    max_retries may also be a callable taking the wrapped call's first
    positional argument (usually self) and returning the retry count.

    Usage:
        @with_retry_sync(max_retries=3, exceptions=(ClientError,))
        def list_state_machines():
            ...
    """
    def decorator(func: Callable):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            retries = max_retries(args[0]) if callable(max_retries) else max_retries

            for attempt in range(retries + 1):
                try:
                    return func(*args, **kwargs)

                except exceptions as e:
                    if should_retry is not None and not should_retry(e):
                        logger.warning(f"Not retrying {func.__name__}: {str(e)[:100]}")
                        raise

                    if not is_retryable(e):
                        logger.warning(f"Not retrying {func.__name__} (non-retryable): {str(e)[:100]}")
                        raise

                    if attempt == retries:
                        logger.error(
                            f"Retries exhausted ({retries}) for {func.__name__}: {str(e)[:100]}"
                        )
                        raise

                    delay = calculate_backoff_delay(
                        attempt, base_delay, max_delay, exponential_base, use_jitter
                    )

                    logger.warning(
                        f"Retry {attempt + 1}/{retries}: {func.__name__} | "
                        f"error: {str(e)[:50]} | retrying in {delay:.2f}s"
                    )

                    if on_retry:
                        on_retry(e, attempt)

                    time.sleep(delay)

        return wrapper
    return decorator
