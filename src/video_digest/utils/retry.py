"""Retry utilities with exponential backoff for transient errors.

This module retries coroutine factories on transient errors such as rate
limits, server errors and network failures.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional, TypeVar

from .retryable_errors import get_retry_reason, is_retryable_error

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def retry_with_exponential_backoff(
    func: Callable[[], Awaitable[T]],
    max_retries: int = 3,
    initial_delay: float = 1.0,
    max_delay: float = 30.0,
    is_retryable: Callable[[Exception], bool] = is_retryable_error,
) -> T:
    """Await ``func()`` and retry it with exponential backoff on transient errors.

    Args:
        func: Zero-argument callable returning a new awaitable on each call
        max_retries: Maximum number of retry attempts (default: 3)
        initial_delay: Delay in seconds before the first retry (default: 1.0)
        max_delay: Maximum delay in seconds between retries (default: 30.0)
        is_retryable: Predicate deciding whether an exception is transient

    Returns:
        Result of the first successful ``await func()``

    Raises:
        Exception: The last exception if all retries are exhausted, or the first
            non-retryable exception. Cancellation is never retried.
    """
    last_exception: Optional[Exception] = None
    delay = initial_delay

    for attempt in range(max_retries + 1):
        try:
            return await func()
        except Exception as e:
            if not is_retryable(e):
                logger.debug("Non-retryable exception: %s", e)
                raise
            last_exception = e
            if attempt < max_retries:
                logger.warning(
                    "Attempt %d/%d failed (%s): %s. Retrying in %.1fs...",
                    attempt + 1,
                    max_retries + 1,
                    get_retry_reason(e),
                    e,
                    delay,
                )
                await asyncio.sleep(delay)
                delay = min(delay * 2, max_delay)
            else:
                logger.error("All %d attempts failed. Last error: %s", max_retries + 1, e)

    if last_exception:
        raise last_exception

    # Unreachable: the loop either returns or records an exception
    raise RuntimeError("Retry logic error: no exception but function failed")
