"""Retry utilities for async operations.

This module provides retry decorators using tenacity, both for flaky HTTP
calls and for optimistic-concurrency write loops.
"""

from __future__ import annotations

import asyncio
import logging

from aiohttp import (
    ClientConnectorError,
    ClientError,
    ClientResponseError,
    ServerDisconnectedError,
)
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

logger = logging.getLogger(__name__)

HTTP_RETRY_EXCEPTIONS: tuple = (
    ClientConnectorError,
    ClientResponseError,
    ServerDisconnectedError,
    ClientError,
    asyncio.TimeoutError,
)


def retry_async(
    max_retries: int = 3,
    retry_delay: float = 1.0,
    backoff_factor: float = 2.0,
    retry_exceptions: tuple = HTTP_RETRY_EXCEPTIONS,
    max_delay: float | None = None,
):
    """Factory that returns a tenacity retry decorator configured with provided parameters.

    Args:
        max_retries: Maximum number of retry attempts (in addition to the first attempt).
        retry_delay: Initial delay between retries in seconds (used as multiplier).
        backoff_factor: Exponential backoff base for increasing delay between retries.
        retry_exceptions: Tuple of exception types that should trigger a retry.
        max_delay: Optional cap on a single wait, in seconds.

    Returns:
        A tenacity retry decorator configured with the specified parameters.

    Example:
        @retry_async(max_retries=2, retry_delay=0.2)
        async def fetch_data():
            async with session.get(url) as response:
                return await response.json()
    """
    wait_kwargs: dict = {"multiplier": retry_delay, "exp_base": backoff_factor}
    if max_delay is not None:
        wait_kwargs["max"] = max_delay
    return retry(
        # stop_after_attempt includes the first attempt
        stop=stop_after_attempt(max_retries + 1),
        wait=wait_exponential(**wait_kwargs),
        retry=retry_if_exception_type(retry_exceptions),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
