"""Retry logic for transient transport errors."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from functools import wraps
from typing import TypeVar

import aiohttp

__all__ = ["retry", "CONNECT_ERRORS", "RETRYABLE_ERRORS"]

logger = logging.getLogger(__name__)

# Exceptions considered transient and eligible for retry
RETRYABLE_ERRORS: tuple[type[BaseException], ...] = (
    aiohttp.ClientConnectorError,  # Connection refused, DNS failed
    aiohttp.ClientConnectionError,  # Connection error
    aiohttp.ClientOSError,  # OS-level network error
    aiohttp.ServerTimeoutError,  # Server timeout
    aiohttp.ClientPayloadError,  # Streaming error
)

# Failures raised before the request left the process; safe to retry for POST
CONNECT_ERRORS: tuple[type[BaseException], ...] = (aiohttp.ClientConnectorError,)

R = TypeVar("R")
AsyncFn = Callable[..., Awaitable[R]]


def retry(
    times: int = 3,
    delay_sec: tuple[float, ...] = (0.2, 0.5, 1.0),
    errors: tuple[type[BaseException], ...] = RETRYABLE_ERRORS,
) -> Callable[[AsyncFn[R]], AsyncFn[R]]:
    """Decorate async transport function with exponential backoff retry.

    Retries on the given transient errors only; anything else (including
    cancellation) propagates immediately.

    Args:
        times: Number of attempts (1 = no retry).
        delay_sec: Delays between attempts in seconds.
        errors: Exception types eligible for retry.

    Returns:
        Decorator function.

    Example:
        @retry(times=3, delay_sec=(0.2, 0.5, 1.0))
        async def my_http_call():
            return await session.get(url)
    """

    def decorator(func: AsyncFn[R]) -> AsyncFn[R]:
        @wraps(func)
        async def wrapper(*args: object, **kwargs: object) -> R:
            last_exc: BaseException | None = None

            for attempt in range(max(1, times)):
                try:
                    return await func(*args, **kwargs)
                except errors as e:
                    last_exc = e
                    if attempt >= times - 1:
                        logger.debug(f"Retry exhausted after {times} attempts: {e}")
                        raise
                    delay_idx = min(attempt, len(delay_sec) - 1)
                    await asyncio.sleep(delay_sec[delay_idx])

            raise last_exc or RuntimeError("Retry wrapper exhausted")

        return wrapper

    return decorator
