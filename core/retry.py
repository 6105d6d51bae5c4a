"""
Retry wrapper with exponential backoff for coroutine functions.

Usage:
    fetch = with_retry(max_attempts=3, initial_delay=1.0)(fetch_page)
    records = await fetch(0, 500)

After failed attempt ``n`` (1-indexed) the wrapper waits
``initial_delay * 2 ** (n - 1)`` seconds before trying again. There is no
wait after the final attempt; its error is re-raised unchanged.
"""

import asyncio
import functools
import logging
from typing import Any, Awaitable, Callable, Optional, Tuple, Type, TypeVar

T = TypeVar("T")


def backoff_delay(initial_delay: float, attempt: int) -> float:
    """Delay in seconds after the given (1-indexed) failed attempt."""
    return initial_delay * (2 ** (attempt - 1))


def with_retry(
    max_attempts: int,
    initial_delay: float,
    retry_on: Tuple[Type[BaseException], ...] = (Exception,),
    logger: Optional[logging.Logger] = None,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """
    Build a decorator that retries a coroutine function.

    Args:
        max_attempts: Total number of attempts, including the first one
        initial_delay: Delay in seconds after the first failed attempt
        retry_on: Exception types that trigger a retry; anything else propagates at once
        logger: Logger that receives one warning per failed attempt
        sleep: Awaitable sleep function (injectable for tests)

    Returns:
        Decorator wrapping a coroutine function with the retry policy
    """
    if max_attempts < 1:
        raise ValueError(f"max_attempts must be at least 1, got {max_attempts}")
    if initial_delay < 0:
        raise ValueError(f"initial_delay must be non-negative, got {initial_delay}")

    log = logger or logging.getLogger(__name__)

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        name = getattr(func, "__qualname__", repr(func))

        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            for attempt in range(1, max_attempts + 1):
                try:
                    return await func(*args, **kwargs)
                except retry_on as e:
                    delay = backoff_delay(initial_delay, attempt)
                    if attempt == max_attempts:
                        log.warning(
                            f"Attempt {attempt}/{max_attempts} failed for {name}: {e}. "
                            f"No attempts left."
                        )
                        raise
                    log.warning(
                        f"Attempt {attempt}/{max_attempts} failed for {name}: {e}. "
                        f"Retrying in {delay:.3f}s."
                    )
                    await sleep(delay)
            # range() is never empty because max_attempts >= 1
            raise RuntimeError("unreachable")

        return wrapper

    return decorator
