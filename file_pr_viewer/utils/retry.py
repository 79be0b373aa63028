"""Retry utilities for the GitHub API client.

The resolution pipeline itself never retries a failed commit lookup; a
failed slot simply resolves to no pull request. Retrying transient
transport failures is the API client's choice, configured through
``github.retry_attempts`` and applied with the decorator below.

Key Exports:
    async_retry: Decorator for adding retry logic to async functions.

Example:
    >>> from file_pr_viewer.utils.retry import async_retry
    >>>
    >>> @async_retry(max_attempts=3, backoff_factor=0.5, exceptions=(httpx.TransportError,))
    ... async def fetch(url: str) -> httpx.Response:
    ...     return await client.get(url)

Backoff Formula:
    delay = backoff_factor * 2 ** (attempt_number - 1)
    For backoff_factor=0.5: 0.5s, 1s, 2s, ...
"""

import asyncio
import functools
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import structlog

log = structlog.get_logger(__name__)

T = TypeVar("T")


def async_retry(
    max_attempts: int = 3,
    backoff_factor: float = 0.5,
    exceptions: tuple[type[Exception], ...] = (Exception,),
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """Decorator for async functions with exponential backoff retry logic.

    Args:
        max_attempts: Maximum number of calls. 1 disables retrying.
        backoff_factor: Delay before the first retry, doubled each time.
        exceptions: Exception types that trigger a retry. Anything else
            propagates immediately.

    Returns:
        A decorator wrapping async functions with retry logic.

    Raises:
        ValueError: If max_attempts is smaller than 1.
        The last caught exception once all attempts are exhausted.
    """
    if max_attempts < 1:
        raise ValueError(f"max_attempts must be at least 1 (got {max_attempts})")

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            for attempt in range(1, max_attempts + 1):
                try:
                    return await func(*args, **kwargs)
                except exceptions as e:
                    if attempt == max_attempts:
                        if max_attempts > 1:
                            log.warning(
                                "retry_exhausted",
                                function=func.__name__,
                                attempts=attempt,
                                error=str(e),
                            )
                        raise

                    delay = backoff_factor * 2 ** (attempt - 1)
                    log.debug(
                        "retry_attempt",
                        function=func.__name__,
                        attempt=attempt,
                        max_attempts=max_attempts,
                        delay=delay,
                        error=str(e),
                    )
                    await asyncio.sleep(delay)

            raise RuntimeError("Retry logic error")

        return wrapper

    return decorator
