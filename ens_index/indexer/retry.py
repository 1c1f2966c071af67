"""Retry with linear backoff for rate-limited registry requests."""

import asyncio
import functools
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from prometheus_client import Counter

from ens_index.core.logging import get_logger
from ens_index.indexer.errors import RegistryRateLimited

logger = get_logger().bind(module="registry_retry")

T = TypeVar("T")

REGISTRY_RETRIES = Counter(
    "registry_rate_limit_retries_total",
    "Total number of registry requests retried after HTTP 429",
)

Sleep = Callable[[float], Awaitable[Any]]


def with_rate_limit_retry(
    base_delay: float = 1.5,
    report_interval: int = 10,
    retry_on: tuple[type[Exception], ...] = (RegistryRateLimited,),
    sleep: Sleep | None = None,
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """Decorator that retries rate-limited coroutines with linear backoff.

    The retry count is unbounded: the wait before retry ``n`` is
    ``base_delay * n`` seconds. Exceptions not listed in ``retry_on``
    propagate immediately.

    Args:
        base_delay: Backoff unit in seconds
        report_interval: Emit a streak warning every this many retries
        retry_on: Tuple of exception types to retry on
        sleep: Awaitable sleep function, ``asyncio.sleep`` by default

    Returns:
        Decorated coroutine function with retry logic
    """

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            do_sleep = sleep or asyncio.sleep
            retries = 0
            while True:
                try:
                    return await func(*args, **kwargs)
                except retry_on as e:
                    retries += 1
                    delay = base_delay * retries
                    REGISTRY_RETRIES.inc()
                    logger.warning(
                        "Rate limited, retrying",
                        attempt=retries,
                        wait_seconds=delay,
                        error=str(e),
                    )
                    if retries % report_interval == 0:
                        logger.warning(
                            "Still rate limited",
                            consecutive_retries=retries,
                        )
                    await do_sleep(delay)

        return wrapper

    return decorator
