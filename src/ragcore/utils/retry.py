"""
Async retry with exponential backoff for model calls.

Nothing in the LLM or embedding layers retries by itself. Judges and the
summarizer wrap their single model call with ``execute_with_retry`` and
``RETRY_ONCE``; applications can use the same helpers around their own
calls.

Only transport failures (see ``ragcore.errors.is_retryable``) are retried.
Permanent errors and ``asyncio.CancelledError`` always propagate on the
first occurrence, including while sleeping between attempts.

Usage:
    @retry_with_backoff(max_attempts=3)
    async def ask(messages):
        return await llm.chat(messages)

    text = await execute_with_retry(llm.chat, messages, config=RETRY_ONCE)
"""

import asyncio
import logging
import random
from collections.abc import Awaitable
from dataclasses import dataclass
from functools import wraps
from typing import Any, Callable, TypeVar

from ragcore.errors import RateLimitError, is_retryable

logger = logging.getLogger(__name__)

T = TypeVar("T")

RetryCallback = Callable[[int, Exception, float], None]


@dataclass(frozen=True)
class RetryConfig:
    """
    How often and how patiently to retry a transport failure.

    Attributes:
        max_attempts: Attempts in total, the first call included
        base_delay: Sleep before the second attempt (seconds)
        max_delay: Upper bound for any single sleep (seconds)
        multiplier: Growth factor of the sleep per attempt
        jitter: Random spread as a fraction of the sleep, 0 to 1
        respect_retry_after: Sleep for a rate limit's Retry-After hint instead
        on_retry: Called as ``(attempt, error, delay)`` before each sleep
    """

    max_attempts: int = 3
    base_delay: float = 1.0
    max_delay: float = 60.0
    multiplier: float = 2.0
    jitter: float = 0.1
    respect_retry_after: bool = True
    on_retry: RetryCallback | None = None

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.base_delay < 0:
            raise ValueError("base_delay must be non-negative")
        if self.max_delay < self.base_delay:
            raise ValueError("max_delay must be >= base_delay")
        if not 0 <= self.jitter <= 1:
            raise ValueError("jitter must be between 0 and 1")


# Judges and the summarizer retry exactly once on transport failures.
RETRY_ONCE = RetryConfig(max_attempts=2, base_delay=0.5, max_delay=5.0)


def calculate_delay(attempt: int, config: RetryConfig, error: Exception | None = None) -> float:
    """Seconds to sleep after failed attempt number ``attempt`` (1-based)."""
    if config.respect_retry_after and isinstance(error, RateLimitError) and error.retry_after:
        return min(max(error.retry_after, 0.0), config.max_delay)

    delay = config.base_delay * config.multiplier ** (attempt - 1)
    if config.jitter:
        spread = delay * config.jitter
        delay += random.uniform(-spread, spread)
    return max(0.0, min(delay, config.max_delay))


def should_retry(error: Exception, attempt: int, config: RetryConfig) -> bool:
    """True when ``error`` is transient and attempts remain."""
    return attempt < config.max_attempts and is_retryable(error)


def retry_with_backoff(
    func: Callable[..., Awaitable[T]] | None = None,
    *,
    max_attempts: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 60.0,
    config: RetryConfig | None = None,
) -> Any:
    """
    Decorate a coroutine function so transport failures are retried.

    Works bare (``@retry_with_backoff``) or with arguments. An explicit
    ``config`` overrides the individual keyword arguments.
    """
    if config is None:
        config = RetryConfig(max_attempts=max_attempts, base_delay=base_delay, max_delay=max_delay)

    def decorator(fn: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        name = getattr(fn, "__qualname__", repr(fn))

        @wraps(fn)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            attempt = 1
            while True:
                try:
                    return await fn(*args, **kwargs)
                except Exception as e:
                    if not should_retry(e, attempt, config):
                        if attempt > 1:
                            logger.error(f"[{name}] Giving up after {attempt} attempts: {e!r}")
                        raise

                    delay = calculate_delay(attempt, config, e)
                    if config.on_retry:
                        config.on_retry(attempt, e, delay)
                    logger.warning(
                        f"[{name}] {type(e).__name__} on attempt {attempt}/{config.max_attempts}, "
                        f"retrying in {delay:.2f}s"
                    )
                    await asyncio.sleep(delay)
                    attempt += 1

        return wrapper

    if func is not None:
        return decorator(func)
    return decorator


async def execute_with_retry(
    func: Callable[..., Awaitable[T]],
    *args: Any,
    config: RetryConfig | None = None,
    **kwargs: Any,
) -> T:
    """Await ``func(*args, **kwargs)`` under ``config`` without decorating it."""
    return await retry_with_backoff(func, config=config or RetryConfig())(*args, **kwargs)
