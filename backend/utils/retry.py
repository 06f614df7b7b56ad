"""
Retry with exponential backoff for rate-limited provider calls
"""

import re
import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, TypeVar

from core.exceptions import ProviderError, RateLimitedError

logger = logging.getLogger(__name__)

T = TypeVar("T")

_RATE_LIMIT_PATTERN = re.compile(r"rate[\s_-]?limit|too many requests", re.IGNORECASE)


def is_rate_limit_error(error: BaseException) -> bool:
    """Classify an error as a transient rate-limit signal."""
    if isinstance(error, RateLimitedError):
        return True
    if isinstance(error, ProviderError) and error.status_code == 429:
        return True
    return bool(_RATE_LIMIT_PATTERN.search(str(error)))


@dataclass(frozen=True)
class RetryPolicy:
    """
    Backoff policy for provider calls.
    
    Attempt n (0-based) that fails with a retryable error waits
    initial_delay * growth_factor ** n seconds before the next attempt.
    """
    max_retries: int = 5
    initial_delay: float = 25.0
    growth_factor: float = 1.5
    is_retryable: Callable[[BaseException], bool] = field(default=is_rate_limit_error)

    def delay_for(self, attempt: int) -> float:
        return self.initial_delay * self.growth_factor ** attempt


async def retry_with_backoff(
    fn: Callable[[], Awaitable[T]],
    policy: RetryPolicy,
    label: str = "request",
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """
    Call fn, retrying retryable failures according to policy.
    
    Args:
        fn: Zero-argument coroutine factory (called once per attempt)
        policy: Retry policy
        label: Human readable name used in log messages
        sleep: Awaitable sleep, injectable for tests
        
    Returns:
        Result of the first successful attempt
        
    Raises:
        The last error once the retry budget is spent, or any
        non-retryable error immediately.
    """
    attempt = 0
    while True:
        try:
            return await fn()
        except Exception as e:
            if not policy.is_retryable(e) or attempt >= policy.max_retries:
                raise
            delay = policy.delay_for(attempt)
            logger.warning(
                f"Rate limited on {label}, waiting {delay:.0f}s "
                f"(attempt {attempt + 1}/{policy.max_retries})"
            )
            await sleep(delay)
            attempt += 1
