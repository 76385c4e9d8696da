"""
Bounded retry for upstream calls that may fail transiently (5xx).
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


def linear_backoff(step_seconds: float = 1.0) -> Callable[[int], float]:
    """Delay before retry number `attempt`: 1 -> step, 2 -> 2*step, ..."""
    def backoff(attempt: int) -> float:
        return attempt * step_seconds
    return backoff


def is_server_error(exc: Exception) -> bool:
    status_code: Optional[int] = getattr(exc, "status_code", None)
    return status_code is not None and status_code >= 500


class RetryPolicy:
    """
    Run an async operation up to `max_attempts` times.

    Only failures whose `status_code` is 5xx are retried; anything else,
    including network errors without a status, is raised right away.
    After the last attempt the last failure is raised.
    """

    def __init__(
        self,
        max_attempts: int = 3,
        backoff: Optional[Callable[[int], float]] = None,
        should_retry: Callable[[Exception], bool] = is_server_error,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.max_attempts = max_attempts
        self.backoff = backoff or linear_backoff(1.0)
        self.should_retry = should_retry
        self.sleep = sleep

    async def run(self, operation: Callable[[], Awaitable[T]]) -> T:
        attempt = 1
        while True:
            try:
                return await operation()
            except Exception as e:
                if attempt >= self.max_attempts or not self.should_retry(e):
                    raise
                delay = self.backoff(attempt)
                logger.warning(
                    f"Attempt {attempt}/{self.max_attempts} failed "
                    f"(status {getattr(e, 'status_code', None)}), retrying in {delay:.1f}s"
                )
                await self.sleep(delay)
                attempt += 1
