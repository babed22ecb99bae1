import asyncio
from typing import Awaitable, Callable, Optional, TypeVar

from paxhook.foundation.logging import logger

T = TypeVar("T")

MAX_ATTEMPTS = 3
BASE_DELAY_SECONDS = 1.0

_TRANSPORT_HINTS = ("network", "timeout", "fetch")


def _status_of(error: BaseException) -> Optional[int]:
    status = getattr(error, "status", None) or getattr(error, "status_code", None)
    if not status:
        response = getattr(error, "response", None)
        status = getattr(response, "status_code", None)
    return status if isinstance(status, int) and status > 0 else None


def is_retryable_error(error: BaseException) -> bool:
    """429 and 5xx are retryable; status-less failures only when they look like transport problems."""
    status = _status_of(error)
    if status is not None:
        return status == 429 or 500 <= status < 600
    message = str(error).lower()
    return any(hint in message for hint in _TRANSPORT_HINTS)


class RetryPolicy:
    """
    Bounded exponential backoff around a no-argument coroutine factory.
    The delay before attempt k+1 is base_delay * 2**(k-1); no jitter.
    """

    def __init__(
        self,
        max_attempts: int = MAX_ATTEMPTS,
        base_delay: float = BASE_DELAY_SECONDS,
        is_retryable: Callable[[BaseException], bool] = is_retryable_error,
        sleep: Optional[Callable[[float], Awaitable[None]]] = None,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.is_retryable = is_retryable
        self._sleep = sleep or asyncio.sleep

    def backoff(self, attempt: int) -> float:
        return self.base_delay * (2 ** (attempt - 1))

    async def run(self, operation: Callable[[], Awaitable[T]]) -> T:
        attempt = 1
        while True:
            try:
                return await operation()
            except Exception as e:
                if attempt >= self.max_attempts or not self.is_retryable(e):
                    raise
                delay = self.backoff(attempt)
                logger.warning(f"Retry {attempt}/{self.max_attempts} in {delay:.1f}s: {e}")
                await self._sleep(delay)
                attempt += 1


async def with_retry(operation: Callable[[], Awaitable[T]]) -> T:
    """Runs operation under the default policy (3 attempts, 1s/2s backoff)."""
    return await RetryPolicy().run(operation)
