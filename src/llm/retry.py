"""
Retry policy for LLM provider calls.

Rate-limit (HTTP 429 or a provider rate-limit code) and server-side (5xx)
failures are retried with exponential back-off: after failed attempt N the
policy waits 2**N seconds. Anything else is raised immediately. Once the
attempts are used up the caller gets a category-specific error.
"""

from __future__ import annotations

import asyncio
import logging
import random
from typing import Any, Awaitable, Callable, Optional, TypeVar

from llm.errors import RateLimitExceededError, ServiceUnavailableError

logger = logging.getLogger(__name__)

T = TypeVar("T")

RATE_LIMIT_CODES = {"rate_limit_exceeded", "429", 429}


def _status_of(error: BaseException) -> Optional[int]:
    status = getattr(error, "status_code", None)
    if status is None:
        status = getattr(error, "status", None)
    return status if isinstance(status, int) else None


def is_rate_limit_error(error: BaseException) -> bool:
    if _status_of(error) == 429:
        return True
    if getattr(error, "code", None) in RATE_LIMIT_CODES:
        return True
    if _status_of(error) is not None:
        return False
    message = str(error).lower()
    return "429" in message or "rate limit" in message


def is_server_error(error: BaseException) -> bool:
    status = _status_of(error)
    return status is not None and 500 <= status < 600


def is_retryable(error: BaseException) -> bool:
    if is_rate_limit_error(error) or is_server_error(error):
        return True
    status = _status_of(error)
    if status is not None and 400 <= status < 500:
        return False
    # OpenRouter wraps upstream throttling in this message without a status.
    return "provider returned error" in str(error).lower()


def backoff_delay(attempt: int, jitter_s: float = 0.0) -> float:
    delay = float(2 ** attempt)
    if jitter_s > 0:
        delay += random.uniform(0, jitter_s)
    return delay


async def call_with_retry(
    operation: Callable[[], Awaitable[T]],
    max_attempts: int = 3,
    *,
    jitter_s: float = 0.0,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
) -> T:
    """Run ``operation`` until it succeeds, fails non-retryably, or attempts run out."""
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    last_error: Optional[Exception] = None
    for attempt in range(1, max_attempts + 1):
        try:
            return await operation()
        except Exception as e:
            last_error = e
            if not is_retryable(e) or attempt == max_attempts:
                break
            delay = backoff_delay(attempt, jitter_s)
            logger.warning(
                f"Retryable LLM error ({e}), retrying in {delay:.1f}s... (attempt {attempt}/{max_attempts})"
            )
            await sleep(delay)

    if not is_retryable(last_error):
        raise last_error

    logger.error(f"All {max_attempts} LLM attempts failed: {last_error}")
    if is_rate_limit_error(last_error):
        raise RateLimitExceededError() from last_error
    if is_server_error(last_error):
        raise ServiceUnavailableError() from last_error
    raise last_error
