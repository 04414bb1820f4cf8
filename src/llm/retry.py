# src/llm/retry.py — v2
"""Retry policy with per-error-kind backoff.

- rate limited: exponential, ``base * 2 ** (attempt - 1)``
- invalid credentials / invalid request: no retry
- anything else: linear, ``base * attempt``

After the last attempt the original exception is re-raised unchanged so
callers can classify it.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable

from clipenhancer.llm.errors import ErrorKind, classify_error

logger = logging.getLogger(__name__)

SleepFn = Callable[[float], Awaitable[Any]]


@dataclass(frozen=True)
class RetryPolicy:
    """Attempt budget and backoff shape."""

    max_attempts: int = 3
    base_delay_s: float = 1.0
    non_retryable: frozenset[ErrorKind] = field(
        default_factory=lambda: frozenset({ErrorKind.INVALID_CREDENTIALS, ErrorKind.INVALID_REQUEST})
    )
    exponential: frozenset[ErrorKind] = field(
        default_factory=lambda: frozenset({ErrorKind.RATE_LIMITED})
    )

    def delay_for(self, kind: ErrorKind, attempt: int) -> float:
        """Delay before the attempt following ``attempt`` (1-based)."""
        if kind in self.exponential:
            return self.base_delay_s * (2 ** (attempt - 1))
        return self.base_delay_s * attempt

    def should_retry(self, kind: ErrorKind, attempt: int) -> bool:
        return kind not in self.non_retryable and attempt < self.max_attempts


DEFAULT_RETRY_POLICY = RetryPolicy()


async def with_retry(
    fn: Callable[..., Awaitable[Any]],
    *args: Any,
    policy: RetryPolicy | None = None,
    sleep: SleepFn = asyncio.sleep,
    label: str = "completion",
    **kwargs: Any,
) -> Any:
    """Execute an async function under ``policy``.

    Raises:
        Exception: The last error once retries are exhausted, or the first
            non-retryable error.
    """
    policy = policy or DEFAULT_RETRY_POLICY
    attempt = 0

    while True:
        attempt += 1
        try:
            return await fn(*args, **kwargs)
        except Exception as e:
            kind = classify_error(e)
            if not policy.should_retry(kind, attempt):
                logger.warning(
                    "%s failed (%s) on attempt %d/%d, giving up",
                    label, kind.value, attempt, policy.max_attempts,
                )
                raise

            delay = policy.delay_for(kind, attempt)
            logger.warning(
                "%s failed (%s) on attempt %d/%d, retrying in %.1fs",
                label, kind.value, attempt, policy.max_attempts, delay,
            )
            await sleep(delay)
