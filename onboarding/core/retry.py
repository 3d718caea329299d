"""Retry Executor — bounded linear-backoff retry shared by every repository operation.

Invariants:
    - max_attempts counts the initial attempt: default 4 = initial + 3 retries
    - Delay before retry k (1-indexed) is backoff(k); linear default gives 1s, 2s, 3s
    - Non-retryable failures are re-raised immediately, on the first occurrence
    - After exhaustion the LAST failure is re-raised unchanged; the repository wraps it
    - asyncio.CancelledError is never caught: cancelling the caller aborts a pending wait

Design Decisions:
    - One reusable policy instead of per-call ad hoc loops: consistent behavior and an
      independently testable backoff schedule
    - sleep injected (default asyncio.sleep): tests observe delays without waiting
    - Default predicate retries everything except malformed-input failures, which a
      retry cannot fix
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import TypeVar

from onboarding.core.errors import (
    CALLER_INPUT_ERRORS, BlobStoreError, DeserializationError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

Sleep = Callable[[float], Awaitable[None]]

# Malformed payloads and rejected input: retrying cannot change the outcome
_NON_RETRYABLE = (DeserializationError, *CALLER_INPUT_ERRORS)


def linear_backoff(retry_number: int, base_delay_seconds: float = 1.0) -> float:
    """Delay before the given retry (1-indexed): k * base."""
    return retry_number * base_delay_seconds


def is_transient(exc: BaseException) -> bool:
    """Default retry predicate — True unless the failure is known to be permanent."""
    if isinstance(exc, BlobStoreError):
        return exc.transient
    return not isinstance(exc, _NON_RETRYABLE)


@dataclass(frozen=True)
class RetryPolicy:
    """Parameters for RetryExecutor: attempt bound, backoff function, retry predicate."""
    max_attempts: int = 4
    backoff: Callable[[int], float] = linear_backoff
    is_retryable: Callable[[BaseException], bool] = field(default=is_transient)

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

    @classmethod
    def linear(
        cls, max_retries: int = 3, base_delay_seconds: float = 1.0,
    ) -> "RetryPolicy":
        """Build a policy from a retry count (excluding the initial attempt)."""
        return cls(
            max_attempts=max_retries + 1,
            backoff=lambda k: linear_backoff(k, base_delay_seconds),
        )

    def delays(self) -> list[float]:
        """Full backoff schedule for an always-failing operation."""
        return [self.backoff(k) for k in range(1, self.max_attempts)]


class RetryExecutor:
    """Runs a zero-argument async operation under a RetryPolicy."""

    def __init__(self, policy: RetryPolicy | None = None, sleep: Sleep | None = None):
        self.policy = policy or RetryPolicy()
        self._sleep = sleep or asyncio.sleep

    async def run(self, operation: Callable[[], Awaitable[T]]) -> T:
        """Attempt `operation`, retrying transient failures per policy."""
        attempt = 1
        while True:
            try:
                return await operation()
            except Exception as e:
                if not self.policy.is_retryable(e):
                    logger.debug(
                        f"Non-retryable failure on attempt {attempt}: {e}",
                        extra={"attempt": attempt},
                    )
                    raise
                if attempt >= self.policy.max_attempts:
                    logger.error(
                        f"Giving up after {attempt} attempts: {e}",
                        extra={"attempt": attempt},
                    )
                    raise
                delay = self.policy.backoff(attempt)
                logger.warning(
                    f"Transient failure, retry after {delay}s: {e}",
                    extra={"attempt": attempt, "delay_seconds": delay},
                )
            await self._sleep(delay)
            attempt += 1


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    policy: RetryPolicy | None = None,
    sleep: Sleep | None = None,
) -> T:
    """Convenience wrapper: run `operation` once under a fresh executor."""
    return await RetryExecutor(policy, sleep).run(operation)
