"""Exponential backoff retry policy.

The policy is an immutable value; ``retry`` keeps its own start time and
attempt counter per call, so a policy can be shared freely between flushes.
"""

from __future__ import annotations

import random
import time
from collections.abc import Callable
from typing import TypeVar

from pydantic import BaseModel, ConfigDict, Field

from dogseries.exceptions import RetryableError, RetryExhaustedError
from dogseries.logger import logger

__all__ = ["BackoffPolicy", "retry"]

T = TypeVar("T")


class BackoffPolicy(BaseModel):
    """Exponential backoff schedule bounded by a total elapsed-time ceiling."""

    model_config = ConfigDict(frozen=True)

    initial_interval: float = Field(default=0.5, gt=0, description="Delay before the first retry in seconds")
    multiplier: float = Field(default=1.5, ge=1, description="Growth factor applied after each retry")
    randomization_factor: float = Field(default=0.5, ge=0, lt=1, description="Jitter as a fraction of the delay")
    max_interval: float = Field(default=60.0, gt=0, description="Upper bound of a single delay in seconds")
    max_elapsed_time: float = Field(default=10.0, ge=0, description="Give up after this many seconds, 0 retries forever")

    def delay(self, retry_count: int, rand: Callable[[], float] = random.random) -> float:
        """Calculate the randomized delay before retry ``retry_count`` (0-based).

        Args:
            retry_count: Number of retries so far
            rand: Source of uniform numbers in [0, 1)

        Returns:
            Delay in seconds before next retry
        """
        delay = min(self.initial_interval * (self.multiplier**retry_count), self.max_interval)
        jitter = delay * self.randomization_factor * (2 * rand() - 1)
        return delay + jitter


def retry(
    operation: Callable[[], T],
    policy: BackoffPolicy,
    *,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.monotonic,
) -> T:
    """Run operation until it succeeds or the policy's time budget is spent.

    Only RetryableError triggers another attempt; any other exception
    propagates immediately. No attempt is started once the next delay would
    cross ``policy.max_elapsed_time``.

    Args:
        operation: Zero-argument callable performing one attempt
        policy: Backoff schedule
        sleep: Called with each delay in seconds
        clock: Monotonic clock in seconds

    Returns:
        The operation's result

    Raises:
        RetryExhaustedError: If the budget ran out, chained to the last RetryableError
    """
    start = clock()
    attempts = 0
    while True:
        attempts += 1
        try:
            return operation()
        except RetryableError as e:
            delay = policy.delay(attempts - 1)
            elapsed = clock() - start
            if policy.max_elapsed_time and elapsed + delay > policy.max_elapsed_time:
                raise RetryExhaustedError(f"gave up after {attempts} attempts in {elapsed:.1f}s: {e}", attempts) from e
            logger.debug(f"Attempt {attempts} failed: {e}. Retrying in {delay:.2f}s")
            sleep(delay)
