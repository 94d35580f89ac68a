"""
confkeeper.orchestration.retry - Bounded Exponential Backoff
==============================================================

Generic helper for polling external systems that need time to settle (an
HTTP endpoint coming up after a config reload, for instance).

Schedule:
    A BackoffSchedule describes at most ``steps`` attempts. Between attempts
    the helper sleeps, starting at ``duration`` and multiplying by ``factor``
    after each sleep, optionally capped at ``cap``:

        attempt 1 ── sleep 3s ── attempt 2 ── sleep 6s ── attempt 3 ── ...

    ``jitter`` adds up to ``jitter * delay`` of random extra wait.

Error Policy:
    An exception raised by the condition does NOT stop the loop. Transient
    failures (connection refused while a server restarts) are expected, so
    the exception is recorded and the next attempt goes ahead. When the
    schedule runs out:

        - the last recorded exception is raised, if there was one
        - otherwise RetryTimeoutError is raised

Usage:
    >>> schedule = BackoffSchedule(duration=0.5, factor=2.0, steps=5)
    >>> await retry(schedule, lambda: server.is_ready())
"""

from __future__ import annotations

import asyncio
import inspect
import random
from typing import Awaitable, Callable, Iterator, Optional, Union

import structlog
from pydantic import BaseModel, Field

from confkeeper.core.exceptions import RetryTimeoutError


logger = structlog.get_logger()

Condition = Callable[[], Union[bool, Awaitable[bool]]]


# =============================================================================
# BackoffSchedule
# =============================================================================
class BackoffSchedule(BaseModel):
    """Exponential backoff schedule.

    Attributes:
        duration: First delay in seconds.
        factor: Multiplier applied to the delay after each sleep.
        jitter: Fraction of the delay added as random extra wait (0 = none).
        steps: Maximum number of condition attempts.
        cap: Upper bound on any single delay (None = unbounded).
    """

    duration: float = Field(default=1.0, ge=0)
    factor: float = Field(default=2.0, ge=1.0)
    jitter: float = Field(default=0.0, ge=0)
    steps: int = Field(default=5, ge=1)
    cap: Optional[float] = Field(default=None, gt=0)

    def delays(self) -> Iterator[float]:
        """Yield the sleeps taken between consecutive attempts (steps - 1 of them)."""
        current = self.duration
        for _ in range(self.steps - 1):
            delay = current
            if self.jitter > 0:
                delay += random.uniform(0, delay * self.jitter)
            yield delay
            current = current * self.factor
            if self.cap is not None:
                current = min(current, self.cap)


# Schedule used when waiting for an HTTP endpoint to come back after a
# reload: 10 attempts, 3s initial delay, doubling each time.
ENDPOINT_BACKOFF_SCHEDULE = BackoffSchedule(duration=3.0, factor=2.0, jitter=0.0, steps=10)


# =============================================================================
# retry()
# =============================================================================
async def retry(schedule: BackoffSchedule, condition: Condition) -> None:
    """Run ``condition`` until it returns True or the schedule is exhausted.

    Args:
        schedule: How many attempts and how long to wait between them.
        condition: Sync or async callable returning True when done.
            Exceptions it raises are recorded and retried.

    Raises:
        Exception: The last exception raised by ``condition``, when the
            schedule ran out and at least one attempt raised.
        RetryTimeoutError: The schedule ran out and no attempt raised.
    """
    last_error: Optional[BaseException] = None
    delays = schedule.delays()
    attempts = 0

    while True:
        attempts += 1
        try:
            result = condition()
            if inspect.isawaitable(result):
                result = await result
            if result:
                return
        except Exception as exc:
            last_error = exc
            logger.debug(
                "retry_condition_failed",
                attempt=attempts,
                error=str(exc),
            )

        delay = next(delays, None)
        if delay is None:
            break
        await asyncio.sleep(delay)

    if last_error is not None:
        raise last_error
    raise RetryTimeoutError(
        message=f"Condition not met after {attempts} attempts",
        attempts=attempts,
    )
