"""
Tests for confkeeper.orchestration.retry
==========================================

What's Being Tested:
    - BackoffSchedule delay sequence (factor, cap, jitter bounds)
    - retry() success, exhaustion, and the last-error policy
    - Sync and async conditions
"""

import pytest
from pydantic import ValidationError as PydanticValidationError

from confkeeper.core.exceptions import RetryTimeoutError
from confkeeper.orchestration.retry import (
    ENDPOINT_BACKOFF_SCHEDULE,
    BackoffSchedule,
    retry,
)

FAST = BackoffSchedule(duration=0.001, factor=2.0, steps=4)


# =============================================================================
# Tests: BackoffSchedule
# =============================================================================
class TestBackoffSchedule:
    def test_delays_grow_by_factor(self) -> None:
        schedule = BackoffSchedule(duration=1.0, factor=2.0, steps=5)
        assert list(schedule.delays()) == [1.0, 2.0, 4.0, 8.0]

    def test_cap_limits_delay(self) -> None:
        schedule = BackoffSchedule(duration=1.0, factor=3.0, steps=5, cap=5.0)
        assert list(schedule.delays()) == [1.0, 3.0, 5.0, 5.0]

    def test_single_step_never_sleeps(self) -> None:
        assert list(BackoffSchedule(steps=1).delays()) == []

    def test_jitter_stays_in_bounds(self) -> None:
        schedule = BackoffSchedule(duration=1.0, factor=1.0, jitter=0.5, steps=50)
        for delay in schedule.delays():
            assert 1.0 <= delay <= 1.5

    def test_endpoint_schedule(self) -> None:
        delays = list(ENDPOINT_BACKOFF_SCHEDULE.delays())
        assert len(delays) == 9
        assert delays[:3] == [3.0, 6.0, 12.0]

    def test_invalid_values_rejected(self) -> None:
        with pytest.raises(PydanticValidationError):
            BackoffSchedule(steps=0)
        with pytest.raises(PydanticValidationError):
            BackoffSchedule(factor=0.5)


# =============================================================================
# Tests: retry()
# =============================================================================
class TestRetry:
    async def test_returns_on_first_success(self) -> None:
        calls = []

        def condition() -> bool:
            calls.append(1)
            return True

        await retry(FAST, condition)
        assert len(calls) == 1

    async def test_async_condition(self) -> None:
        attempts = []

        async def condition() -> bool:
            attempts.append(1)
            return len(attempts) == 3

        await retry(FAST, condition)
        assert len(attempts) == 3

    async def test_exhaustion_without_error(self) -> None:
        with pytest.raises(RetryTimeoutError) as exc_info:
            await retry(FAST, lambda: False)
        assert exc_info.value.attempts == 4

    async def test_errors_are_retried(self) -> None:
        attempts = []

        def condition() -> bool:
            attempts.append(1)
            if len(attempts) < 3:
                raise ConnectionError("refused")
            return True

        await retry(FAST, condition)
        assert len(attempts) == 3

    async def test_last_error_raised_on_exhaustion(self) -> None:
        attempts = []

        def condition() -> bool:
            attempts.append(1)
            raise ConnectionError(f"refused #{len(attempts)}")

        with pytest.raises(ConnectionError, match="refused #4"):
            await retry(FAST, condition)

    async def test_earlier_error_wins_over_later_false(self) -> None:
        """A recorded error is surfaced even if later attempts just return False."""
        attempts = []

        def condition() -> bool:
            attempts.append(1)
            if len(attempts) == 1:
                raise ConnectionError("refused")
            return False

        with pytest.raises(ConnectionError):
            await retry(FAST, condition)
