"""
confkeeper.orchestration - Retry Helpers
==========================================

    - BackoffSchedule:            exponential backoff description
    - ENDPOINT_BACKOFF_SCHEDULE:  10 attempts from 3s, doubling
    - retry():                    run a condition until it holds or the
                                  schedule runs out

Usage:
    from confkeeper.orchestration import BackoffSchedule, retry
"""

from confkeeper.orchestration.retry import (
    ENDPOINT_BACKOFF_SCHEDULE,
    BackoffSchedule,
    retry,
)

__all__ = ["BackoffSchedule", "ENDPOINT_BACKOFF_SCHEDULE", "retry"]
