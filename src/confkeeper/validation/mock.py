"""
confkeeper.validation.mock - Mock Validator for Testing
=========================================================

A validator with deterministic, scriptable verdicts. It never touches the
filesystem or spawns processes, so store tests stay fast and hermetic.

Verdict Resolution (per validate() call):
    1. If a verdict is queued, pop and use it.
    2. Else if ``reject_containing`` appears in the content, reject.
    3. Else accept with ``default_diagnostics``.

Usage:
    >>> validator = MockValidator()
    >>> validator.queue_rejection("syntax error at line 3")
    >>> await validator.validate("anything")      # raises ValidationError
    >>> await validator.validate("anything")      # accepted
    >>> validator.call_count
    2
"""

from __future__ import annotations

from collections import deque
from typing import NoReturn, Optional

from confkeeper.core.exceptions import ValidationError
from confkeeper.validation.base import Validator


class MockValidator(Validator):
    """Scriptable validator for tests.

    Attributes:
        reject_containing: Content containing this marker is rejected.
        default_diagnostics: Diagnostics returned for accepted content.
    """

    name = "mock"

    def __init__(
        self,
        reject_containing: Optional[str] = None,
        default_diagnostics: str = "SUCCESS",
    ) -> None:
        self.reject_containing = reject_containing
        self.default_diagnostics = default_diagnostics
        self._queue: deque[Optional[str]] = deque()
        self._calls: list[str] = []

    @property
    def calls(self) -> list[str]:
        """Contents passed to validate(), oldest first."""
        return list(self._calls)

    @property
    def call_count(self) -> int:
        return len(self._calls)

    def queue_acceptance(self) -> None:
        """Accept the next call regardless of content."""
        self._queue.append(None)

    def queue_rejection(self, diagnostics: str) -> None:
        """Reject the next call with ``diagnostics``."""
        self._queue.append(diagnostics)

    async def validate(self, content: str) -> str:
        self._calls.append(content)

        if self._queue:
            diagnostics = self._queue.popleft()
            if diagnostics is None:
                return self.default_diagnostics
            self._reject(diagnostics)

        if self.reject_containing and self.reject_containing in content:
            self._reject(f"content contains {self.reject_containing!r}")

        return self.default_diagnostics

    def _reject(self, diagnostics: str) -> NoReturn:
        raise ValidationError(
            message="Mock validator rejected the content",
            diagnostics=diagnostics,
        )
