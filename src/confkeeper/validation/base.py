"""
confkeeper.validation.base - Validator Interface
==================================================

A validator decides whether new artifact content may be committed. It is
the gate of the put protocol: nothing reaches the backend until the
validator has accepted the content.

Contract:
    validate(content) -> diagnostics     accepted; diagnostics may be ""
    validate(content) raises             rejected; ValidationError carries
        ValidationError                  the diagnostics for the caller

Implementations:
    - structural.py:  YAML shape checks (rules files, prometheus.yml)
    - command.py:     external checker binaries (promtool, amtool)
    - chain.py:       run several validators in order
    - mock.py:        deterministic verdicts for tests
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class Validator(ABC):
    """Abstract interface for artifact content validators."""

    name: str = "validator"

    @abstractmethod
    async def validate(self, content: str) -> str:
        """Check ``content``.

        Args:
            content: The raw artifact body.

        Returns:
            Diagnostic output (possibly empty) for accepted content.

        Raises:
            ValidationError: If the content is rejected.
        """


class AcceptAllValidator(Validator):
    """Validator that accepts every input. Used for unvalidated groups."""

    name = "accept_all"

    async def validate(self, content: str) -> str:
        return ""
