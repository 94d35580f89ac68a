"""
confkeeper.validation.chain - Sequential Validator Chain
"""

from __future__ import annotations

from typing import Sequence

from confkeeper.validation.base import Validator


class ChainValidator(Validator):
    """Run validators in order; the first rejection wins.

    Cheap structural checks go first so an obviously broken body never
    reaches an external tool. Diagnostics of accepting validators are joined
    with newlines.
    """

    name = "chain"

    def __init__(self, validators: Sequence[Validator]) -> None:
        self.validators = list(validators)

    async def validate(self, content: str) -> str:
        outputs = []
        for validator in self.validators:
            output = await validator.validate(content)
            if output:
                outputs.append(output)
        return "\n".join(outputs)
