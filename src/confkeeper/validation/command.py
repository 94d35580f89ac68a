"""
confkeeper.validation.command - External Tool Validator
=========================================================

Runs a checker binary against the candidate content:

    promtool check rules  <tmpfile>
    promtool check config <tmpfile>
    amtool   check-config <tmpfile>

The content is written to a temporary file, the tool runs with stdout and
stderr merged, and the temporary file is removed afterwards. A zero exit
status accepts the content; anything else rejects it with the tool's output
as diagnostics.

Blocking:
    With ``timeout_seconds=None`` a hung tool blocks the calling request
    indefinitely. Set a timeout in ValidatorConfig to bound it; on expiry the
    process is killed and the content is rejected.
"""

from __future__ import annotations

import asyncio
import os
import tempfile
from typing import Optional, Sequence

import structlog

from confkeeper.core.exceptions import ValidationError
from confkeeper.validation.base import Validator


logger = structlog.get_logger()

PATH_PLACEHOLDER = "{path}"


class CommandValidator(Validator):
    """Validate content by running an external command on a temp file.

    Attributes:
        executable: Path of the checker binary.
        arguments: Argument list; ``{path}`` is replaced with the temp file
            path (appended at the end when absent).
        timeout_seconds: Optional limit on the tool run.

    Example:
        >>> validator = CommandValidator("/opt/tools/bin/promtool", ["check", "rules"])
        >>> output = await validator.validate(rules_body)
    """

    def __init__(
        self,
        executable: str,
        arguments: Sequence[str] = (),
        *,
        name: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
        suffix: str = ".yml",
    ) -> None:
        self.executable = executable
        self.arguments = list(arguments)
        self.timeout_seconds = timeout_seconds
        self.suffix = suffix
        self.name = name or os.path.basename(executable)
        self._logger = logger.bind(component="command_validator", tool=self.name)

    def build_command(self, path: str) -> list[str]:
        """Return the full argv for checking the file at ``path``."""
        if PATH_PLACEHOLDER in self.arguments:
            args = [path if arg == PATH_PLACEHOLDER else arg for arg in self.arguments]
        else:
            args = [*self.arguments, path]
        return [self.executable, *args]

    async def validate(self, content: str) -> str:
        handle, path = tempfile.mkstemp(prefix="confkeeper-", suffix=self.suffix)
        try:
            with os.fdopen(handle, "w", encoding="utf-8") as f:
                f.write(content)
            self._logger.debug("validator_input_written", path=path, size=len(content))
            return await self._run(self.build_command(path))
        finally:
            os.remove(path)

    async def _run(self, command: list[str]) -> str:
        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
            )
        except OSError as exc:
            self._logger.error("validator_unavailable", command=command[0], error=str(exc))
            raise ValidationError(
                message=f"Unable to run {self.name}: {exc}",
                error_code="VALIDATOR_UNAVAILABLE",
                details={"command": command},
            ) from exc

        try:
            stdout, _ = await asyncio.wait_for(
                process.communicate(), timeout=self.timeout_seconds
            )
        except asyncio.TimeoutError as exc:
            process.kill()
            await process.wait()
            self._logger.error("validator_timed_out", timeout=self.timeout_seconds)
            raise ValidationError(
                message=f"{self.name} did not finish within {self.timeout_seconds}s",
                error_code="VALIDATOR_TIMEOUT",
                details={"command": command},
            ) from exc

        output = stdout.decode("utf-8", errors="replace")
        if process.returncode != 0:
            self._logger.debug(
                "validator_rejected",
                returncode=process.returncode,
                output=output,
            )
            raise ValidationError(
                message=f"Failed to validate with {self.name}: exit status {process.returncode}",
                diagnostics=output,
                details={"returncode": process.returncode},
            )
        self._logger.debug("validator_accepted", output=output)
        return output
