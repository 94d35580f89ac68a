"""
Tests for confkeeper.validation.command
=========================================

CommandValidator is exercised with /bin/sh scripts standing in for promtool
and amtool. The script receives the temp file path as $0.
"""

import os

import pytest

from confkeeper.core.exceptions import ValidationError
from confkeeper.validation.command import CommandValidator

SH = "/bin/sh"

pytestmark = pytest.mark.skipif(not os.path.exists(SH), reason="requires /bin/sh")


def _shell(script: str, **kwargs) -> CommandValidator:
    return CommandValidator(SH, ["-c", script, "{path}"], name="fake-tool", **kwargs)


class TestBuildCommand:
    def test_path_appended_without_placeholder(self) -> None:
        validator = CommandValidator("/opt/tools/bin/promtool", ["check", "rules"])
        assert validator.build_command("/tmp/x.yml") == [
            "/opt/tools/bin/promtool", "check", "rules", "/tmp/x.yml",
        ]

    def test_placeholder_replaced(self) -> None:
        validator = CommandValidator("/bin/tool", ["--file", "{path}", "--strict"])
        assert validator.build_command("/tmp/x.yml") == [
            "/bin/tool", "--file", "/tmp/x.yml", "--strict",
        ]

    def test_name_defaults_to_executable(self) -> None:
        assert CommandValidator("/opt/tools/bin/amtool").name == "amtool"


class TestCommandValidator:
    async def test_zero_exit_accepts_and_returns_output(self) -> None:
        output = await _shell('cat "$0"').validate("groups: []\n")
        assert output == "groups: []\n"

    async def test_temp_file_removed(self) -> None:
        output = await _shell('echo "$0"').validate("x")
        path = output.strip()
        assert path.endswith(".yml")
        assert not os.path.exists(path)

    async def test_nonzero_exit_rejects_with_combined_output(self) -> None:
        validator = _shell('echo "checking"; echo "FAILED: bad rule" >&2; exit 1')
        with pytest.raises(ValidationError) as exc_info:
            await validator.validate("groups: []")

        exc = exc_info.value
        assert exc.error_code == "VALIDATION_FAILED"
        assert "checking" in exc.diagnostics
        assert "FAILED: bad rule" in exc.diagnostics
        assert exc.details["returncode"] == 1

    async def test_missing_binary(self) -> None:
        validator = CommandValidator("/nonexistent/promtool", ["check", "rules"])
        with pytest.raises(ValidationError) as exc_info:
            await validator.validate("groups: []")
        assert exc_info.value.error_code == "VALIDATOR_UNAVAILABLE"

    async def test_timeout_kills_tool(self) -> None:
        validator = _shell("sleep 5", timeout_seconds=0.2)
        with pytest.raises(ValidationError) as exc_info:
            await validator.validate("x")
        assert exc_info.value.error_code == "VALIDATOR_TIMEOUT"
