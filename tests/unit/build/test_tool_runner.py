"""Tests for tool invocation."""

import subprocess
from unittest.mock import patch

import pytest

from buldr.build import SubprocessToolRunner, ToolInvocationError, ToolResult


class TestToolResult:
    """Test ToolResult helpers."""

    def test_success(self):
        assert ToolResult(returncode=0).success is True
        assert ToolResult(returncode=2).success is False

    def test_output_combines_streams(self):
        result = ToolResult(returncode=1, stdout="note\n", stderr="error: bad\n")

        assert result.output == "error: bad\nnote"


class TestSubprocessToolRunner:
    """Test the subprocess-backed runner."""

    def test_run_captures_output(self, tmp_path):
        completed = subprocess.CompletedProcess(
            args=["cc"], returncode=1, stdout="out", stderr="main.c:1: error"
        )
        with patch("buldr.build.tool_runner.subprocess.run", return_value=completed) as mock_run:
            result = SubprocessToolRunner().run(["cc", "-c", "main.c"], cwd=tmp_path)

        assert result == ToolResult(returncode=1, stdout="out", stderr="main.c:1: error")
        assert mock_run.call_args.args[0] == ["cc", "-c", "main.c"]
        assert mock_run.call_args.kwargs["cwd"] == str(tmp_path)
        assert mock_run.call_args.kwargs["capture_output"] is True

    def test_check_raises_with_arguments_and_diagnostics(self):
        completed = subprocess.CompletedProcess(
            args=["cc"], returncode=1, stdout="", stderr="main.c:1: error: expected ';'"
        )
        with patch("buldr.build.tool_runner.subprocess.run", return_value=completed):
            with pytest.raises(ToolInvocationError) as exc_info:
                SubprocessToolRunner().check("compiler", ["cc", "-c", "main.c"])

        error = exc_info.value
        assert error.tool == "compiler"
        assert error.command == ["cc", "-c", "main.c"]
        assert error.returncode == 1
        assert "expected ';'" in error.output
        assert "cc -c main.c" in str(error)

    def test_missing_executable(self):
        with patch(
            "buldr.build.tool_runner.subprocess.run",
            side_effect=FileNotFoundError("no such file: cc"),
        ):
            with pytest.raises(ToolInvocationError, match="Executable not found"):
                SubprocessToolRunner().run(["cc"])

    def test_timeout(self):
        with patch(
            "buldr.build.tool_runner.subprocess.run",
            side_effect=subprocess.TimeoutExpired(cmd="cc", timeout=5),
        ):
            with pytest.raises(ToolInvocationError, match="Timed out"):
                SubprocessToolRunner(timeout=5).run(["cc"])
