"""Unit tests for CLI utilities including ErrorFormatter."""

import logging

import pytest

from buldr.build import (
    CyclicDependencyError,
    MissingSourceError,
    ToolInvocationError,
    UnknownProjectError,
)
from buldr.cli_utils import ErrorFormatter, ExitCode, configure_logging
from buldr.config import ConfigError


def exit_code_for(error):
    with pytest.raises(SystemExit) as exc_info:
        ErrorFormatter.handle_build_error(error)
    return exc_info.value.code


class TestErrorFormatter:
    """Tests for ErrorFormatter class."""

    def test_config_error(self, capsys):
        assert exit_code_for(ConfigError("bad kind")) == ExitCode.CONFIG_ERROR

        out = capsys.readouterr().out
        assert "Configuration error" in out
        assert "bad kind" in out

    def test_unknown_project_is_a_config_error(self):
        assert exit_code_for(UnknownProjectError("ghost", ["app"])) == ExitCode.CONFIG_ERROR

    def test_missing_source(self, tmp_path):
        error = MissingSourceError("app", tmp_path / "src")

        assert exit_code_for(error) == ExitCode.CONFIG_ERROR

    def test_cycle(self, capsys):
        assert exit_code_for(CyclicDependencyError(["A", "B", "A"])) == ExitCode.CYCLE_ERROR

        assert "A -> B -> A" in capsys.readouterr().out

    def test_tool_failure(self, capsys):
        error = ToolInvocationError("linker", ["ld", "-o", "app"], 1, "undefined reference to `foo'")

        assert exit_code_for(error) == ExitCode.TOOL_ERROR

        out = capsys.readouterr().out
        assert "Build failed!" in out
        assert "undefined reference" in out

    def test_unexpected_error(self, capsys):
        assert exit_code_for(RuntimeError("kaboom")) == ExitCode.ERROR

        assert "RuntimeError: kaboom" in capsys.readouterr().out

    def test_keyboard_interrupt(self):
        with pytest.raises(SystemExit) as exc_info:
            ErrorFormatter.handle_keyboard_interrupt()

        assert exc_info.value.code == ExitCode.INTERRUPTED

    def test_print_success(self, capsys):
        ErrorFormatter.print_success("Done")

        assert "✓ Done" in capsys.readouterr().out


class TestConfigureLogging:
    """Tests for logging setup."""

    def test_verbose(self):
        configure_logging(verbose=True)

        assert logging.getLogger().level == logging.DEBUG

    def test_quiet(self):
        configure_logging(verbose=False)

        assert logging.getLogger().level == logging.WARNING
