"""Tool Runner.

This module runs the compiler, linker and archiver.

Design:
    - ToolRunner is the seam the orchestrator talks to: an argument list in,
      exit status and captured output out
    - SubprocessToolRunner wraps subprocess.run
    - ToolInvocationError carries the exact arguments and diagnostics of a
      failed invocation
"""

import logging
import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

logger = logging.getLogger(__name__)


@dataclass
class ToolResult:
    """Result of a tool invocation."""

    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def success(self) -> bool:
        return self.returncode == 0

    @property
    def output(self) -> str:
        """Combined diagnostic output (stderr first)."""
        return "\n".join(part for part in (self.stderr.strip(), self.stdout.strip()) if part)


class ToolInvocationError(Exception):
    """Raised when the compiler, linker or archiver fails."""

    def __init__(self, tool: str, args: Sequence[str], returncode: int, output: str):
        self.tool = tool
        self.command = list(args)
        self.returncode = returncode
        self.output = output
        message = f"{tool} failed with exit code {returncode}\n"
        message += f"command: {' '.join(self.command)}"
        if output:
            message += f"\n{output}"
        super().__init__(message)


class ToolRunner(ABC):
    """Runs an external build tool."""

    @abstractmethod
    def run(self, args: Sequence[str], cwd: Optional[Path] = None) -> ToolResult:
        """
        Run a tool and wait for it to finish.

        Args:
            args: Full argument list, executable first
            cwd: Working directory

        Returns:
            ToolResult with exit status and captured output
        """

    def check(self, tool: str, args: Sequence[str], cwd: Optional[Path] = None) -> ToolResult:
        """
        Run a tool and raise on a non-zero exit.

        Args:
            tool: Role of the tool for messages ("compiler", "linker", "archiver")
            args: Full argument list
            cwd: Working directory

        Returns:
            ToolResult of the successful invocation

        Raises:
            ToolInvocationError: If the tool exits non-zero
        """
        logger.debug("Running %s: %s", tool, " ".join(args))
        result = self.run(args, cwd=cwd)
        if not result.success:
            raise ToolInvocationError(tool, args, result.returncode, result.output)
        return result


class SubprocessToolRunner(ToolRunner):
    """ToolRunner backed by subprocess.run."""

    def __init__(self, timeout: Optional[float] = None):
        """
        Initialize runner.

        Args:
            timeout: Optional per-invocation timeout in seconds
        """
        self.timeout = timeout

    def run(self, args: Sequence[str], cwd: Optional[Path] = None) -> ToolResult:
        try:
            result = subprocess.run(
                list(args),
                cwd=str(cwd) if cwd else None,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except FileNotFoundError as e:
            raise ToolInvocationError(args[0], args, 127, f"Executable not found: {e}") from e
        except subprocess.TimeoutExpired as e:
            raise ToolInvocationError(
                args[0], args, -1, f"Timed out after {self.timeout}s"
            ) from e

        return ToolResult(
            returncode=result.returncode,
            stdout=result.stdout or "",
            stderr=result.stderr or "",
        )
