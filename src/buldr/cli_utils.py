"""CLI utility functions for buldr.

This module provides common utilities used across CLI commands including:
- Exit codes
- Logging setup
- Error handling and formatting
"""

import logging
import sys
from enum import IntEnum

from buldr.build import CyclicDependencyError, MissingSourceError, ToolInvocationError
from buldr.config import ConfigError

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class ExitCode(IntEnum):
    """Process exit codes."""

    SUCCESS = 0
    ERROR = 1
    CONFIG_ERROR = 2
    CYCLE_ERROR = 3
    TOOL_ERROR = 4
    INTERRUPTED = 130  # Standard exit code for SIGINT


def configure_logging(verbose: bool = False) -> None:
    """Configure the root logger for CLI use.

    Args:
        verbose: Log DEBUG and above when True, otherwise WARNING and above
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
        stream=sys.stderr,
        force=True,
    )


class ErrorFormatter:
    """Formats and displays error messages with ANSI color codes."""

    # ANSI color codes
    RED = "\033[1;31m"
    GREEN = "\033[1;32m"
    YELLOW = "\033[1;33m"
    RESET = "\033[0m"

    @staticmethod
    def print_error(title: str, message: str) -> None:
        """Print formatted error message.

        Args:
            title: Error title (e.g., "Configuration error", "Build failed")
            message: Error message details
        """
        print()
        print(f"{ErrorFormatter.RED}✗ {title}{ErrorFormatter.RESET}")
        print()
        print(message)
        print()

    @staticmethod
    def print_success(message: str) -> None:
        """Print formatted success message.

        Args:
            message: Success message
        """
        print()
        print(f"{ErrorFormatter.GREEN}✓ {message}{ErrorFormatter.RESET}")

    @staticmethod
    def print_warning(message: str) -> None:
        """Print formatted warning message.

        Args:
            message: Warning message
        """
        print()
        print(f"{ErrorFormatter.YELLOW}✗ {message}{ErrorFormatter.RESET}")

    @staticmethod
    def handle_build_error(error: Exception, verbose: bool = False) -> None:
        """Report a build error and exit with its exit code.

        Args:
            error: The exception to handle
            verbose: Whether to print a traceback for unexpected errors
        """
        if isinstance(error, CyclicDependencyError):
            ErrorFormatter.print_error("Cyclic dependency", str(error))
            sys.exit(ExitCode.CYCLE_ERROR)
        if isinstance(error, (ConfigError, MissingSourceError)):
            ErrorFormatter.print_error("Configuration error", str(error))
            sys.exit(ExitCode.CONFIG_ERROR)
        if isinstance(error, ToolInvocationError):
            ErrorFormatter.print_error("Build failed!", str(error))
            sys.exit(ExitCode.TOOL_ERROR)
        ErrorFormatter.handle_unexpected_error(error, verbose)

    @staticmethod
    def handle_keyboard_interrupt() -> None:
        """Handle KeyboardInterrupt with standard formatting."""
        ErrorFormatter.print_warning("Build interrupted")
        sys.exit(ExitCode.INTERRUPTED)

    @staticmethod
    def handle_unexpected_error(error: Exception, verbose: bool = False) -> None:
        """Handle unexpected errors with standard formatting.

        Args:
            error: The exception to handle
            verbose: Whether to print traceback
        """
        message = f"{type(error).__name__}: {error}"
        ErrorFormatter.print_error("Unexpected error", message)

        if verbose:
            import traceback

            print("Traceback:")
            print(traceback.format_exc())

        sys.exit(ExitCode.ERROR)
