"""
Command-line interface for buldr.

This module provides the `buldr` CLI tool:
    buldr                     # Build every default project
    buldr <project>           # Build a project and its dependencies
    buldr clean               # Remove object and binary directories
    buldr compile_commands    # Write compile_commands.json
"""

import argparse
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from buldr import __version__
from buldr.build import (
    COMPILE_COMMANDS_FILENAME,
    BuildContext,
    BuildOrchestrator,
    Cleaner,
    CompileCommandsExporter,
)
from buldr.cli_utils import ErrorFormatter, ExitCode, configure_logging
from buldr.config import MANIFEST_FILENAME, ManifestLoader

CLEAN_COMMAND = "clean"
COMPILE_COMMANDS_COMMAND = "compile_commands"


@dataclass
class BuildArgs:
    """Arguments for the build command."""

    manifest: Path
    target: Optional[str] = None
    jobs: int = 1
    verbose: bool = False


@dataclass
class CleanArgs:
    """Arguments for the clean command."""

    manifest: Path
    verbose: bool = False


@dataclass
class CompileCommandsArgs:
    """Arguments for the compile_commands command."""

    manifest: Path
    output: Path
    verbose: bool = False


def build_command(args: BuildArgs) -> None:
    """Build a project and its dependencies, or every default project.

    Examples:
        buldr                 # Build default projects
        buldr app             # Build 'app' and what it depends on
        buldr -j 8 app        # Compile up to 8 sources of a project at once
    """
    print(f"buldr v{__version__}")
    print()

    try:
        loader = ManifestLoader(args.manifest)
        context = BuildContext.create(loader.load(), loader.root)
        orchestrator = BuildOrchestrator(context, jobs=args.jobs, verbose=args.verbose)

        result = orchestrator.build(args.target)

        if result.built:
            ErrorFormatter.print_success("Build successful!")
        else:
            ErrorFormatter.print_success("Everything is up to date")
        print()
        if args.verbose:
            for artifact in result.artifacts:
                print(f"  {artifact}")
            print()
        print(f"Compiled {result.compiled} source(s) in {result.build_time:.2f}s")
        sys.exit(ExitCode.SUCCESS)

    except KeyboardInterrupt:
        ErrorFormatter.handle_keyboard_interrupt()
    except Exception as e:
        ErrorFormatter.handle_build_error(e, args.verbose)


def clean_command(args: CleanArgs) -> None:
    """Remove the object and binary directories."""
    try:
        loader = ManifestLoader(args.manifest)
        config = loader.load()
        removed = Cleaner(config.settings, loader.root).clean()

        for directory in removed:
            print(f"Removed {directory}")
        ErrorFormatter.print_success("Clean complete")
        sys.exit(ExitCode.SUCCESS)

    except KeyboardInterrupt:
        ErrorFormatter.handle_keyboard_interrupt()
    except Exception as e:
        ErrorFormatter.handle_build_error(e, args.verbose)


def compile_commands_command(args: CompileCommandsArgs) -> None:
    """Write the compilation database of every project."""
    try:
        loader = ManifestLoader(args.manifest)
        context = BuildContext.create(loader.load(), loader.root)
        path = CompileCommandsExporter(context).write(args.output)

        ErrorFormatter.print_success(f"Wrote {path}")
        sys.exit(ExitCode.SUCCESS)

    except KeyboardInterrupt:
        ErrorFormatter.handle_keyboard_interrupt()
    except Exception as e:
        ErrorFormatter.handle_build_error(e, args.verbose)


def main(argv: Optional[List[str]] = None) -> None:
    """buldr - declarative build orchestrator for C/C++ projects."""
    parser = argparse.ArgumentParser(
        prog="buldr",
        description="buldr - declarative build orchestrator for C/C++ projects",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"buldr {__version__}",
    )
    parser.add_argument(
        "target",
        nargs="?",
        default=None,
        help=(
            f"Project to build, '{CLEAN_COMMAND}' or '{COMPILE_COMMANDS_COMMAND}' "
            "(default: build every default project)"
        ),
    )
    parser.add_argument(
        "-f",
        "--file",
        type=Path,
        default=Path(MANIFEST_FILENAME),
        help=f"Manifest file (default: {MANIFEST_FILENAME})",
    )
    parser.add_argument(
        "-j",
        "--jobs",
        type=int,
        default=1,
        help="Parallel compilations within a project (default: 1)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show verbose output",
    )

    parsed_args = parser.parse_args(argv)

    if parsed_args.jobs < 1:
        parser.error("--jobs must be at least 1")

    configure_logging(parsed_args.verbose)

    if parsed_args.target == CLEAN_COMMAND:
        clean_command(CleanArgs(
            manifest=parsed_args.file,
            verbose=parsed_args.verbose,
        ))
    elif parsed_args.target == COMPILE_COMMANDS_COMMAND:
        compile_commands_command(CompileCommandsArgs(
            manifest=parsed_args.file,
            output=Path.cwd() / COMPILE_COMMANDS_FILENAME,
            verbose=parsed_args.verbose,
        ))
    else:
        build_command(BuildArgs(
            manifest=parsed_args.file,
            target=parsed_args.target,
            jobs=parsed_args.jobs,
            verbose=parsed_args.verbose,
        ))


if __name__ == "__main__":
    main()
