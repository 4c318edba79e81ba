"""
Compilation database export.

Writes compile_commands.json for editor tooling (clangd, ccls, ...). Every
project of the configuration is covered, whichever subset was last built,
and each entry carries the exact compiler arguments a build would use.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from .orchestrator import BuildContext

logger = logging.getLogger(__name__)

COMPILE_COMMANDS_FILENAME = "compile_commands.json"


class CompileCommandsExporter:
    """
    Renders the compilation database of a build context.

    Entries are ordered by project build order, then by source order, so
    the output is stable across runs.
    """

    def __init__(self, context: BuildContext, directory: Optional[Path] = None):
        """
        Args:
            context: Build context to export
            directory: Working directory recorded in entries (defaults to
                the context root, which is where tools are run from)
        """
        self.context = context
        self.directory = Path(directory).resolve() if directory else context.root

    def export(self) -> List[Dict[str, Any]]:
        """
        Build the database entries.

        Returns:
            One dict per (project, source) with directory, file, arguments
            and output

        Raises:
            MissingSourceError: If a declared source is missing
        """
        scanner = self.context.scanner()
        entries = []

        for project in self.context.graph.ordered_projects():
            builder = self.context.flag_builder(project)
            for unit in scanner.scan(project):
                entries.append({
                    "directory": str(self.directory),
                    "file": str(unit.source),
                    "arguments": builder.compile_command(unit.source, unit.object_path),
                    "output": str(unit.object_path),
                })

        logger.debug("Exported %d compile command(s)", len(entries))
        return entries

    def write(self, path: Path) -> Path:
        """
        Write the database as JSON.

        Args:
            path: Output file (usually compile_commands.json)

        Returns:
            Path written
        """
        path = Path(path)
        entries = self.export()
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(entries, f, indent=2)
            f.write('\n')
        return path
