"""
Source file discovery.

This module handles:
- Expanding a project's source entries (files and directories) into source files
- Filtering by the project's recognised extensions
- Computing the object file path of each source
- Deciding whether an object file is out of date
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List

from ..config.project_config import GlobalSettings, Project

logger = logging.getLogger(__name__)

OBJECT_SUFFIX = ".o"


class MissingSourceError(Exception):
    """A declared source path does not exist."""

    def __init__(self, project: str, path: Path):
        self.project = project
        self.path = path
        super().__init__(f"Project '{project}': source path does not exist: {path}")


@dataclass(frozen=True)
class SourceUnit:
    """A source file of a project together with its object file."""

    project: str
    source: Path       # Absolute source path
    object_path: Path  # Absolute object path

    def needs_rebuild(self) -> bool:
        return needs_rebuild(self.source, self.object_path)


def needs_rebuild(source: Path, object_file: Path) -> bool:
    """
    Check if a source file needs to be recompiled.

    Only modification times are compared; headers are not tracked.

    Args:
        source: Source file path
        object_file: Object file path

    Returns:
        True if the object is missing or the source is strictly newer
    """
    if not object_file.exists():
        return True

    return source.stat().st_mtime > object_file.stat().st_mtime


class SourceScanner:
    """
    Resolves project sources into SourceUnits.

    The scanner:
    1. Takes file entries as-is when their extension is recognised
    2. Walks directory entries recursively, in lexical path order
    3. Maps each source to <obj>/<project>/<path relative to root>.o
    """

    def __init__(self, root: Path, settings: GlobalSettings):
        """
        Initialize source scanner.

        Args:
            root: Directory relative source and output paths resolve against
            settings: Global settings (for the object directory)
        """
        self.root = Path(root).resolve()
        self.settings = settings

    @property
    def obj_dir(self) -> Path:
        return self.root / self.settings.obj

    def scan(self, project: Project) -> List[SourceUnit]:
        """
        Resolve all source units of a project.

        Args:
            project: Project to scan

        Returns:
            SourceUnits in resolution order

        Raises:
            MissingSourceError: If a declared source entry does not exist
        """
        return [
            SourceUnit(
                project=project.name,
                source=source,
                object_path=self.object_path_for(project, source),
            )
            for source in self.resolve_sources(project)
        ]

    def resolve_sources(self, project: Project) -> List[Path]:
        """
        Expand a project's source entries into absolute source file paths.

        Entries keep their declared order; files found under a directory are
        sorted. A file reached twice is only listed once.
        """
        sources: List[Path] = []
        seen = set()

        for entry in project.src:
            path = self._absolute(entry)
            if path.is_dir():
                candidates = self._walk(path)
            elif path.is_file():
                candidates = [path]
            else:
                raise MissingSourceError(project.name, path)

            for candidate in candidates:
                if not self._has_extension(candidate, project):
                    continue
                if candidate in seen:
                    continue
                seen.add(candidate)
                sources.append(candidate)

        logger.debug("Resolved %d source(s) for %s", len(sources), project.name)
        return sources

    def object_path_for(self, project: Project, source: Path) -> Path:
        """
        Compute the object file path of a source.

        Args:
            project: Owning project
            source: Absolute source path

        Returns:
            <root>/<obj>/<project>/<relative source path>.o (the source
            extension is kept, so foo.c and foo.cpp do not collide)
        """
        source = self._absolute(source)
        try:
            relative = source.relative_to(self.root)
        except ValueError:
            # Outside the root: keep the full path below the project directory
            relative = Path(*source.parts[1:])

        return self.obj_dir / project.name / relative.parent / (relative.name + OBJECT_SUFFIX)

    def _absolute(self, entry) -> Path:
        path = Path(entry)
        if not path.is_absolute():
            path = self.root / path
        return Path(os.path.normpath(path))

    @staticmethod
    def _walk(directory: Path) -> List[Path]:
        return sorted(p for p in directory.rglob("*") if p.is_file())

    @staticmethod
    def _has_extension(path: Path, project: Project) -> bool:
        return any(path.name.endswith(ext) for ext in project.extensions)
