"""
Effective settings resolution.

Each project inherits the include paths, defines and link libraries of its
dependencies. The planner merges them in dependency declaration order and
records the archives an executable must link against.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Tuple

from ..config.project_config import GlobalSettings, Project
from .dependency_graph import DependencyGraph

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EffectiveSettings:
    """Settings a project compiles and links with after inheritance."""

    includes: Tuple[str, ...] = ()
    defines: Tuple[str, ...] = ()
    links: Tuple[str, ...] = ()
    archives: Tuple[Path, ...] = ()  # Library dependency archives, link order


def _merge_keep_first(*groups: Iterable) -> tuple:
    merged: list = []
    seen = set()
    for group in groups:
        for item in group:
            if item not in seen:
                seen.add(item)
                merged.append(item)
    return tuple(merged)


def _dedupe_keep_last(items: List) -> tuple:
    last = {item: i for i, item in enumerate(items)}
    return tuple(item for i, item in enumerate(items) if last[item] == i)


def archive_path(project: Project, settings: GlobalSettings, root: Path) -> Path:
    """Absolute path of a project's artifact in the bin directory."""
    return (Path(root) / settings.bin / project.artifact_name).resolve()


class ProjectPlanner:
    """
    Computes EffectiveSettings for projects of a dependency graph.

    For a project P with dependencies D1..Dn, its effective includes are P's
    own includes followed by each Di's effective includes, duplicates
    dropped keeping the first occurrence. Defines and named link libraries
    follow the same rule.

    Archives of library dependencies (direct and transitive) are listed so
    that every archive precedes the archives it depends on, which is the
    order static linkers resolve symbols in.

    Example usage:
        planner = ProjectPlanner(graph, config.settings, root)
        settings = planner.plan('app')
        settings.includes  # ('app/include', 'core/include')
    """

    def __init__(self, graph: DependencyGraph, settings: GlobalSettings, root: Path):
        """
        Initialize planner.

        Args:
            graph: Validated dependency graph
            settings: Global settings (for the bin directory)
            root: Directory relative output paths resolve against
        """
        self.graph = graph
        self.settings = settings
        self.root = Path(root)
        self._cache: Dict[str, EffectiveSettings] = {}

    def plan(self, name: str) -> EffectiveSettings:
        """
        Effective settings of one project.

        Args:
            name: Project name

        Returns:
            EffectiveSettings for the project
        """
        if name in self._cache:
            return self._cache[name]

        project = self.graph.project(name)
        dependencies = self.graph.dependencies_of(name)
        deps = [self.plan(dep.name) for dep in dependencies]

        # Preorder over library dependencies; each dependency's own list is
        # already de-duplicated, which leaves the keep-last result unchanged
        archives: List[Path] = []
        for dep, planned in zip(dependencies, deps):
            if dep.is_library:
                archives.append(archive_path(dep, self.settings, self.root))
            archives.extend(planned.archives)

        effective = EffectiveSettings(
            includes=_merge_keep_first(project.include, *(d.includes for d in deps)),
            defines=_merge_keep_first(project.defines, *(d.defines for d in deps)),
            links=_merge_keep_first(project.links, *(d.links for d in deps)),
            archives=_dedupe_keep_last(archives),
        )
        self._cache[name] = effective
        logger.debug(
            "Planned %s: %d include(s), %d define(s), %d link(s), %d archive(s)",
            name, len(effective.includes), len(effective.defines),
            len(effective.links), len(effective.archives),
        )
        return effective

    def plan_all(self) -> Dict[str, EffectiveSettings]:
        """Effective settings of every project, keyed in build order."""
        return {name: self.plan(name) for name in self.graph.build_order}
