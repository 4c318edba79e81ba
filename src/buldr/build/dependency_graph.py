"""
Project dependency graph.

Projects are addressed by their index in manifest declaration order. Edges
run from a dependency to its dependent, so a topological sort yields a valid
build order directly. Ties are broken by declaration index, which keeps the
order reproducible for a given manifest.
"""

import logging
from typing import Dict, Iterable, List, Sequence, Tuple

import networkx as nx
from networkx.exception import NetworkXNoCycle

from ..config.project_config import ConfigError, Project

logger = logging.getLogger(__name__)


class UnknownDependencyError(ConfigError):
    """A project depends on a name that no project declares."""

    def __init__(self, name: str, project: str):
        self.name = name
        self.project = project
        super().__init__(f"Project '{project}' depends on unknown project '{name}'")


class UnknownProjectError(ConfigError):
    """A requested build target does not exist."""

    def __init__(self, name: str, available: Sequence[str] = ()):
        self.name = name
        message = f"No project found with name '{name}'"
        if available:
            message += f". Available projects: {', '.join(available)}"
        super().__init__(message)


class CyclicDependencyError(Exception):
    """The dependency relation contains a cycle."""

    def __init__(self, cycle: Sequence[str]):
        self.cycle = tuple(cycle)
        super().__init__(f"Cyclic dependency: {' -> '.join(self.cycle)}")


class DependencyGraph:
    """
    Directed graph over the projects of a build configuration.

    Construction validates the graph: every dependency must name a known
    project and the relation must be acyclic. The build order is computed
    once and exposed read-only.

    Example usage:
        graph = DependencyGraph(config.projects)
        graph.build_order              # ('core', 'util', 'app')
        graph.closure('util').names    # ('core', 'util')
    """

    def __init__(self, projects: Iterable[Project]):
        """
        Build and validate the graph.

        Args:
            projects: Projects in manifest declaration order

        Raises:
            UnknownDependencyError: If a dependency name is not declared
            CyclicDependencyError: If the dependencies form a cycle
        """
        self._projects: Tuple[Project, ...] = tuple(projects)
        self._index: Dict[str, int] = {
            project.name: i for i, project in enumerate(self._projects)
        }

        self._graph = nx.DiGraph()
        self._graph.add_nodes_from(range(len(self._projects)))
        for i, project in enumerate(self._projects):
            for dep in project.depends:
                if dep not in self._index:
                    raise UnknownDependencyError(dep, project.name)
                self._graph.add_edge(self._index[dep], i)

        self._check_cycles()

        order = nx.lexicographical_topological_sort(self._graph)
        self._build_order: Tuple[str, ...] = tuple(self._projects[i].name for i in order)
        logger.debug("Build order: %s", ", ".join(self._build_order))

    def _check_cycles(self) -> None:
        try:
            edges = nx.find_cycle(self._graph)
        except NetworkXNoCycle:
            return

        # Edges point dependency -> dependent; report in "depends on" direction
        nodes = [edges[0][0]] + [edge[1] for edge in edges]
        cycle = [self._projects[i].name for i in reversed(nodes)]
        logger.debug("Cycle detected: %s", " -> ".join(cycle))
        raise CyclicDependencyError(cycle)

    @property
    def projects(self) -> Tuple[Project, ...]:
        """Projects in declaration order."""
        return self._projects

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(project.name for project in self._projects)

    @property
    def build_order(self) -> Tuple[str, ...]:
        """Project names ordered so every dependency precedes its dependents."""
        return self._build_order

    def __contains__(self, name: object) -> bool:
        return name in self._index

    def __len__(self) -> int:
        return len(self._projects)

    def project(self, name: str) -> Project:
        if name not in self._index:
            raise UnknownProjectError(name, self.names)
        return self._projects[self._index[name]]

    def dependencies_of(self, name: str) -> List[Project]:
        """Direct dependencies of a project, in declaration order."""
        return [self._projects[self._index[dep]] for dep in self.project(name).depends]

    def ordered_projects(self) -> List[Project]:
        """Projects in build order."""
        return [self._projects[self._index[name]] for name in self._build_order]

    def closure(self, name: str) -> "DependencyGraph":
        """
        Induced subgraph of a project and its transitive dependencies.

        Args:
            name: Target project name

        Returns:
            DependencyGraph restricted to the closure

        Raises:
            UnknownProjectError: If the project does not exist
        """
        return self.closure_of([name])

    def closure_of(self, names: Iterable[str]) -> "DependencyGraph":
        """Induced subgraph over the union of several targets' closures."""
        selected = set()
        for name in names:
            if name not in self._index:
                raise UnknownProjectError(name, self.names)
            index = self._index[name]
            selected.add(index)
            selected.update(nx.ancestors(self._graph, index))

        return DependencyGraph(self._projects[i] for i in sorted(selected))
