"""
Build orchestration for buldr projects.

This module walks the dependency graph in build order and, per project:
- Resolves its source files
- Recompiles stale sources (object missing or older than the source)
- Packs libraries into static archives
- Links executables against their objects, dependency archives and
  system libraries

Any tool failure aborts the whole build immediately.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import List, Mapping, Optional, Sequence, Tuple

from ..config.project_config import BuildConfig, ConfigError, GlobalSettings, Project, ProjectKind
from .dependency_graph import DependencyGraph
from .flag_builder import FlagBuilder
from .project_planner import EffectiveSettings, ProjectPlanner, archive_path
from .source_scanner import OBJECT_SUFFIX, SourceScanner, SourceUnit
from .tool_runner import SubprocessToolRunner, ToolRunner

logger = logging.getLogger(__name__)


class BuildOrchestratorError(Exception):
    """Exception raised for build orchestration errors."""
    pass


@dataclass(frozen=True)
class BuildContext:
    """
    Read-only state shared by every build step.

    Built once per invocation from the configuration; nothing in it changes
    while projects are being built.
    """

    config: BuildConfig
    graph: DependencyGraph
    effective: Mapping[str, EffectiveSettings]
    root: Path

    @classmethod
    def create(cls, config: BuildConfig, root: Path) -> "BuildContext":
        """
        Build the graph and effective settings for a configuration.

        Args:
            config: Validated build configuration
            root: Directory relative paths resolve against

        Returns:
            BuildContext

        Raises:
            UnknownDependencyError: If a dependency is not declared
            CyclicDependencyError: If dependencies form a cycle
        """
        root = Path(root).resolve()
        graph = DependencyGraph(config.projects)
        planner = ProjectPlanner(graph, config.settings, root)
        return cls(
            config=config,
            graph=graph,
            effective=MappingProxyType(planner.plan_all()),
            root=root,
        )

    @property
    def settings(self) -> GlobalSettings:
        return self.config.settings

    @property
    def bin_dir(self) -> Path:
        return self.root / self.settings.bin

    @property
    def obj_dir(self) -> Path:
        return self.root / self.settings.obj

    def scanner(self) -> SourceScanner:
        return SourceScanner(self.root, self.settings)

    def flag_builder(self, project: Project) -> FlagBuilder:
        return FlagBuilder(project, self.settings, self.effective[project.name])

    def artifact_path(self, project: Project) -> Path:
        return archive_path(project, self.settings, self.root)


@dataclass
class BuildResult:
    """Result of a complete build operation."""

    projects: List[str]                 # Projects in scope, build order
    success: bool = False
    built: List[str] = field(default_factory=list)       # Linked or packed
    up_to_date: List[str] = field(default_factory=list)  # Skipped
    compiled: int = 0                   # Compiler invocations
    artifacts: List[Path] = field(default_factory=list)
    build_time: float = 0.0
    message: str = ""


class BuildOrchestrator:
    """
    Orchestrates builds of the projects in a BuildContext.

    Example usage:
        context = BuildContext.create(config, root=Path("."))
        orchestrator = BuildOrchestrator(context, jobs=4)
        result = orchestrator.build("app")
        print(result.artifacts)
    """

    def __init__(
        self,
        context: BuildContext,
        runner: Optional[ToolRunner] = None,
        jobs: int = 1,
        verbose: bool = False
    ):
        """
        Initialize build orchestrator.

        Args:
            context: Shared build context
            runner: Tool runner (defaults to running real processes)
            jobs: Maximum parallel compilations within one project
            verbose: Enable verbose output
        """
        if jobs < 1:
            raise BuildOrchestratorError(f"jobs must be at least 1, got {jobs}")
        self.context = context
        self.runner = runner or SubprocessToolRunner()
        self.jobs = jobs
        self.verbose = verbose

    def select(self, target: Optional[str] = None) -> DependencyGraph:
        """
        Choose the projects a build invocation covers.

        Args:
            target: Project name, or None for every default project

        Returns:
            Dependency graph of the selected projects and their dependencies

        Raises:
            UnknownProjectError: If the target does not exist
            ConfigError: If no target is given and no project is default
        """
        if target is not None:
            return self.context.graph.closure(target)

        defaults = [project.name for project in self.context.config.default_projects()]
        if not defaults:
            raise ConfigError(
                "No default project. Mark a project with 'default = true' or name one to build."
            )
        return self.context.graph.closure_of(defaults)

    def build(self, target: Optional[str] = None) -> BuildResult:
        """
        Build a target and its dependencies (or every default project).

        Args:
            target: Project name to build, or None for default projects

        Returns:
            BuildResult describing what was done

        Raises:
            ConfigError: If the target cannot be selected
            MissingSourceError: If a declared source is missing
            ToolInvocationError: If a compiler, linker or archiver fails
        """
        start_time = time.time()
        selection = self.select(target)
        result = BuildResult(projects=list(selection.build_order))
        logger.info("Building %s", ", ".join(result.projects))

        for project in selection.ordered_projects():
            compiled, linked = self.build_project(project)
            result.compiled += compiled
            if linked:
                result.built.append(project.name)
            else:
                result.up_to_date.append(project.name)
            result.artifacts.append(self.context.artifact_path(project))

        result.build_time = time.time() - start_time
        result.success = True
        if result.built:
            result.message = f"Built {len(result.built)} project(s)"
        else:
            result.message = "Everything is up to date"
        return result

    def build_project(self, project: Project) -> Tuple[int, bool]:
        """
        Compile and link/pack one project.

        Its dependencies must already be built.

        Args:
            project: Project to build

        Returns:
            (number of sources compiled, whether the link/pack step ran)
        """
        units = self.context.scanner().scan(project)
        if not units:
            logger.warning("Project %s has no source files", project.name)

        stale = [unit for unit in units if unit.needs_rebuild()]
        orphans = self._orphan_objects(project, units)
        artifact = self.context.artifact_path(project)

        if not stale and not orphans and self._artifact_up_to_date(project, artifact, units):
            if self.verbose:
                print(f"{project.name} is up to date")
            return 0, False

        print(f"Building {project.name}...")
        builder = self.context.flag_builder(project)
        self._compile(builder, stale)

        objects = [unit.object_path for unit in units]
        artifact.parent.mkdir(parents=True, exist_ok=True)

        if project.kind is ProjectKind.LIBRARY:
            self._pack(builder, objects, artifact)
        elif project.kind is ProjectKind.EXECUTABLE:
            self._link(builder, objects, artifact)
        else:
            raise BuildOrchestratorError(f"Unsupported project kind: {project.kind}")

        # Kept until the artifact has been rebuilt without them
        for path in orphans:
            path.unlink()
            logger.debug("Removed object of deleted source: %s", path)

        return len(stale), True

    def _orphan_objects(self, project: Project, units: Sequence[SourceUnit]) -> List[Path]:
        """Objects under the project's object directory that no current source produces."""
        project_obj_dir = self.context.obj_dir / project.name
        if not project_obj_dir.is_dir():
            return []

        current = {unit.object_path for unit in units}
        return sorted(
            path for path in project_obj_dir.rglob(f"*{OBJECT_SUFFIX}")
            if path.is_file() and path not in current
        )

    def _artifact_up_to_date(
        self,
        project: Project,
        artifact: Path,
        units: Sequence[SourceUnit]
    ) -> bool:
        if not artifact.exists():
            return False

        artifact_mtime = artifact.stat().st_mtime
        inputs = [unit.object_path for unit in units]
        if project.kind is ProjectKind.EXECUTABLE:
            inputs.extend(self.context.effective[project.name].archives)

        for path in inputs:
            if not path.exists() or path.stat().st_mtime > artifact_mtime:
                return False
        return True

    def _compile(self, builder: FlagBuilder, units: Sequence[SourceUnit]) -> None:
        for unit in units:
            unit.object_path.parent.mkdir(parents=True, exist_ok=True)

        total = len(units)
        if self.jobs == 1 or total < 2:
            for position, unit in enumerate(units, 1):
                self._compile_unit(builder, unit, position, total)
            return

        executor = ThreadPoolExecutor(max_workers=self.jobs)
        try:
            futures = [
                executor.submit(self._compile_unit, builder, unit, position, total)
                for position, unit in enumerate(units, 1)
            ]
            for future in as_completed(futures):
                future.result()
        finally:
            executor.shutdown(wait=True, cancel_futures=True)

    def _compile_unit(self, builder: FlagBuilder, unit: SourceUnit, position: int, total: int) -> None:
        print(f"  [{position}/{total}] Compiling {self._display(unit.source)}")

        cmd = builder.compile_command(unit.source, unit.object_path)
        result = self.runner.check("compiler", cmd, cwd=self.context.root)

        if self.verbose and result.stderr:
            print(result.stderr)

    def _pack(self, builder: FlagBuilder, objects: List[Path], archive: Path) -> None:
        # Stale members of an old archive would otherwise survive
        if archive.exists():
            archive.unlink()

        if self.verbose:
            print(f"  Packing {self._display(archive)}")
        self.runner.check("archiver", builder.pack_command(objects, archive), cwd=self.context.root)

    def _link(self, builder: FlagBuilder, objects: List[Path], output: Path) -> None:
        if self.verbose:
            print(f"  Linking {self._display(output)}")
        result = self.runner.check("linker", builder.link_command(objects, output), cwd=self.context.root)

        if self.verbose and result.stderr:
            print(result.stderr)

    def _display(self, path: Path) -> str:
        try:
            return str(path.relative_to(self.context.root))
        except ValueError:
            return str(path)
