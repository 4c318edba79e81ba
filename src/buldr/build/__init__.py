"""
Build system components for buldr.

This module provides the build engine:
- Dependency graph construction, cycle detection and build order
- Effective (inherited) settings per project
- Source discovery and staleness checks
- Compilation, archiving and linking
- Compilation database export and cleaning
"""

from .cleaner import Cleaner
from .compile_commands import COMPILE_COMMANDS_FILENAME, CompileCommandsExporter
from .dependency_graph import (
    CyclicDependencyError,
    DependencyGraph,
    UnknownDependencyError,
    UnknownProjectError,
)
from .flag_builder import FlagBuilder
from .orchestrator import BuildContext, BuildOrchestrator, BuildOrchestratorError, BuildResult
from .project_planner import EffectiveSettings, ProjectPlanner
from .source_scanner import MissingSourceError, SourceScanner, SourceUnit
from .tool_runner import SubprocessToolRunner, ToolInvocationError, ToolResult, ToolRunner

__all__ = [
    'BuildContext',
    'BuildOrchestrator',
    'BuildOrchestratorError',
    'BuildResult',
    'COMPILE_COMMANDS_FILENAME',
    'Cleaner',
    'CompileCommandsExporter',
    'CyclicDependencyError',
    'DependencyGraph',
    'EffectiveSettings',
    'FlagBuilder',
    'MissingSourceError',
    'ProjectPlanner',
    'SourceScanner',
    'SourceUnit',
    'SubprocessToolRunner',
    'ToolInvocationError',
    'ToolResult',
    'ToolRunner',
    'UnknownDependencyError',
    'UnknownProjectError',
]
