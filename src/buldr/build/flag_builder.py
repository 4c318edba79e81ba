"""Tool Argument Builder.

This module builds the argument lists passed to the compiler, linker and
archiver.

Design:
    - One builder per project, bound to the project's effective settings
    - The compile command is shared by the build and by compile_commands.json,
      so both always agree
    - Include and define flags come from the effective (inherited) settings
"""

from pathlib import Path
from typing import List, Sequence

from ..config.project_config import GlobalSettings, Project
from .project_planner import EffectiveSettings


class FlagBuilder:
    """Builds tool invocations for a project.

    Argument layout:
        compile: compiler, global opts, project opts, -I..., -D..., -c src -o obj
        link:    linker, objects, global opts, project opts, -o bin, archives, -l...
        pack:    packer, packer opts (default "rcs"), archive, objects
    """

    def __init__(
        self,
        project: Project,
        settings: GlobalSettings,
        effective: EffectiveSettings
    ):
        """Initialize flag builder.

        Args:
            project: Project the commands are built for
            settings: Global settings
            effective: Effective settings of the project
        """
        self.project = project
        self.settings = settings
        self.effective = effective

    def include_flags(self) -> List[str]:
        return [f"-I{include}" for include in self.effective.includes]

    def define_flags(self) -> List[str]:
        return [f"-D{define}" for define in self.effective.defines]

    def link_flags(self) -> List[str]:
        return [f"-l{link}" for link in self.effective.links]

    def compile_command(self, source: Path, object_path: Path) -> List[str]:
        """Build the compiler command for one source file.

        Args:
            source: Source file path
            object_path: Output object path

        Returns:
            Full argument list, compiler first
        """
        cmd = [self.project.compiler_for(self.settings)]
        cmd.extend(self.project.compiler_options(self.settings))
        cmd.extend(self.include_flags())
        cmd.extend(self.define_flags())
        cmd.extend(['-c', str(source)])
        cmd.extend(['-o', str(object_path)])
        return cmd

    def link_command(self, objects: Sequence[Path], output: Path) -> List[str]:
        """Build the linker command for an executable.

        Args:
            objects: All object files of the project
            output: Output executable path

        Returns:
            Full argument list, linker first
        """
        cmd = [self.project.linker_for(self.settings)]
        cmd.extend(str(obj) for obj in objects)
        cmd.extend(self.project.linker_options(self.settings))
        cmd.extend(['-o', str(output)])
        cmd.extend(str(archive) for archive in self.effective.archives)
        cmd.extend(self.link_flags())
        return cmd

    def pack_command(self, objects: Sequence[Path], archive: Path) -> List[str]:
        """Build the archiver command for a library.

        Args:
            objects: All object files of the project
            archive: Output archive path

        Returns:
            Full argument list, archiver first
        """
        cmd = [self.project.packer_for(self.settings)]
        cmd.extend(self.project.packer_options(self.settings))
        cmd.append(str(archive))
        cmd.extend(str(obj) for obj in objects)
        return cmd
