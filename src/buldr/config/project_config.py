"""
Build configuration model.

This module defines the in-memory form of a build manifest: the global
toolchain settings and the ordered list of projects. The objects are frozen
once constructed; all validation happens in the `from_dict` constructors so
that anything downstream can rely on well-formed data.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple


class ConfigError(Exception):
    """Exception raised for malformed or incomplete build configuration."""

    pass


class ProjectKind(Enum):
    """Kind of artifact a project produces."""

    EXECUTABLE = "executable"
    LIBRARY = "library"

    @classmethod
    def parse(cls, value: Any) -> "ProjectKind":
        """Parse a manifest `kind` value (case-insensitive)."""
        if isinstance(value, ProjectKind):
            return value
        if isinstance(value, str):
            for kind in cls:
                if kind.value == value.strip().lower():
                    return kind
        choices = ", ".join(kind.value for kind in cls)
        raise ConfigError(f"Invalid project kind {value!r} (expected one of: {choices})")


DEFAULT_EXTENSIONS: Tuple[str, ...] = (".c", ".cc", ".cpp", ".cxx", ".c++")

# Archiver options used when neither the global block nor the project sets any
DEFAULT_PACKER_OPTS: Tuple[str, ...] = ("rcs",)


def _string_list(value: Any, key: str, owner: str) -> Tuple[str, ...]:
    """Validate a list-of-strings field and return it as a tuple."""
    if value is None:
        return ()
    if isinstance(value, str) or not isinstance(value, (list, tuple)):
        raise ConfigError(f"{owner}: '{key}' must be a list of strings")
    for item in value:
        if not isinstance(item, str):
            raise ConfigError(f"{owner}: '{key}' must be a list of strings, got {item!r}")
    return tuple(value)


def _optional_string(value: Any, key: str, owner: str) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str) or not value:
        raise ConfigError(f"{owner}: '{key}' must be a non-empty string")
    return value


def _normalize_extensions(extensions: Iterable[str]) -> Tuple[str, ...]:
    normalized = []
    for ext in extensions:
        ext = ext.strip()
        if not ext:
            continue
        if not ext.startswith("."):
            ext = "." + ext
        if ext not in normalized:
            normalized.append(ext)
    return tuple(normalized)


def _check_unknown_keys(data: Dict[str, Any], allowed: Iterable[str], owner: str) -> None:
    unknown = sorted(set(data) - set(allowed))
    if unknown:
        raise ConfigError(f"{owner}: unknown field(s): {', '.join(unknown)}")


@dataclass(frozen=True)
class GlobalSettings:
    """Toolchain and output settings shared by every project."""

    compiler: str = "gcc"
    compiler_opts: Tuple[str, ...] = ()
    linker: str = "gcc"
    linker_opts: Tuple[str, ...] = ()
    packer: str = "ar"
    packer_opts: Tuple[str, ...] = ()
    bin: str = "bin"
    obj: str = "obj"

    FIELDS = (
        "compiler", "compiler_opts", "linker", "linker_opts",
        "packer", "packer_opts", "bin", "obj",
    )

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "GlobalSettings":
        """
        Build settings from the manifest's global block.

        Args:
            data: Mapping of the `[config]` table (None for all defaults)

        Returns:
            Validated GlobalSettings

        Raises:
            ConfigError: If a field has the wrong type or is unknown
        """
        data = dict(data or {})
        owner = "config"
        _check_unknown_keys(data, cls.FIELDS, owner)

        values: Dict[str, Any] = {}
        for key in ("compiler", "linker", "packer", "bin", "obj"):
            if key in data:
                values[key] = _optional_string(data[key], key, owner)
        for key in ("compiler_opts", "linker_opts", "packer_opts"):
            if key in data:
                values[key] = _string_list(data[key], key, owner)
        return cls(**values)


@dataclass(frozen=True)
class Project:
    """A named buildable unit: an executable or a static library."""

    name: str
    kind: ProjectKind
    src: Tuple[str, ...]
    extensions: Tuple[str, ...] = DEFAULT_EXTENSIONS
    include: Tuple[str, ...] = ()
    defines: Tuple[str, ...] = ()
    links: Tuple[str, ...] = ()
    depends: Tuple[str, ...] = ()
    default: bool = False
    compiler: Optional[str] = None
    compiler_opts: Tuple[str, ...] = ()
    linker: Optional[str] = None
    linker_opts: Tuple[str, ...] = ()
    packer: Optional[str] = None
    packer_opts: Tuple[str, ...] = ()

    FIELDS = (
        "name", "kind", "src", "extensions", "include", "defines", "links",
        "depends", "default", "compiler", "compiler_opts", "linker",
        "linker_opts", "packer", "packer_opts",
    )

    @classmethod
    def from_dict(cls, data: Dict[str, Any], index: int = 0) -> "Project":
        """
        Build a project from one manifest `[[project]]` table.

        Args:
            data: Mapping of the project table
            index: Position in the manifest (used in error messages)

        Returns:
            Validated Project

        Raises:
            ConfigError: If a required field is missing or a field is invalid
        """
        if not isinstance(data, dict):
            raise ConfigError(f"project #{index + 1}: expected a table")

        name = data.get("name")
        if not isinstance(name, str) or not name.strip():
            raise ConfigError(f"project #{index + 1}: missing required field 'name'")
        owner = f"project '{name}'"
        _check_unknown_keys(data, cls.FIELDS, owner)

        if "kind" not in data:
            raise ConfigError(f"{owner}: missing required field 'kind'")
        kind = ProjectKind.parse(data["kind"])

        if "src" not in data:
            raise ConfigError(f"{owner}: missing required field 'src'")
        src = _string_list(data["src"], "src", owner)
        if not src:
            raise ConfigError(f"{owner}: 'src' must list at least one file or directory")

        default = data.get("default", False)
        if not isinstance(default, bool):
            raise ConfigError(f"{owner}: 'default' must be true or false")

        extensions = DEFAULT_EXTENSIONS
        if data.get("extensions") is not None:
            extensions = _normalize_extensions(
                _string_list(data["extensions"], "extensions", owner)
            )
            if not extensions:
                raise ConfigError(f"{owner}: 'extensions' must not be empty")

        return cls(
            name=name,
            kind=kind,
            src=src,
            extensions=extensions,
            include=_string_list(data.get("include"), "include", owner),
            defines=_string_list(data.get("defines"), "defines", owner),
            links=_string_list(data.get("links"), "links", owner),
            depends=_string_list(data.get("depends"), "depends", owner),
            default=default,
            compiler=_optional_string(data.get("compiler"), "compiler", owner),
            compiler_opts=_string_list(data.get("compiler_opts"), "compiler_opts", owner),
            linker=_optional_string(data.get("linker"), "linker", owner),
            linker_opts=_string_list(data.get("linker_opts"), "linker_opts", owner),
            packer=_optional_string(data.get("packer"), "packer", owner),
            packer_opts=_string_list(data.get("packer_opts"), "packer_opts", owner),
        )

    @property
    def is_library(self) -> bool:
        return self.kind is ProjectKind.LIBRARY

    @property
    def artifact_name(self) -> str:
        """File name of the final artifact inside the bin directory."""
        if self.kind is ProjectKind.LIBRARY:
            return f"lib{self.name}.a"
        return self.name

    def compiler_for(self, settings: GlobalSettings) -> str:
        return self.compiler or settings.compiler

    def linker_for(self, settings: GlobalSettings) -> str:
        return self.linker or settings.linker

    def packer_for(self, settings: GlobalSettings) -> str:
        return self.packer or settings.packer

    def compiler_options(self, settings: GlobalSettings) -> List[str]:
        """Global compiler options followed by the project's own."""
        return list(settings.compiler_opts) + list(self.compiler_opts)

    def linker_options(self, settings: GlobalSettings) -> List[str]:
        return list(settings.linker_opts) + list(self.linker_opts)

    def packer_options(self, settings: GlobalSettings) -> List[str]:
        options = list(settings.packer_opts) + list(self.packer_opts)
        return options or list(DEFAULT_PACKER_OPTS)


@dataclass(frozen=True)
class BuildConfig:
    """
    Complete, validated build configuration.

    Usage:
        config = BuildConfig.from_dict({
            "config": {"compiler": "g++"},
            "project": [
                {"name": "core", "kind": "library", "src": ["core"]},
                {"name": "app", "kind": "executable", "src": ["app"],
                 "depends": ["core"], "default": True},
            ],
        })
        config.get_project("app").depends  # ('core',)
    """

    settings: GlobalSettings = field(default_factory=GlobalSettings)
    projects: Tuple[Project, ...] = ()

    def __post_init__(self):
        seen = set()
        for project in self.projects:
            if project.name in seen:
                raise ConfigError(f"Duplicate project name: '{project.name}'")
            seen.add(project.name)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BuildConfig":
        """
        Build a configuration from a parsed manifest mapping.

        Args:
            data: Mapping with an optional `config` table and a `project` list

        Returns:
            Validated BuildConfig

        Raises:
            ConfigError: If the manifest is malformed
        """
        if not isinstance(data, dict):
            raise ConfigError("Manifest must be a table")
        _check_unknown_keys(data, ("config", "project"), "manifest")

        settings_data = data.get("config")
        if settings_data is not None and not isinstance(settings_data, dict):
            raise ConfigError("'config' must be a table")

        projects_data = data.get("project", [])
        if not isinstance(projects_data, list):
            raise ConfigError("'project' must be an array of tables ([[project]])")

        return cls(
            settings=GlobalSettings.from_dict(settings_data),
            projects=tuple(
                Project.from_dict(entry, index) for index, entry in enumerate(projects_data)
            ),
        )

    @property
    def project_names(self) -> List[str]:
        return [project.name for project in self.projects]

    def get_project(self, name: str) -> Project:
        for project in self.projects:
            if project.name == name:
                return project
        available = ", ".join(self.project_names)
        raise ConfigError(
            f"Project '{name}' not found. Available projects: {available or 'none'}"
        )

    def default_projects(self) -> List[Project]:
        return [project for project in self.projects if project.default]
