"""Configuration modules for buldr."""

from .manifest_loader import MANIFEST_FILENAME, ManifestLoader
from .project_config import (
    DEFAULT_EXTENSIONS,
    BuildConfig,
    ConfigError,
    GlobalSettings,
    Project,
    ProjectKind,
)

__all__ = [
    "BuildConfig",
    "ConfigError",
    "DEFAULT_EXTENSIONS",
    "GlobalSettings",
    "MANIFEST_FILENAME",
    "ManifestLoader",
    "Project",
    "ProjectKind",
]
