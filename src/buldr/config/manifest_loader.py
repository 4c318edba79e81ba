"""
build.toml manifest loader.

This module reads a TOML manifest from disk and turns it into a validated
BuildConfig.
"""

import tomllib
from pathlib import Path

from .project_config import BuildConfig, ConfigError

MANIFEST_FILENAME = "build.toml"


class ManifestLoader:
    """
    Loader for build.toml manifests.

    Example build.toml:
        [config]
        compiler = "g++"
        bin = "bin"
        obj = "obj"

        [[project]]
        name = "app"
        kind = "executable"
        src = ["src"]
        default = true

    Usage:
        loader = ManifestLoader(Path("build.toml"))
        config = loader.load()
        root = loader.root  # directory relative paths resolve against
    """

    def __init__(self, manifest_path: Path):
        """
        Initialize the loader.

        Args:
            manifest_path: Path to the build.toml file
        """
        self.manifest_path = Path(manifest_path)

    @property
    def root(self) -> Path:
        """Directory containing the manifest."""
        return self.manifest_path.resolve().parent

    def load(self) -> BuildConfig:
        """
        Parse and validate the manifest.

        Returns:
            BuildConfig instance

        Raises:
            ConfigError: If the file is missing, is not valid TOML, or does
                not describe a valid configuration
        """
        if not self.manifest_path.is_file():
            raise ConfigError(f"Manifest not found: {self.manifest_path}")

        try:
            with open(self.manifest_path, "rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Failed to parse {self.manifest_path}: {e}") from e

        return BuildConfig.from_dict(data)
