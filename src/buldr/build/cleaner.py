"""Removal of build outputs."""

import logging
import shutil
from pathlib import Path
from typing import List

from ..config.project_config import ConfigError, GlobalSettings

logger = logging.getLogger(__name__)


class Cleaner:
    """Removes the object and binary directories of a configuration.

    Missing directories are skipped, so cleaning twice is not an error.
    """

    def __init__(self, settings: GlobalSettings, root: Path):
        """Initialize cleaner.

        Args:
            settings: Global settings naming the obj and bin directories
            root: Directory relative paths resolve against
        """
        self.settings = settings
        self.root = Path(root).resolve()

    def directories(self) -> List[Path]:
        return [(self.root / name).resolve() for name in (self.settings.obj, self.settings.bin)]

    def clean(self) -> List[Path]:
        """Remove all build outputs.

        Returns:
            Directories that existed and were removed
        """
        removed = []
        for directory in self.directories():
            if not directory.exists():
                continue
            if directory == self.root or directory in self.root.parents:
                raise ConfigError(f"Refusing to remove {directory}: it contains the project root")
            shutil.rmtree(directory)
            logger.debug("Removed %s", directory)
            removed.append(directory)
        return removed
