"""Fixture path resolution.

Fixture files live under a fixed directory of the project, ``spec/resource``
by default. PathResolver joins a project root, that directory and a file
name. It never touches the filesystem, so a resolved path may not exist.
"""

import logging
import os
from pathlib import PurePosixPath
from typing import Optional, Tuple, Union

from smith_testing.errors import ConfigurationError
from smith_testing.settings import Settings, current_project_root, load_settings

logger = logging.getLogger(__name__)

DEFAULT_RESOURCE_DIR = "spec/resource"


class PathResolver:
    """Resolves fixture file names to paths under a project root.

    Attributes:
        project_root: Repository root the fixture directory lives in.
        resource_dir: Fixture directory relative to ``project_root``,
            written with forward slashes.
    """

    def __init__(
        self,
        project_root: Optional[Union[str, os.PathLike]],
        resource_dir: str = DEFAULT_RESOURCE_DIR,
    ):
        """Initialize PathResolver.

        Raises:
            ConfigurationError: If ``project_root`` is None or empty.
        """
        if project_root is None or not os.fspath(project_root):
            raise ConfigurationError("No project root available for fixture paths")

        self.project_root: str = os.fspath(project_root)
        self.resource_dir: str = resource_dir
        # Split once so the host separator is used when joining
        self._resource_parts: Tuple[str, ...] = PurePosixPath(resource_dir).parts

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "PathResolver":
        """Build a resolver from the process-wide project root.

        Args:
            settings: Settings supplying ``paths.resource_dir``. Defaults to
                the global settings instance.

        Raises:
            ConfigurationError: If no project root has been configured.
        """
        settings = settings or load_settings()
        return cls(current_project_root(), settings.resource_dir)

    def resolve(self, file_name: str) -> str:
        """Return the path of ``file_name`` inside the fixture directory.

        Examples:
            >>> PathResolver("/repo").resolve("wpa-roam.conf")
            '/repo/spec/resource/wpa-roam.conf'
        """
        # Absolute names stay inside the fixture directory
        relative = file_name.lstrip(os.sep + (os.altsep or ""))
        path = os.path.join(self.project_root, *self._resource_parts, relative)
        logger.debug("Resolved fixture %r to %s", file_name, path)
        return path

    def __call__(self, file_name: str) -> str:
        return self.resolve(file_name)

    def __repr__(self) -> str:
        return (
            f"PathResolver(project_root={self.project_root!r}, "
            f"resource_dir={self.resource_dir!r})"
        )


def config_file(file_name: str) -> str:
    """Resolve ``file_name`` against the process-wide project root.

    Raises:
        ConfigurationError: If no project root has been configured.
    """
    return PathResolver.from_settings().resolve(file_name)
