"""Settings and project root for the fixture helpers.

This module loads the YAML configuration used by the fixture helpers and
holds the process-wide project root that fixture paths are resolved against.
Configuration files support environment variable expansion, so a checkout can
point the root elsewhere with ``SMITH_ROOT`` without editing the file.
"""

import copy
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from smith_testing.errors import ConfigurationError

logger = logging.getLogger(__name__)

_ENV_PATTERN = re.compile(r'\$\{([^}:]+)(?::-([^}]*))?\}')


class Settings:
    """Configuration settings loader and validator.

    Loads configuration from a YAML file, expands environment variables and
    checks that the required sections are present. When no file is given and
    none is found in the default locations, the built-in defaults are used.

    Attributes:
        config: The loaded configuration dictionary.
        config_path: Path to the configuration file, or None for defaults.
    """

    # Default configuration paths to search
    DEFAULT_CONFIG_PATHS = [
        "config/settings.yaml",
        "config/settings.yml",
        "./settings.yaml",
        "./settings.yml",
    ]

    REQUIRED_SECTIONS = [
        "paths",
    ]

    DEFAULTS: Dict[str, Any] = {
        "paths": {
            "project_root": "${SMITH_ROOT:-}",
            "resource_dir": "spec/resource",
        },
        "logging": {
            "level": "WARNING",
        },
    }

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        """Initialize Settings.

        Args:
            config_path: Path to the configuration file. If None, searches
                in default locations and falls back to built-in defaults.

        Raises:
            FileNotFoundError: If an explicit configuration file is missing.
            ValueError: If the configuration is invalid.
        """
        self.config_path: Optional[Path] = None
        self.config: Dict[str, Any] = {}

        if config_path:
            self.config_path = Path(config_path).resolve()
            self._load()
        else:
            self._find_and_load_config()

        self._validate_config()

    def _find_and_load_config(self) -> None:
        """Search for a configuration file, falling back to the defaults."""
        for path_str in self.DEFAULT_CONFIG_PATHS:
            path = Path(path_str)
            if path.exists():
                self.config_path = path.resolve()
                self._load()
                return

        logger.debug("No settings file found in %s, using defaults", self.DEFAULT_CONFIG_PATHS)
        self.config = self._expand_env_vars(copy.deepcopy(self.DEFAULTS))

    def _load(self) -> None:
        """Load configuration from YAML file.

        Raises:
            FileNotFoundError: If the configuration file doesn't exist.
            ValueError: If the YAML is invalid or empty.
        """
        if not self.config_path or not self.config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {self.config_path}")

        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                raw_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in configuration file: {e}") from e

        if raw_config is None:
            raise ValueError("Configuration file is empty")
        if not isinstance(raw_config, dict):
            raise ValueError("Configuration file must contain a mapping")

        self.config = self._expand_env_vars(raw_config)
        logger.debug("Loaded settings from %s", self.config_path)

    def _expand_env_vars(self, config: Any) -> Any:
        """Recursively expand environment variables in configuration.

        Supports ``${VAR_NAME}`` (empty string if unset) and
        ``${VAR_NAME:-default}`` (default if unset or empty).
        """
        if isinstance(config, dict):
            return {k: self._expand_env_vars(v) for k, v in config.items()}
        elif isinstance(config, list):
            return [self._expand_env_vars(item) for item in config]
        elif isinstance(config, str):

            def replace_env_var(match: re.Match) -> str:
                env_value = os.environ.get(match.group(1))
                if match.group(2) is None:
                    return env_value if env_value is not None else ""
                return env_value or match.group(2)

            return _ENV_PATTERN.sub(replace_env_var, config)
        else:
            return config

    def _validate_config(self) -> None:
        """Validate the loaded configuration.

        Raises:
            ValueError: If required sections are missing.
        """
        missing_sections = [
            s for s in self.REQUIRED_SECTIONS if not isinstance(self.config.get(s), dict)
        ]
        if missing_sections:
            raise ValueError(
                f"Missing required configuration sections: {missing_sections}"
            )

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value by dot-notation key.

        Args:
            key: Dot-separated key path (e.g., 'paths.resource_dir').
            default: Default value if key not found.

        Returns:
            The configuration value, or default if not found.

        Examples:
            >>> settings.get('paths.resource_dir')
            'spec/resource'
        """
        value = self.config
        for k in key.split("."):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value

    def get_section(self, section: str) -> Dict[str, Any]:
        """Get an entire configuration section.

        Raises:
            KeyError: If the section doesn't exist.
        """
        if section not in self.config:
            raise KeyError(f"Configuration section not found: {section}")
        return self.config[section]

    @property
    def project_root(self) -> Optional[str]:
        """Configured project root, or None when left blank."""
        return self.get("paths.project_root") or None

    @property
    def resource_dir(self) -> str:
        """Fixture directory relative to the project root."""
        return self.get("paths.resource_dir") or "spec/resource"

    @property
    def log_level(self) -> str:
        return str(self.get("logging.level", "WARNING")).upper()

    def __repr__(self) -> str:
        return f"Settings(config_path={self.config_path})"


# Global settings instance (lazy loaded)
_global_settings: Optional[Settings] = None

# Process-wide project root, set once when the test session starts
_project_root: Optional[str] = None


def load_settings(config_path: Optional[Union[str, Path]] = None) -> Settings:
    """Load or get the global settings instance.

    On first call, it loads the configuration. Subsequent calls return the
    cached instance and ignore ``config_path``.

    Examples:
        >>> settings = load_settings()
        >>> settings.resource_dir
        'spec/resource'
    """
    global _global_settings

    if _global_settings is None:
        _global_settings = Settings(config_path)

    return _global_settings


def reload_settings(config_path: Optional[Union[str, Path]] = None) -> Settings:
    """Force reload the global settings instance."""
    global _global_settings
    _global_settings = Settings(config_path)
    return _global_settings


def configure_project_root(path: Optional[Union[str, Path]]) -> Optional[str]:
    """Set the process-wide project root.

    Args:
        path: Root directory of the repository under test. Passing None
            clears the root.

    Returns:
        The previously configured root, so callers can restore it.

    Raises:
        ConfigurationError: If ``path`` is an empty string.
    """
    global _project_root

    if path is not None and not os.fspath(path):
        raise ConfigurationError("Project root must not be empty")

    previous = _project_root
    _project_root = os.fspath(path) if path is not None else None
    logger.debug("Project root set to %s", _project_root)
    return previous


def current_project_root() -> str:
    """Return the process-wide project root.

    Raises:
        ConfigurationError: If no project root has been configured.
    """
    if _project_root is None:
        raise ConfigurationError(
            "No project root available; call configure_project_root() "
            "or run under the smith_testing pytest plugin"
        )
    return _project_root


def configure_logging(settings: Settings) -> None:
    """Apply the configured log level to the package logger."""
    level = logging.getLevelName(settings.log_level)
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {settings.log_level}")
    logging.getLogger("smith_testing").setLevel(level)


def install_settings(settings: Optional[Settings]) -> Optional[Settings]:
    """Replace the global settings instance.

    Returns:
        The instance that was installed before, so callers can restore it.
    """
    global _global_settings
    previous = _global_settings
    _global_settings = settings
    return previous
