#!/usr/bin/env python3
"""Layered settings for dots.

This module resolves tool settings (repository directory, rule file,
logging) from several sources:
- Compiled defaults
- A YAML settings file
- DOTS_* environment variables
- Command-line arguments

Sources with higher precedence override lower ones key by key.

Example:
    >>> config = ConfigManager()
    >>> config.load_file("~/.config/dots/config.yaml")
    >>> config.get("dots.logging.level")
    'WARNING'
    >>> config.rules_path()
    PosixPath('/home/me/.dots/rules.yaml')
"""

import copy
import os
import threading
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from dots.core.constants import Defaults, ErrorCode
from dots.core.errors import ConfigError
from dots.core.path_utils import expand_path, shorten_path


class ConfigSource(Enum):
    """Configuration source precedence levels."""

    COMPILED_DEFAULTS = 1  # Lowest precedence
    USER_CONFIG = 2
    ENVIRONMENT = 3
    CLI_ARGS = 4  # Highest precedence


# Environment variable → dotted settings key
ENVIRONMENT_KEYS: Dict[str, str] = {
    Defaults.ENV_PREFIX + key.replace(".", "_").upper(): f"dots.{key}"
    for key in ("dir", "rules_file", "logging.level", "logging.file")
}


class ConfigManager:
    """Hierarchical settings manager.

    Precedence, lowest first:
    1. Compiled defaults
    2. Settings file (~/.config/dots/config.yaml or --config)
    3. Environment variables (DOTS_*)
    4. CLI arguments
    """

    DEFAULT_CONFIG = {
        "dots": {
            "dir": Defaults.DOTS_DIR,
            "rules_file": None,
            "logging": {
                "level": Defaults.LOG_LEVEL,
                "file": None,
            },
        }
    }

    def __init__(
        self,
        config_file: Optional[str] = None,
        environ: Optional[Mapping[str, str]] = None,
    ):
        """Initialize configuration manager.

        Args:
            config_file: Optional settings file to load
            environ: Environment to read DOTS_* variables from (defaults to os.environ)
        """
        self._config: Dict[ConfigSource, Dict[str, Any]] = {}
        self._lock = threading.RLock()

        self._config[ConfigSource.COMPILED_DEFAULTS] = copy.deepcopy(self.DEFAULT_CONFIG)

        if config_file:
            self.load_file(config_file)

        self._load_environment(os.environ if environ is None else environ)

    def load_file(self, file_path: str, source: ConfigSource = ConfigSource.USER_CONFIG) -> None:
        """Load settings from a YAML file.

        Args:
            file_path: Path to YAML settings file
            source: Configuration source level

        Raises:
            ConfigError: If file cannot be loaded or parsed
        """
        path = expand_path(file_path)

        if not path.exists():
            raise ConfigError(f"Config file not found: {shorten_path(path)}", ErrorCode.NOT_FOUND)

        try:
            with open(path, "r", encoding="utf-8") as f:
                config_data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"YAML parse error in {shorten_path(path)}: {e}")
        except OSError as e:
            raise ConfigError(f"Error loading config {shorten_path(path)}: {e}")

        if config_data is None:
            config_data = {}

        if not isinstance(config_data, dict):
            raise ConfigError(f"Invalid config format in {shorten_path(path)}")

        if "dots" not in config_data:
            config_data = {"dots": config_data}

        with self._lock:
            self._config[source] = config_data

    def load_default_file(self) -> bool:
        """Load the default settings file if it exists.

        Returns:
            True if a file was loaded
        """
        path = expand_path(Defaults.SETTINGS_FILE)
        if not path.is_file():
            return False
        self.load_file(str(path))
        return True

    def load_dict(self, config_data: Dict[str, Any], source: ConfigSource = ConfigSource.CLI_ARGS) -> None:
        """Load settings from a dictionary.

        Args:
            config_data: Settings dictionary
            source: Configuration source level
        """
        with self._lock:
            self._config[source] = copy.deepcopy(config_data)

    def _load_environment(self, environ: Mapping[str, str]) -> None:
        env_config: Dict[str, Any] = {}

        for name, key in ENVIRONMENT_KEYS.items():
            value = environ.get(name)
            if value:
                self._set_nested(env_config, key, value)

        if env_config:
            with self._lock:
                self._config[ConfigSource.ENVIRONMENT] = env_config

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by key.

        Args:
            key: Dot-separated key path (e.g., "dots.logging.level")
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        with self._lock:
            for source in sorted(self._config.keys(), key=lambda s: s.value, reverse=True):
                value = self._get_nested(self._config[source], key)
                if value is not None:
                    return value

            return default

    def _get_nested(self, config: Dict[str, Any], key: str) -> Optional[Any]:
        current: Any = config
        for part in key.split("."):
            if not isinstance(current, dict) or part not in current:
                return None
            current = current[part]
        return current

    def _set_nested(self, config: Dict[str, Any], key: str, value: Any) -> None:
        parts = key.split(".")
        current = config
        for part in parts[:-1]:
            current = current.setdefault(part, {})
        current[parts[-1]] = value

    def set(self, key: str, value: Any, source: ConfigSource = ConfigSource.CLI_ARGS) -> None:
        """Set configuration value.

        Args:
            key: Dot-separated key path
            value: Value to set
            source: Configuration source level
        """
        with self._lock:
            self._set_nested(self._config.setdefault(source, {}), key, value)

    def get_all(self) -> Dict[str, Any]:
        """Get merged configuration from all sources."""
        with self._lock:
            merged: Dict[str, Any] = {}
            for source in sorted(self._config.keys(), key=lambda s: s.value):
                merged = self._deep_merge(merged, self._config[source])
            return merged

    def _deep_merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            elif value is not None:
                result[key] = value

        return result

    def dots_dir(self) -> Path:
        """Absolute path of the dots repository directory."""
        return expand_path(self.get("dots.dir", Defaults.DOTS_DIR))

    def rules_path(self) -> Path:
        """Absolute path of the rule file.

        Defaults to rules.yaml inside the dots directory.
        """
        rules_file = self.get("dots.rules_file")
        if rules_file:
            return expand_path(rules_file)
        return self.dots_dir() / Defaults.RULES_FILE_NAME

    def clear(self, source: Optional[ConfigSource] = None) -> None:
        """Clear configuration.

        Args:
            source: Specific source to clear, or None for all except defaults
        """
        with self._lock:
            if source:
                if source in self._config and source != ConfigSource.COMPILED_DEFAULTS:
                    del self._config[source]
            else:
                for s in [s for s in self._config if s != ConfigSource.COMPILED_DEFAULTS]:
                    del self._config[s]

