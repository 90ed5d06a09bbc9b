#!/usr/bin/env python3
"""Hierarchical configuration manager for tagtree.

This module provides configuration management with:
- Layered precedence (defaults, YAML file, environment, CLI arguments)
- Environment variable overrides (TAGTREE_*)
- Dot-separated key lookup
- Validation of the merged result

Example:
    >>> config = ConfigManager("~/.config/tagtree/config.yaml")
    >>> config.get("tagtree.sidecar.primary")
    '.ftag'
"""

import os
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from tagtree.core.constants import DEFAULT_CONFIG, ErrorCode
from tagtree.core.errors import TagTreeError
from tagtree.core.validators import ValidationError, validate_config

ENV_PREFIX = "TAGTREE_"


class ConfigSource(Enum):
    """Configuration source precedence levels."""

    COMPILED_DEFAULTS = 1  # Lowest precedence
    USER_CONFIG = 2
    ENVIRONMENT = 3
    CLI_ARGS = 4
    RUNTIME = 5  # Highest precedence


class ConfigError(TagTreeError):
    """Configuration error."""

    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.INVALID_INPUT):
        super().__init__(message, error_code)


def parse_env_value(value: str) -> Any:
    """Convert an environment value to bool, int, float or str."""
    if value.lower() in ("true", "yes"):
        return True
    if value.lower() in ("false", "no"):
        return False

    for convert in (int, float):
        try:
            return convert(value)
        except ValueError:
            pass

    return value


def _deep_merge(base: Dict[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    result = dict(base)
    for key, value in override.items():
        if isinstance(value, dict):
            current = result.get(key)
            result[key] = _deep_merge(current if isinstance(current, dict) else {}, value)
        else:
            result[key] = value
    return result


def _lookup(config: Mapping[str, Any], key: str) -> Optional[Any]:
    current: Any = config
    for part in key.split("."):
        if not isinstance(current, dict) or part not in current:
            return None
        current = current[part]
    return current


class ConfigManager:
    """Layered configuration for one tagtree run.

    Lookups search from the highest precedence layer down:
    1. Runtime updates
    2. CLI arguments (--debug, --log-file)
    3. Environment variables (TAGTREE_SECTION_KEY)
    4. User config file (--config)
    5. Compiled defaults (``DEFAULT_CONFIG``)
    """

    def __init__(
        self,
        config_file: Optional[str] = None,
        load_environment: bool = True,
    ):
        """Initialize configuration manager.

        Args:
            config_file: Optional YAML file to load as the user config
            load_environment: Whether to read TAGTREE_* variables
        """
        self._layers: Dict[ConfigSource, Dict[str, Any]] = {
            ConfigSource.COMPILED_DEFAULTS: _deep_merge({}, DEFAULT_CONFIG),
        }

        if config_file:
            self.load_file(config_file)

        if load_environment:
            self._load_environment(os.environ)

    def load_file(self, file_path: str, source: ConfigSource = ConfigSource.USER_CONFIG) -> None:
        """Load configuration from YAML file.

        Args:
            file_path: Path to YAML config file
            source: Configuration source level

        Raises:
            ConfigError: If file cannot be loaded or parsed
        """
        path = Path(file_path).expanduser()

        if not path.exists():
            raise ConfigError(f"Config file not found: {file_path}", ErrorCode.NOT_FOUND)

        try:
            with open(path, "r", encoding="utf-8") as f:
                config_data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"YAML parse error in {file_path}: {e}", ErrorCode.INVALID_INPUT)
        except OSError as e:
            raise ConfigError(f"Error loading config {file_path}: {e}", ErrorCode.PERMISSION_DENIED)

        if config_data is None:
            config_data = {}

        if not isinstance(config_data, dict):
            raise ConfigError(f"Invalid config format in {file_path}", ErrorCode.INVALID_INPUT)

        self._layers[source] = config_data

    def _load_environment(self, environ: Mapping[str, str]) -> None:
        """Map TAGTREE_SECTION_KEY=value onto tagtree.section.key.

        Example: TAGTREE_SIDECAR_PRIMARY=.meta sets tagtree.sidecar.primary
        """
        env_config: Dict[str, Any] = {}

        for key, value in environ.items():
            if not key.startswith(ENV_PREFIX):
                continue

            parts = key[len(ENV_PREFIX):].lower().split("_")
            if not all(parts):
                continue

            current = env_config
            for part in parts[:-1]:
                if not isinstance(current.get(part), dict):
                    current[part] = {}
                current = current[part]
            current[parts[-1]] = parse_env_value(value)

        if env_config:
            self._layers[ConfigSource.ENVIRONMENT] = {"tagtree": env_config}

    def _ordered(self, reverse: bool = False):
        return sorted(self._layers.items(), key=lambda item: item[0].value, reverse=reverse)

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by key.

        Args:
            key: Dot-separated key path (e.g., "tagtree.index.formats")
            default: Default value if no layer sets the key
        """
        for _, layer in self._ordered(reverse=True):
            value = _lookup(layer, key)
            if value is not None:
                return value
        return default

    def set(self, key: str, value: Any, source: ConfigSource = ConfigSource.RUNTIME) -> None:
        """Set a dot-separated key in one layer."""
        current = self._layers.setdefault(source, {})
        *parents, last = key.split(".")
        for part in parents:
            if not isinstance(current.get(part), dict):
                current[part] = {}
            current = current[part]
        current[last] = value

    def _merged(self) -> Dict[str, Any]:
        merged: Dict[str, Any] = {}
        for _, layer in self._ordered():
            merged = _deep_merge(merged, layer)
        return merged

    def validate(self) -> bool:
        """Validate the merged configuration.

        Raises:
            ConfigError: If validation fails
        """
        try:
            return validate_config(self._merged())
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration: {e}")
