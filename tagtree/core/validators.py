"""
tagtree Foundation: Input Validators.

This module provides validation functions for configuration, root paths
and sidecar file names.
"""
import os
from typing import Any, Dict, Union

from tagtree.core.constants import ErrorCode
from tagtree.core.errors import InvalidPathError, TagTreeError

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class ValidationError(TagTreeError):
    """Base exception for validation errors."""

    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.INVALID_INPUT):
        """Initialize ValidationError.

        Args:
            message: Error message
            error_code: Associated error code
        """
        super().__init__(message, error_code)


def validate_config(config: Dict[str, Any]) -> bool:
    """Validate tagtree configuration structure.

    Args:
        config: Configuration dictionary (merged, with a top-level "tagtree" key)

    Returns:
        True if valid

    Raises:
        ValidationError: If configuration is invalid
    """
    if not isinstance(config, dict):
        raise ValidationError("Configuration must be a dictionary")

    section = config.get("tagtree", {})
    if not isinstance(section, dict):
        raise ValidationError("The 'tagtree' section must be a dictionary")

    sidecar = section.get("sidecar", {})
    if not isinstance(sidecar, dict):
        raise ValidationError("The 'sidecar' section must be a dictionary")
    for key in ("primary", "legacy", "backup"):
        if key in sidecar:
            try:
                validate_sidecar_name(sidecar[key])
            except ValidationError as e:
                raise ValidationError(f"Invalid sidecar.{key}: {e}")

    names = [sidecar[key] for key in ("primary", "legacy", "backup") if key in sidecar]
    if len(set(names)) != len(names):
        raise ValidationError("Sidecar primary, legacy and backup names must differ")

    index = section.get("index", {})
    if not isinstance(index, dict):
        raise ValidationError("The 'index' section must be a dictionary")
    if "formats" in index and not isinstance(index["formats"], bool):
        raise ValidationError(f"index.formats must be boolean: {index['formats']}")

    logging_cfg = section.get("logging", {})
    if not isinstance(logging_cfg, dict):
        raise ValidationError("The 'logging' section must be a dictionary")
    if "level" in logging_cfg:
        level = logging_cfg["level"]
        if not isinstance(level, str) or level.upper() not in _LOG_LEVELS:
            raise ValidationError(
                f"Invalid log level: {level}. Must be one of {sorted(_LOG_LEVELS)}"
            )

    return True


def validate_sidecar_name(name: str) -> bool:
    """Validate a sidecar file name.

    Args:
        name: Bare file name (no directory part)

    Returns:
        True if valid

    Raises:
        ValidationError: If the name is empty or not a plain file name
    """
    if not isinstance(name, str):
        raise ValidationError(f"Sidecar name must be string, got {type(name)}")

    if not name:
        raise ValidationError("Sidecar name cannot be empty")

    if name in (".", ".."):
        raise ValidationError(f"Sidecar name cannot be '{name}'")

    if "/" in name or os.sep in name:
        raise ValidationError(f"Sidecar name must not contain a path separator: {name}")

    if "\0" in name:
        raise ValidationError("Sidecar name contains null bytes")

    return True


def validate_root_path(path: Union[str, os.PathLike]) -> str:
    """Validate a traversal root and return it as an absolute path.

    Args:
        path: Directory to index

    Returns:
        Absolute, normalized path string

    Raises:
        InvalidPathError: If the path doesn't exist or is not a directory
    """
    if not path:
        raise InvalidPathError(str(path), "empty path")

    abs_path = os.path.abspath(os.fspath(path))

    if not os.path.exists(abs_path):
        raise InvalidPathError(abs_path, "does not exist")

    if not os.path.isdir(abs_path):
        raise InvalidPathError(abs_path, "not a directory")

    return abs_path
