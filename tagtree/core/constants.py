"""
tagtree Foundation: Constants and Type Definitions

This module provides system-wide constants, error codes, sidecar file names
and type aliases.
"""
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Tuple, TypeAlias

# Version information
TAGTREE_VERSION = "1.0.0"


# Error codes (0-9 range)
class ErrorCode(IntEnum):
    """Standardized error codes for tagtree operations."""

    SUCCESS = 0  # Operation completed successfully
    INVALID_INPUT = 1  # Bad path, malformed sidecar or filter
    NOT_FOUND = 2  # File or directory doesn't exist
    PERMISSION_DENIED = 3  # Insufficient permissions
    CONFLICT = 4  # Resource conflict
    DEPENDENCY_ERROR = 5  # Missing dependency
    INTERNAL_ERROR = 6  # Bug in tagtree (e.g. traversal order violated)


# Type aliases for clarity
RelPath: TypeAlias = str
AbsPath: TypeAlias = str
Pattern: TypeAlias = str
TagName: TypeAlias = str


@dataclass(frozen=True)
class SidecarNames:
    """Names of the per-directory sidecar files.

    The primary name wins over the legacy name when both exist. The backup
    name is written by ``clean`` and, like the other two, is never reported
    as a directory child.
    """

    primary: str = ".ftag"
    legacy: str = ".fstore"
    backup: str = ".ftagbak"

    @property
    def candidates(self) -> Tuple[str, ...]:
        """Sidecar names in lookup precedence order."""
        return (self.primary, self.legacy)

    @property
    def reserved(self) -> Tuple[str, ...]:
        """Every name excluded from directory listings."""
        return (self.primary, self.legacy, self.backup)


DEFAULT_SIDECAR_NAMES = SidecarNames()


class HeaderType(Enum):
    """Headers recognized in a sidecar file."""

    PATH = "path"
    TAGS = "tags"
    DESC = "desc"


class EntryKind(Enum):
    """Kind of a directory child found during traversal."""

    FILE = "file"
    DIRECTORY = "directory"


# Characters that make a pattern a glob rather than a literal file name
GLOB_MAGIC_CHARS = frozenset("*?[")

# Characters that end a tag token inside a filter string
FILTER_OPERATOR_CHARS = frozenset("&|!()")

# Extensions used for format tags (compared case-insensitively)
VIDEO_EXTS = (".mov", ".mp4", ".mkv", ".avi", ".webm", ".wmv", ".m4v", ".mpg", ".mpeg", ".flv")
IMAGE_EXTS = (".jpg", ".jpeg", ".png", ".gif", ".bmp", ".tif", ".tiff", ".webp", ".heic", ".svg")
AUDIO_EXTS = (".mp3", ".wav", ".flac", ".ogg", ".m4a", ".aac", ".wma", ".opus")
DOCUMENT_EXTS = (
    ".pdf",
    ".doc",
    ".docx",
    ".odt",
    ".rtf",
    ".txt",
    ".md",
    ".xls",
    ".xlsx",
    ".ppt",
    ".pptx",
)

FORMAT_TAGS = (
    (VIDEO_EXTS, "video"),
    (IMAGE_EXTS, "image"),
    (AUDIO_EXTS, "audio"),
    (DOCUMENT_EXTS, "document"),
)


# Configuration keys
class ConfigKey:
    """Configuration key constants (dot-separated paths)."""

    SIDECAR_PRIMARY = "tagtree.sidecar.primary"
    SIDECAR_LEGACY = "tagtree.sidecar.legacy"
    SIDECAR_BACKUP = "tagtree.sidecar.backup"
    INDEX_FORMATS = "tagtree.index.formats"
    LOGGING_LEVEL = "tagtree.logging.level"
    LOGGING_FILE = "tagtree.logging.file"


# Default configuration values
DEFAULT_CONFIG = {
    "tagtree": {
        "sidecar": {
            "primary": DEFAULT_SIDECAR_NAMES.primary,
            "legacy": DEFAULT_SIDECAR_NAMES.legacy,
            "backup": DEFAULT_SIDECAR_NAMES.backup,
        },
        "index": {
            "formats": False,
        },
        "logging": {
            "level": "WARNING",
            "file": None,
        },
    }
}
