"""
tagtree Foundation: Error Types.

Every failure that crosses the library boundary is a ``TagTreeError``
subclass carrying a message and an ``ErrorCode``. Callers (CLI, TUI, GUI)
map these to user-visible messages instead of crashing.
"""
from enum import Enum
from typing import Optional

from tagtree.core.constants import ErrorCode


class TagTreeError(Exception):
    """Base exception for tagtree operations."""

    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.INVALID_INPUT):
        """Initialize TagTreeError.

        Args:
            message: Error message
            error_code: Associated error code
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code


class InvalidPathError(TagTreeError):
    """A root or target path does not exist or has the wrong kind."""

    def __init__(self, path: str, reason: Optional[str] = None):
        self.path = str(path)
        message = f"Invalid path: {self.path}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message, ErrorCode.NOT_FOUND)


class SidecarReadError(TagTreeError):
    """A sidecar file exists but could not be read."""

    def __init__(self, path: str, cause: Optional[Exception] = None):
        self.path = str(path)
        self.cause = cause
        code = (
            ErrorCode.PERMISSION_DENIED
            if isinstance(cause, PermissionError)
            else ErrorCode.INVALID_INPUT
        )
        message = f"Cannot read sidecar file: {self.path}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message, code)


class SidecarParseError(TagTreeError):
    """A sidecar file is structurally malformed."""

    def __init__(self, path: str, reason: str):
        self.path = str(path)
        self.reason = reason
        super().__init__(f"Cannot parse sidecar file {self.path}: {reason}")


class FilterErrorKind(Enum):
    """The distinct ways a filter string can be malformed."""

    EMPTY_QUERY = "empty query"
    MALFORMED_PARENS = "unbalanced parentheses"
    EXPECTED_BINARY_OPERATOR = "expected a binary operator between operands"
    UNEXPECTED_BINARY_OPERATOR = "unexpected binary operator"
    END_OF_TOKENS = "unexpected end of filter"


class FilterParseError(TagTreeError):
    """A filter string could not be parsed."""

    def __init__(self, kind: FilterErrorKind, text: str = ""):
        self.kind = kind
        self.text = text
        super().__init__(f"Invalid filter '{text}': {kind.value}")


class InheritanceError(TagTreeError):
    """The traversal produced a path transition that is neither descend nor ascend."""

    def __init__(self, previous: Optional[str], current: str):
        self.previous = previous
        self.current = current
        super().__init__(
            f"Directory traversal failed: cannot move from {previous} to {current}",
            ErrorCode.INTERNAL_ERROR,
        )
