#!/usr/bin/env python3
"""Tests for the tagtree error hierarchy and constants."""

import pytest

from tagtree.core.constants import (
    DEFAULT_CONFIG,
    DEFAULT_SIDECAR_NAMES,
    ErrorCode,
    SidecarNames,
)
from tagtree.core.errors import (
    FilterErrorKind,
    FilterParseError,
    InheritanceError,
    InvalidPathError,
    SidecarParseError,
    SidecarReadError,
    TagTreeError,
)


class TestErrorHierarchy:
    """Tests for TagTreeError subclasses."""

    @pytest.mark.parametrize(
        "error",
        [
            InvalidPathError("/nope"),
            SidecarReadError("/x/.ftag"),
            SidecarParseError("/x/.ftag", "bad"),
            FilterParseError(FilterErrorKind.EMPTY_QUERY),
            InheritanceError("/a", "/b/c/d"),
        ],
    )
    def test_subclasses_base(self, error):
        """Every error is a TagTreeError with a message."""
        assert isinstance(error, TagTreeError)
        assert error.message
        assert str(error) == error.message

    def test_default_error_code(self):
        """Base error defaults to INVALID_INPUT."""
        assert TagTreeError("oops").error_code == ErrorCode.INVALID_INPUT

    def test_invalid_path(self):
        """InvalidPathError carries path and reason."""
        error = InvalidPathError("/missing", "does not exist")
        assert error.path == "/missing"
        assert error.error_code == ErrorCode.NOT_FOUND
        assert "does not exist" in error.message

    def test_sidecar_read_permission(self):
        """Permission problems map to PERMISSION_DENIED."""
        error = SidecarReadError("/x/.ftag", PermissionError("denied"))
        assert error.error_code == ErrorCode.PERMISSION_DENIED
        assert error.cause is not None

    def test_sidecar_read_other(self):
        """Other read problems map to INVALID_INPUT."""
        error = SidecarReadError("/x/.ftag", UnicodeDecodeError("utf-8", b"\xff", 0, 1, "bad"))
        assert error.error_code == ErrorCode.INVALID_INPUT

    def test_sidecar_parse_reason(self):
        """Parse errors mention path and reason."""
        error = SidecarParseError("/x/.ftag", "Cannot find the first header in the file.")
        assert error.reason.startswith("Cannot find")
        assert "/x/.ftag" in error.message

    def test_filter_parse_kind(self):
        """Filter errors keep their kind and text."""
        error = FilterParseError(FilterErrorKind.MALFORMED_PARENS, "(a")
        assert error.kind is FilterErrorKind.MALFORMED_PARENS
        assert error.text == "(a"
        assert "(a" in error.message

    def test_inheritance_internal(self):
        """Inheritance errors are internal errors."""
        error = InheritanceError("/a", "/b/c/d")
        assert error.error_code == ErrorCode.INTERNAL_ERROR
        assert error.previous == "/a"
        assert error.current == "/b/c/d"


class TestSidecarNames:
    """Tests for SidecarNames."""

    def test_defaults(self):
        """Default names."""
        assert DEFAULT_SIDECAR_NAMES.primary == ".ftag"
        assert DEFAULT_SIDECAR_NAMES.legacy == ".fstore"
        assert DEFAULT_SIDECAR_NAMES.backup == ".ftagbak"

    def test_candidates_order(self):
        """Primary precedes legacy; backup is never a candidate."""
        names = SidecarNames("a", "b", "c")
        assert names.candidates == ("a", "b")
        assert names.reserved == ("a", "b", "c")

    def test_default_config_matches(self):
        """Default config mirrors the default names."""
        sidecar = DEFAULT_CONFIG["tagtree"]["sidecar"]
        assert sidecar["primary"] == DEFAULT_SIDECAR_NAMES.primary
        assert DEFAULT_CONFIG["tagtree"]["index"]["formats"] is False
