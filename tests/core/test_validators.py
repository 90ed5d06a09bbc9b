#!/usr/bin/env python3
"""Tests for tagtree validators."""

import copy
import os

import pytest

from tagtree.core.constants import DEFAULT_CONFIG
from tagtree.core.errors import InvalidPathError
from tagtree.core.validators import (
    ValidationError,
    validate_config,
    validate_root_path,
    validate_sidecar_name,
)


class TestValidateConfig:
    """Tests for validate_config."""

    def test_defaults_valid(self):
        """Compiled defaults pass validation."""
        assert validate_config(DEFAULT_CONFIG) is True

    def test_empty_valid(self):
        """An empty configuration is valid."""
        assert validate_config({}) is True

    def test_not_dict(self):
        """Configuration must be a dict."""
        with pytest.raises(ValidationError):
            validate_config(["tagtree"])

    def test_section_not_dict(self):
        """The tagtree section must be a dict."""
        with pytest.raises(ValidationError, match="tagtree"):
            validate_config({"tagtree": "yes"})

    def test_formats_must_be_bool(self):
        """index.formats must be boolean."""
        with pytest.raises(ValidationError, match="formats"):
            validate_config({"tagtree": {"index": {"formats": "sometimes"}}})

    def test_bad_log_level(self):
        """Unknown log levels are rejected."""
        with pytest.raises(ValidationError, match="log level"):
            validate_config({"tagtree": {"logging": {"level": "LOUD"}}})

    def test_lowercase_log_level(self):
        """Log levels are case-insensitive."""
        assert validate_config({"tagtree": {"logging": {"level": "debug"}}})

    def test_duplicate_sidecar_names(self):
        """Sidecar names must differ."""
        config = copy.deepcopy(DEFAULT_CONFIG)
        config["tagtree"]["sidecar"]["backup"] = ".ftag"
        with pytest.raises(ValidationError, match="differ"):
            validate_config(config)

    def test_invalid_sidecar_name(self):
        """Sidecar names are validated."""
        with pytest.raises(ValidationError, match="sidecar.primary"):
            validate_config({"tagtree": {"sidecar": {"primary": "a/b"}}})


class TestValidateSidecarName:
    """Tests for validate_sidecar_name."""

    @pytest.mark.parametrize("name", [".ftag", "tags.txt", ".meta"])
    def test_valid(self, name):
        """Plain file names are valid."""
        assert validate_sidecar_name(name)

    @pytest.mark.parametrize("name", ["", ".", "..", "a/b", "a\0b"])
    def test_invalid(self, name):
        """Empty, special and path-like names are rejected."""
        with pytest.raises(ValidationError):
            validate_sidecar_name(name)

    def test_not_string(self):
        """Non-strings are rejected."""
        with pytest.raises(ValidationError, match="string"):
            validate_sidecar_name(42)


class TestValidateRootPath:
    """Tests for validate_root_path."""

    def test_directory(self, tmp_path):
        """Existing directories are returned absolute."""
        assert validate_root_path(tmp_path) == os.path.abspath(tmp_path)

    def test_relative(self, tmp_path, monkeypatch):
        """Relative paths are made absolute."""
        monkeypatch.chdir(tmp_path)
        assert validate_root_path(".") == os.path.abspath(tmp_path)

    def test_missing(self, tmp_path):
        """Missing paths raise InvalidPathError."""
        with pytest.raises(InvalidPathError, match="does not exist"):
            validate_root_path(tmp_path / "nope")

    def test_file(self, tmp_path):
        """Files are not valid roots."""
        target = tmp_path / "file.txt"
        target.write_text("x")
        with pytest.raises(InvalidPathError, match="not a directory"):
            validate_root_path(target)

    def test_empty(self):
        """Empty paths are rejected."""
        with pytest.raises(InvalidPathError):
            validate_root_path("")
