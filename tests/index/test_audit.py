#!/usr/bin/env python3
"""Tests for check, untracked, tags, count, search, whatis and clean."""

import os

import pytest

from tagtree.core.errors import InvalidPathError, SidecarParseError
from tagtree.index.audit import (
    MissingGlob,
    WhatIs,
    check,
    clean,
    count_files_tags,
    get_all_tags,
    search,
    untracked_files,
    what_is,
)
from tagtree.index.loader import parse_sidecar
from tagtree.index.table import TagTable

BEACH = os.path.join("photos", "1998_beach.jpg")
CITY = os.path.join("photos", "city.jpg")
REPORT = os.path.join("docs", "report.pdf")


class TestCheck:
    """Tests for check."""

    def test_missing_glob(self, tagged_tree):
        """Patterns matching nothing are reported."""
        result = check(str(tagged_tree))
        assert result.missing == [MissingGlob(str(tagged_tree / "docs"), "missing.txt")]
        assert result.errors == []
        assert not result.ok

    def test_clean_tree(self, tmp_path, make_tree):
        """A consistent tree has no problems."""
        make_tree(tmp_path, {".ftag": "[path]\n*.txt", "a.txt": "a"})
        assert check(str(tmp_path)).ok

    def test_errors_collected(self, tagged_tree):
        """Malformed sidecars are reported alongside missing globs."""
        (tagged_tree / "photos" / ".ftag").write_text("[bad]")
        result = check(str(tagged_tree))
        assert len(result.errors) == 1
        assert isinstance(result.errors[0], SidecarParseError)
        assert len(result.missing) == 1

    def test_message(self):
        """MissingGlob renders a readable message."""
        assert str(MissingGlob("/d", "x.txt")) == "No files matching 'x.txt' in /d"


class TestUntracked:
    """Tests for untracked_files."""

    def test_untracked(self, tagged_tree):
        """Unmatched files and files without sidecars are untracked."""
        assert untracked_files(str(tagged_tree)) == [
            "stray.bin",
            os.path.join("docs", "2021_summary.txt"),
            os.path.join("photos", "raw", "img.cr2"),
        ]

    def test_all_tracked(self, tmp_path, make_tree):
        """Nothing is reported when every file is matched."""
        make_tree(tmp_path, {".ftag": "[path]\n*", "a.txt": "a"})
        assert untracked_files(str(tmp_path)) == []


class TestTags:
    """Tests for get_all_tags and count_files_tags."""

    def test_all_tags(self, tagged_tree):
        """Explicit and implicit tags are listed sorted and distinct."""
        assert get_all_tags(str(tagged_tree)) == [
            "1998",
            "draft",
            "ghost",
            "image",
            "misc",
            "photos",
            "project",
            "report",
            "travel",
        ]

    def test_count(self, tagged_tree):
        """Tracked files and distinct tags are counted."""
        assert count_files_tags(str(tagged_tree)) == (4, 9)

    def test_empty(self, tmp_path):
        """Empty trees have nothing."""
        assert get_all_tags(str(tmp_path)) == []
        assert count_files_tags(str(tmp_path)) == (0, 0)


class TestSearch:
    """Tests for search."""

    def test_tag_keyword(self, tagged_tree):
        """Keywords match tags case-insensitively."""
        assert search(str(tagged_tree), "TRAVEL") == [BEACH, CITY]

    def test_substring(self, tagged_tree):
        """Keywords match inside tags."""
        assert search(str(tagged_tree), "dra") == [REPORT]

    def test_description_keyword(self, tagged_tree):
        """Keywords match group descriptions."""
        assert search(str(tagged_tree), "quarterly") == [REPORT]
        assert search(str(tagged_tree), "holiday") == [BEACH, CITY]

    def test_any_keyword(self, tagged_tree):
        """Any keyword is enough."""
        assert search(str(tagged_tree), "misc quarterly") == [REPORT, "notes.txt"]

    def test_inherited_tags(self, tagged_tree):
        """Inherited tags count."""
        assert len(search(str(tagged_tree), "project")) == 4

    def test_no_keywords(self, tagged_tree):
        """Blank searches find nothing."""
        assert search(str(tagged_tree), "   ") == []


class TestWhatIs:
    """Tests for what_is."""

    def test_file(self, tagged_tree):
        """Files combine directory and group tags and descriptions."""
        info = what_is(str(tagged_tree / "notes.txt"))
        assert info == WhatIs(tags=["misc", "project"], description="Project root.")

    def test_file_group_desc(self, tagged_tree):
        """Group descriptions come before the directory description."""
        info = what_is(str(tagged_tree / "photos" / "city.jpg"))
        assert info.tags == ["image", "photos", "travel"]
        assert info.description == "Holiday pictures."

    def test_multiple_groups(self, tmp_path, make_tree):
        """Every matching group contributes."""
        make_tree(
            tmp_path,
            {
                ".ftag": "[desc]\nDir.\n[path]\na.txt\n[tags]\nx\n[desc]\nFirst.\n"
                "[path]\n*.txt\n[tags]\ny x\n[desc]\nSecond.",
                "a.txt": "a",
            },
        )
        info = what_is(str(tmp_path / "a.txt"))
        assert info.tags == ["x", "y"]
        assert info.description == "First.\nSecond.\nDir."

    def test_literal_name_with_brackets(self, tmp_path, make_tree):
        """A declared name containing wildcard characters matches itself."""
        make_tree(
            tmp_path,
            {
                ".ftag": "[path]\nphoto[1].jpg\n[tags]\nbracket\n[desc]\nLiteral.",
                "photo[1].jpg": "jpg",
            },
        )
        info = what_is(str(tmp_path / "photo[1].jpg"))
        assert info == WhatIs(tags=["bracket"], description="Literal.")
        assert TagTable.from_dir(str(tmp_path)).file_tags("photo[1].jpg") == ["bracket"]

    def test_directory(self, tagged_tree):
        """Directories report their own tags and description."""
        assert what_is(str(tagged_tree)) == WhatIs(tags=["project"], description="Project root.")

    def test_no_sidecar(self, tagged_tree):
        """Paths without a sidecar raise InvalidPathError."""
        with pytest.raises(InvalidPathError):
            what_is(str(tagged_tree / "photos" / "raw" / "img.cr2"))

    def test_missing_path(self, tagged_tree):
        """Missing paths raise InvalidPathError."""
        with pytest.raises(InvalidPathError):
            what_is(str(tagged_tree / "nope.txt"))


class TestClean:
    """Tests for clean."""

    def test_drops_unmatched(self, tagged_tree):
        """Patterns matching nothing are removed."""
        assert clean(str(tagged_tree)) == 3
        data = parse_sidecar((tagged_tree / "docs" / ".ftag").read_text())
        assert [f.path for f in data.files] == ["report.pdf"]
        assert data.tags == ["draft"]
        assert check(str(tagged_tree)).ok

    def test_backup(self, tagged_tree):
        """The previous content is kept in the backup file."""
        before = (tagged_tree / "docs" / ".ftag").read_text()
        clean(str(tagged_tree))
        assert (tagged_tree / "docs" / ".ftagbak").read_text() == before

    def test_merges_groups(self, tmp_path, make_tree):
        """Groups with the same tags and description are merged."""
        make_tree(
            tmp_path,
            {
                ".ftag": "[path]\na.txt\n[tags]\nx y\n[path]\nb.txt\n[tags]\ny x\n"
                "[path]\nc.txt\n[tags]\nz",
                "a.txt": "a",
                "b.txt": "b",
                "c.txt": "c",
            },
        )
        clean(str(tmp_path))
        data = parse_sidecar((tmp_path / ".ftag").read_text())
        assert [[f.path for f in g] for g in data.groups()] == [["a.txt", "b.txt"], ["c.txt"]]
        assert data.files[1].tags == ["x", "y"]

    def test_preserves_query_results(self, tagged_tree):
        """Cleaning doesn't change what files carry."""
        before = {f: TagTable.from_dir(str(tagged_tree)).file_tags(f) for f in ["notes.txt", BEACH]}
        clean(str(tagged_tree))
        table = TagTable.from_dir(str(tagged_tree))
        assert {f: table.file_tags(f) for f in before} == before

    def test_skips_broken(self, tagged_tree):
        """Malformed sidecars are left untouched."""
        (tagged_tree / "docs" / ".ftag").write_text("oops")
        assert clean(str(tagged_tree)) == 2
        assert (tagged_tree / "docs" / ".ftag").read_text() == "oops"
