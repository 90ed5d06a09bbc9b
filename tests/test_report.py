"""Tests for command report templates."""

import pytest

from tagtree.index.audit import MissingGlob
from tagtree.report import ReportError, ReportRenderer


class TestReportRenderer:
    """Test report templates."""

    def test_whatis(self):
        """Tags and description are rendered."""
        text = ReportRenderer().render("whatis", tags=["a", "b"], description="Notes")
        assert text == "tags: [a, b]\n\nNotes"

    def test_whatis_without_description(self):
        """The description block is omitted when empty."""
        assert ReportRenderer().render("whatis", tags=["a"], description="") == "tags: [a]"

    def test_check_summary(self):
        """Problems are summarized."""
        text = ReportRenderer().render("check", missing=[MissingGlob("/d", "x")], errors=[])
        assert text.splitlines() == [
            "No files matching 'x' in /d",
            "1 unmatched pattern(s), 0 sidecar error(s).",
        ]

    def test_check_ok(self):
        """No problems renders a single line."""
        assert ReportRenderer().render("check", missing=[], errors=[]) == "No problems found."

    def test_count(self):
        """File and tag counts are rendered on two lines."""
        assert ReportRenderer().render("count", files=4, tags=9) == "4 tracked files\n9 tags"

    def test_custom_template(self):
        """Templates can be added."""
        renderer = ReportRenderer(templates={"hello": "Hello {{ name }}"})
        assert renderer.render("hello", name="tags") == "Hello tags"

    def test_template_variable(self):
        """Any variable name can be passed to a template."""
        renderer = ReportRenderer(templates={"echo": "{{ template }}"})
        assert renderer.render("echo", template="x") == "x"

    def test_unknown_template(self):
        """Unknown templates raise ReportError."""
        with pytest.raises(ReportError, match="Unknown report template"):
            ReportRenderer().render("nope")

    def test_missing_variable(self):
        """Missing variables raise ReportError."""
        with pytest.raises(ReportError):
            ReportRenderer().render("count", files=1)
