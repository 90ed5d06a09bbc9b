#!/usr/bin/env python3
"""Text reports for CLI commands, rendered with Jinja2.

Example:
    >>> renderer = ReportRenderer()
    >>> renderer.render("whatis", tags=["a", "b"], description="Notes")
    'tags: [a, b]\\n\\nNotes'
"""

from typing import Any, Dict, Optional

import jinja2

from tagtree.core.constants import ErrorCode
from tagtree.core.errors import TagTreeError

TEMPLATES: Dict[str, str] = {
    "whatis": (
        "tags: [{{ tags | join(', ') }}]"
        "{% if description %}\n\n{{ description }}{% endif %}"
    ),
    "check": (
        "{% for item in missing %}"
        "No files matching '{{ item.pattern }}' in {{ item.dir }}\n"
        "{% endfor %}"
        "{% for error in errors %}"
        "{{ error.message }}\n"
        "{% endfor %}"
        "{% if not missing and not errors %}No problems found.{% else %}"
        "{{ missing | length }} unmatched pattern(s), {{ errors | length }} sidecar error(s)."
        "{% endif %}"
    ),
    "count": "{{ files }} tracked files\n{{ tags }} tags",
    "clean": "Rewrote {{ count }} sidecar file(s).",
}


class ReportError(TagTreeError):
    """A report template failed to render."""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.INTERNAL_ERROR)


class ReportRenderer:
    """Renders named report templates.

    Templates are plain strings compiled once into a shared Jinja2
    environment; extra templates can be supplied per renderer.
    """

    def __init__(self, templates: Optional[Dict[str, str]] = None, **env_options):
        """Initialize renderer.

        Args:
            templates: Templates overriding or extending the defaults
            **env_options: Additional Jinja2 environment options
        """
        sources = dict(TEMPLATES)
        if templates:
            sources.update(templates)
        self._env = jinja2.Environment(
            loader=jinja2.DictLoader(sources),
            undefined=jinja2.StrictUndefined,
            **env_options,
        )

    def render(self, template: str, /, **context: Any) -> str:
        """Render a template.

        Args:
            template: Template name
            **context: Template variables

        Returns:
            Rendered text

        Raises:
            ReportError: If the template is unknown or rendering fails
        """
        try:
            return self._env.get_template(template).render(**context)
        except jinja2.TemplateNotFound:
            raise ReportError(f"Unknown report template: {template}")
        except jinja2.TemplateError as e:
            raise ReportError(f"Template error in '{template}': {e}")
