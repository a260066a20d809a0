"""Internal rendering helpers used by :mod:`mm_server.server.compose`."""

from .documents import ParsedDocument, parse_document, parse_front_matter, parse_heading
from .renderer import DEFAULT_STYLES, DEFAULT_TITLE, html_template, render_markdown

__all__ = [
    "DEFAULT_STYLES",
    "DEFAULT_TITLE",
    "ParsedDocument",
    "html_template",
    "parse_document",
    "parse_front_matter",
    "parse_heading",
    "render_markdown",
]
