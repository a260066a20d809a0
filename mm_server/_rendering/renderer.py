"""Markdown rendering and the HTML page template."""

from __future__ import annotations

import html

import markdown

__all__ = ["DEFAULT_STYLES", "DEFAULT_TITLE", "html_template", "render_markdown"]

DEFAULT_TITLE = "Document"
DEFAULT_STYLES = "body{font-family: monospace}"

_EXTENSIONS = ["fenced_code", "tables"]

_PAGE = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <meta http-equiv="X-UA-Compatible" content="ie=edge">
  <title>{title}</title>
  <style>{styles}</style>
</head>
<body>
  {body}
</body>
</html>"""


def render_markdown(text: str) -> str:
    return markdown.markdown(text, extensions=_EXTENSIONS)


def html_template(body: str, title: str | None = None, styles: str | None = None) -> str:
    """Wrap rendered ``body`` in a complete HTML document."""

    return _PAGE.format(
        body=body,
        title=html.escape(title if title is not None else DEFAULT_TITLE),
        styles=styles if styles is not None else DEFAULT_STYLES,
    )
