"""Turn resolved text into the representation a request asked for."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Literal, Union

from .._rendering import ParsedDocument, html_template, parse_document, render_markdown
from ..config import NotFoundFormat, ServerConfig

__all__ = [
    "Composed",
    "DocumentPayload",
    "NOT_FOUND_BODY",
    "NOT_FOUND_TITLE",
    "NotFound",
    "RawText",
    "RenderedHtml",
    "Template",
    "compose",
    "not_found",
]

NOT_FOUND_BODY = "<h1>Sorry, that page wasn't found.</h1>"
NOT_FOUND_TITLE = "Page Not Found"

Template = Callable[[str, "str | None", "str | None"], str]


@dataclass(frozen=True)
class RawText:
    text: str | None


@dataclass(frozen=True)
class DocumentPayload:
    body: str
    title: str | None = None
    description: str | None = None


@dataclass(frozen=True)
class RenderedHtml:
    html: str


@dataclass(frozen=True)
class NotFound:
    body: str
    media_type: str


Composed = Union[RawText, DocumentPayload, RenderedHtml, NotFound]


def not_found(config: ServerConfig, template: Template = html_template) -> NotFound:
    if config.not_found_format is NotFoundFormat.PLAIN:
        return NotFound("Not Found", "text/plain")
    return NotFound(template(NOT_FOUND_BODY, NOT_FOUND_TITLE, None), "text/html")


def compose(
    text: str | None,
    target: str | None,
    *,
    config: ServerConfig,
    markup: Literal["markdown", "html"] = "markdown",
    styles: str | None = None,
    title: str | None = None,
    html_transform: Callable[[str], str] | None = None,
    renderer: Callable[[str], str] = render_markdown,
    template: Template = html_template,
) -> Composed:
    """Produce the response body for ``target``.

    ``raw`` passes ``text`` through, even when absent. ``json`` and ``html``
    need text; without it, or for any other target, the result is
    :class:`NotFound`. ``title`` overrides the title found in the text.
    """

    if target == "raw":
        return RawText(text)
    if text is None or target not in ("json", "html"):
        return not_found(config, template)

    if markup == "html":
        document = ParsedDocument(body=text)
    else:
        document = parse_document(text, config.title_mode)
    if target == "json":
        return DocumentPayload(
            body=document.body, title=document.title, description=document.description
        )

    rendered = document.body if markup == "html" else renderer(document.body)
    if html_transform is not None:
        rendered = html_transform(rendered)
    return RenderedHtml(template(rendered, title or document.title, styles))
