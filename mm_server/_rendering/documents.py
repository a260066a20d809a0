"""Extract title, description and body from markdown text."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

import frontmatter
import yaml

from ..config import TitleMode

__all__ = ["ParsedDocument", "parse_document", "parse_front_matter", "parse_heading"]

_HEADING = re.compile(r"^#[ \t]+(?P<title>.+?)[ \t#]*$", re.MULTILINE)


@dataclass(frozen=True)
class ParsedDocument:
    body: str
    title: str | None = None
    description: str | None = None


def _text_attribute(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


def parse_front_matter(text: str) -> ParsedDocument:
    """Split a leading YAML block from ``text``.

    Text without a metadata block, or with one that is not valid YAML, is
    returned whole as the body.
    """

    try:
        post = frontmatter.loads(text)
    except yaml.YAMLError:
        return ParsedDocument(body=text)
    metadata = post.metadata if isinstance(post.metadata, dict) else {}
    return ParsedDocument(
        body=post.content,
        title=_text_attribute(metadata.get("title")),
        description=_text_attribute(metadata.get("description")),
    )


def parse_heading(text: str) -> ParsedDocument:
    """Use the first level-one heading as the title, leaving the body untouched."""

    match = _HEADING.search(text)
    title = match.group("title").strip() if match else None
    return ParsedDocument(body=text, title=title)


def parse_document(text: str, mode: TitleMode = TitleMode.FRONT_MATTER) -> ParsedDocument:
    if mode is TitleMode.HEADING:
        return parse_heading(text)
    return parse_front_matter(text)
