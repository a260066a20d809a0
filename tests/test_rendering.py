from __future__ import annotations

from mm_server._rendering import (
    DEFAULT_STYLES,
    ParsedDocument,
    html_template,
    parse_document,
    parse_front_matter,
    parse_heading,
    render_markdown,
)
from mm_server.config import TitleMode


def test_front_matter_attributes_are_extracted() -> None:
    parsed = parse_front_matter("---\ntitle: Post\ndescription: About it\n---\nBody\n")
    assert parsed == ParsedDocument(body="Body", title="Post", description="About it")


def test_non_string_attributes_are_stringified() -> None:
    parsed = parse_front_matter("---\ntitle: 2024\n---\nBody")
    assert parsed.title == "2024"


def test_invalid_front_matter_keeps_the_whole_text() -> None:
    text = "---\ntitle: [unclosed\n---\nBody"
    assert parse_front_matter(text) == ParsedDocument(body=text)


def test_heading_mode_finds_first_level_one_heading() -> None:
    text = "intro\n## Second level\n# The Title #\n# Another"
    assert parse_heading(text) == ParsedDocument(body=text, title="The Title")
    assert parse_heading("no heading").title is None


def test_parse_document_dispatches_on_mode() -> None:
    text = "# Heading only"
    assert parse_document(text).title is None
    assert parse_document(text, TitleMode.HEADING).title == "Heading only"


def test_render_markdown_supports_fenced_code() -> None:
    html = render_markdown("# Title\n\n```\ncode\n```\n")
    assert "<h1>Title</h1>" in html
    assert "<code>code" in html


def test_html_template_defaults_and_escaping() -> None:
    page = html_template("<p>x</p>")
    assert page.startswith("<!DOCTYPE html>")
    assert "<title>Document</title>" in page
    assert f"<style>{DEFAULT_STYLES}</style>" in page
    assert "<p>x</p>" in page
    assert "<title>a &lt;b&gt;</title>" in html_template("", "a <b>")
