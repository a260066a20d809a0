from __future__ import annotations

from mm_server.config import NotFoundFormat, ServerConfig, TitleMode
from mm_server.server.compose import (
    NOT_FOUND_BODY,
    DocumentPayload,
    NotFound,
    RawText,
    RenderedHtml,
    compose,
    not_found,
)

TEXT = "---\ntitle: Front\ndescription: Matter\n---\n# Heading\n\nBody text."


def _template(body: str, title: str | None, styles: str | None) -> str:
    return f"[{title}|{styles}]{body}"


def test_raw_target_returns_text_unmodified() -> None:
    config = ServerConfig()
    assert compose(TEXT, "raw", config=config) == RawText(TEXT)
    assert compose(None, "raw", config=config) == RawText(None)


def test_json_target_uses_front_matter_by_default() -> None:
    result = compose(TEXT, "json", config=ServerConfig())
    assert result == DocumentPayload(
        body="# Heading\n\nBody text.", title="Front", description="Matter"
    )


def test_json_target_without_metadata_keeps_the_heading() -> None:
    result = compose("# hi, this is a test", "json", config=ServerConfig())
    assert result == DocumentPayload(body="# hi, this is a test", title=None, description=None)


def test_json_target_in_heading_mode_derives_the_title() -> None:
    config = ServerConfig(title_mode=TitleMode.HEADING)
    result = compose("# hi, this is a test", "json", config=config)
    assert result == DocumentPayload(body="# hi, this is a test", title="hi, this is a test")


def test_html_target_renders_and_wraps() -> None:
    result = compose(TEXT, "html", config=ServerConfig(), template=_template, styles="s")
    assert isinstance(result, RenderedHtml)
    assert result.html.startswith("[Front|s]")
    assert "<h1>Heading</h1>" in result.html
    assert "<p>Body text.</p>" in result.html


def test_route_title_and_html_transform_apply() -> None:
    result = compose(
        "# x",
        "html",
        config=ServerConfig(),
        template=_template,
        title="Override",
        html_transform=lambda html: html.replace("h1", "h2"),
    )
    assert result == RenderedHtml("[Override|None]<h2>x</h2>")


def test_prerendered_html_is_not_rendered_again() -> None:
    result = compose("<p># not a heading</p>", "html", config=ServerConfig(), markup="html",
                     template=_template)
    assert result == RenderedHtml("[None|None]<p># not a heading</p>")


def test_unknown_target_or_missing_text_is_not_found() -> None:
    config = ServerConfig()
    for text, target in [(TEXT, "pdf"), (TEXT, None), (None, "json"), (None, "html")]:
        result = compose(text, target, config=config)
        assert isinstance(result, NotFound)
        assert NOT_FOUND_BODY in result.body


def test_not_found_format_is_configurable() -> None:
    assert not_found(ServerConfig(not_found_format=NotFoundFormat.PLAIN)) == NotFound(
        "Not Found", "text/plain"
    )
    html = not_found(ServerConfig())
    assert html.media_type == "text/html"
    assert "<title>Page Not Found</title>" in html.body
