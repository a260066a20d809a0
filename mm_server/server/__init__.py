"""Cache-mediated content resolution for the mm server."""

from .cache import CacheClient, CacheEvent, CacheHandle, CacheState, flush_store
from .compose import DocumentPayload, NotFound, RawText, RenderedHtml, compose
from .content import TEXT_PATHS_KEY, fetch_text, list_texts, read_text_file
from .resolver import ContentResolver
from .routes import (
    HandlerRoute,
    Html,
    Markdown,
    MatchResult,
    Raw,
    RawContext,
    RouteMapping,
    RouteTable,
    StaticRoute,
    match_endpoint,
)

__all__ = [
    "CacheClient",
    "CacheEvent",
    "CacheHandle",
    "CacheState",
    "ContentResolver",
    "DocumentPayload",
    "HandlerRoute",
    "Html",
    "Markdown",
    "MatchResult",
    "NotFound",
    "Raw",
    "RawContext",
    "RawText",
    "RenderedHtml",
    "RouteMapping",
    "RouteTable",
    "StaticRoute",
    "TEXT_PATHS_KEY",
    "compose",
    "fetch_text",
    "flush_store",
    "list_texts",
    "match_endpoint",
    "read_text_file",
]
