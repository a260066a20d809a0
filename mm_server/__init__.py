"""Serve markdown texts and computed strings as raw text, JSON or HTML."""

from .config import NotFoundFormat, ServerConfig, StoreSettings, TitleMode
from .errors import ConfigError, ContentReadError, HandlerFailure, MMServerError
from .server import (
    CacheClient,
    HandlerRoute,
    Html,
    Markdown,
    Raw,
    RawContext,
    RouteMapping,
    StaticRoute,
)
from .server.http import create_app

__all__ = [
    "CacheClient",
    "ConfigError",
    "ContentReadError",
    "HandlerFailure",
    "HandlerRoute",
    "Html",
    "MMServerError",
    "Markdown",
    "NotFoundFormat",
    "Raw",
    "RawContext",
    "RouteMapping",
    "ServerConfig",
    "StaticRoute",
    "StoreSettings",
    "TitleMode",
    "create_app",
]
