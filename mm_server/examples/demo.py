"""A small blog: static texts, a composed home page and a raw echo route."""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI

from .._rendering import parse_document
from ..config import ServerConfig
from ..server.cache import CacheClient
from ..server.http import create_app
from ..server.routes import HandlerRoute, Raw, RawContext, RouteMapping

__all__ = ["DEMO_TEXTS", "build_demo_routes", "create_demo_app", "demo_route_map"]

DEMO_TEXTS = {
    "test": "# hi, this is a test",
    "more-please": "# hi, this works, too.",
}


async def _home() -> str:
    posts = [parse_document(text).body for text in DEMO_TEXTS.values()]
    items = "\n".join(f"  <li>{post}</li>" for post in posts)
    return f"""<h1>This is a blog.</h1>

<h2>These are some posts</h2>
<ul>
{items}
</ul>
"""


def _echo_user(context: RawContext) -> str:
    return f"user {context.params.get('id', '')}"


def _no_promise() -> Any:
    return 1 + 1


def build_demo_routes() -> dict[str, Any]:
    routes: dict[str, Any] = {
        "no-promise": HandlerRoute(_no_promise),
        "home": HandlerRoute(_home, title="A blog"),
        "user/:id": HandlerRoute(lambda: Raw(_echo_user)),
    }
    routes.update(DEMO_TEXTS)
    return routes


def demo_route_map(path: str) -> RouteMapping | None:
    """Serve bare paths as HTML pages; leave the API namespace alone."""

    if path.startswith("/mm"):
        return None
    return RouteMapping(route=path, target="html")


def create_demo_app(
    config: ServerConfig | None = None, *, cache_client: CacheClient | None = None
) -> FastAPI:
    return create_app(
        config,
        routes=build_demo_routes(),
        route_map=demo_route_map,
        cache_client=cache_client,
    )
