"""Request path to response body: locate, match, fetch, compose."""

from __future__ import annotations

from functools import partial
from typing import Any, Callable

from .._rendering import html_template
from ..config import ServerConfig
from ..errors import ContentReadError, HandlerFailure
from ..log import get_logger
from ._invoke import invoke
from .cache import CacheHandle
from .compose import Composed, RawText, Template, compose, not_found
from .content import content_key, fetch_text, list_texts, read_text_file
from .routes import (
    FileRoute,
    HandlerRoute,
    Html,
    Markdown,
    MatchResult,
    Raw,
    RawContext,
    RouteMapping,
    RouteTable,
    StaticRoute,
    coerce_result,
    match_endpoint,
)

__all__ = ["ContentResolver", "RouteMap"]

logger = get_logger("mm_server.resolver")

RouteMap = Callable[[str], "RouteMapping | None"]


class ContentResolver:
    """Resolve request paths against the route table and the text directory."""

    def __init__(
        self,
        config: ServerConfig,
        routes: RouteTable,
        *,
        route_map: RouteMap | None = None,
        template: Template | None = None,
    ) -> None:
        self._config = config
        self._routes = routes
        self._route_map = route_map
        self._template = template or html_template

    @property
    def routes(self) -> RouteTable:
        return self._routes

    def locate(self, path: str) -> tuple[str | None, str] | None:
        """Return ``(target, endpoint)`` for ``path`` or ``None`` when unserved."""

        prefixed = self._split_prefix(path)
        if self._route_map is not None:
            mapping = self._route_map(path)
            if mapping is not None and mapping.route:
                target = mapping.target or (prefixed[0] if prefixed else None)
                return target, mapping.route
        if prefixed is None or not prefixed[1].strip("/"):
            return None
        return prefixed

    def _split_prefix(self, path: str) -> tuple[str, str] | None:
        for target, prefix in self._config.api_routes.items():
            if path.startswith(prefix + "/"):
                return target, path[len(prefix):]
        return None

    async def resolve(self, path: str, cache: CacheHandle) -> Composed:
        located = self.locate(path)
        if located is None:
            return self._not_found()
        target, endpoint = located
        matched = match_endpoint(self._routes, endpoint)
        if matched.route_key is None:
            return await self._resolve_file(endpoint, target, cache)
        route = self._routes[matched.route_key]
        match route:
            case StaticRoute(text=text):
                return self._compose(text, target)
            case HandlerRoute():
                return await self._resolve_handler(route, matched, target, path, cache)
        return self._not_found()

    def file_route(self, endpoint: str, texts: list[str]) -> FileRoute | None:
        filename = endpoint.removeprefix("/") + self._config.extension
        if filename not in texts:
            return None
        return FileRoute(filename, content_key(self._config.texts_dir, filename))

    async def _resolve_file(
        self, endpoint: str, target: str | None, cache: CacheHandle
    ) -> Composed:
        texts = await self._list_texts(cache)
        route = self.file_route(endpoint, texts)
        if route is None:
            return self._not_found()
        text = await fetch_text(cache, route.key, self._read_text)
        if text is None:
            return self._not_found()
        return self._compose(text, target)

    async def _resolve_handler(
        self,
        route: HandlerRoute,
        matched: MatchResult,
        target: str | None,
        path: str,
        cache: CacheHandle,
    ) -> Composed:
        try:
            result = coerce_result(await invoke(route.produce))
            match result:
                case Raw(produce=produce):
                    context = self._raw_context(path, matched, cache)
                    body = await invoke(produce, context)
                    if not isinstance(body, str):
                        raise HandlerFailure(f"{body!r} is not a string", value=body)
                    return RawText(body)
                case Html(html=html):
                    return self._compose(
                        html, target, markup="html", styles=route.styles, title=route.title
                    )
                case Markdown(text=text, html_transform=html_transform):
                    return self._compose(
                        text,
                        target,
                        styles=route.styles,
                        title=route.title,
                        html_transform=html_transform,
                    )
        except ContentReadError:
            raise
        except HandlerFailure as exc:
            logger.error("handler_failed", route=matched.route_key, value=repr(exc.value))
        except Exception:
            logger.exception("handler_failed", route=matched.route_key)
        return self._not_found()

    def _raw_context(self, path: str, matched: MatchResult, cache: CacheHandle) -> RawContext:
        return RawContext(
            url=path,
            params=dict(matched.params),
            cache=cache,
            _fetch=partial(fetch_text, cache),
            _list_texts=partial(self._list_texts, cache),
        )

    async def _list_texts(self, cache: CacheHandle) -> list[str]:
        return await list_texts(
            cache,
            self._config.texts_dir,
            extension=self._config.extension,
            fatal=self._config.fatal_disk_errors,
        )

    async def _read_text(self, key: str) -> str | None:
        return await read_text_file(key, fatal=self._config.fatal_disk_errors)

    def _compose(self, text: str | None, target: str | None, **options: Any) -> Composed:
        return compose(text, target, config=self._config, template=self._template, **options)

    def _not_found(self) -> Composed:
        return not_found(self._config, self._template)
