"""Route declarations, handler results and the endpoint matcher."""

from __future__ import annotations

from collections.abc import Mapping as MappingABC
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Iterator, Mapping, Union

from ..errors import ConfigError, HandlerFailure

if TYPE_CHECKING:  # pragma: no cover - type-checking imports only
    from .cache import CacheHandle
    from .content import Fallback

__all__ = [
    "FileRoute",
    "HandlerRoute",
    "Html",
    "Markdown",
    "MatchResult",
    "Raw",
    "RawContext",
    "Route",
    "RouteMapping",
    "RouteResult",
    "RouteTable",
    "StaticRoute",
    "coerce_result",
    "coerce_route",
    "match_endpoint",
]


@dataclass(frozen=True)
class Markdown:
    """Markdown text produced by a handler, optionally post-processed once rendered."""

    text: str
    html_transform: Callable[[str], str] | None = None


@dataclass(frozen=True)
class Html:
    """Already-rendered HTML produced by a handler."""

    html: str


@dataclass(frozen=True)
class Raw:
    """Producer of a raw response body; always served as the raw target."""

    produce: Callable[["RawContext"], "str | Awaitable[str]"]


RouteResult = Union[Markdown, Html, Raw]


@dataclass(frozen=True)
class StaticRoute:
    text: str


@dataclass(frozen=True)
class HandlerRoute:
    produce: Callable[[], Any]
    styles: str | None = None
    title: str | None = None


@dataclass(frozen=True)
class FileRoute:
    """Route derived at lookup time from a name in the text listing."""

    filename: str
    key: str


Route = Union[StaticRoute, HandlerRoute]


@dataclass(frozen=True)
class RouteMapping:
    """Override returned by a deployment ``route_map`` hook."""

    route: str | None = None
    target: str | None = None


@dataclass(frozen=True)
class MatchResult:
    route_key: str | None
    params: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class RawContext:
    """What a :class:`Raw` producer can reach while building its body."""

    url: str
    params: Mapping[str, str]
    cache: "CacheHandle"
    _fetch: Callable[[str | None, "Fallback"], Awaitable[str | None]] = field(repr=False)
    _list_texts: Callable[[], Awaitable[list[str]]] = field(repr=False)

    async def fetch(self, key: str | None, fallback: "Fallback") -> str | None:
        return await self._fetch(key, fallback)

    async def list_texts(self) -> list[str]:
        return await self._list_texts()


def coerce_route(value: Any) -> Route:
    """Turn a declared route value into a :data:`Route` variant."""

    match value:
        case StaticRoute() | HandlerRoute():
            return value
        case str():
            return StaticRoute(value)
        case {"string": str() as text}:
            return StaticRoute(text)
        case {"handler": handler, **options} if callable(handler):
            return HandlerRoute(
                handler, styles=options.get("styles"), title=options.get("title")
            )
        case _ if callable(value):
            return HandlerRoute(value)
        case _:
            raise ConfigError(f"Unsupported route declaration: {value!r}")


def coerce_result(value: Any) -> RouteResult:
    """Validate what a handler produced."""

    match value:
        case Markdown() | Html() | Raw():
            return value
        case str():
            return Markdown(value)
        case {"markdown": str() as text, **options}:
            return Markdown(text, options.get("html_transform"))
        case {"html": str() as html}:
            return Html(html)
        case {"raw": producer} if callable(producer):
            return Raw(producer)
        case _:
            raise HandlerFailure(f"{value!r} is not a string or route result", value=value)


class RouteTable(MappingABC):
    """Immutable, ordered mapping of endpoint keys to routes."""

    __slots__ = ("_routes",)

    def __init__(self, routes: Mapping[str, Any] | None = None) -> None:
        normalized: dict[str, Route] = {}
        for key, value in (routes or {}).items():
            normalized[str(key).removeprefix("/")] = coerce_route(value)
        self._routes = MappingProxyType(normalized)

    def __getitem__(self, key: str) -> Route:
        return self._routes[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._routes)

    def __len__(self) -> int:
        return len(self._routes)

    def __repr__(self) -> str:
        return f"RouteTable({list(self._routes)!r})"


def _bind_positional(declared: list[str], segments: list[str]) -> tuple[str, dict[str, str]]:
    names = [segment[1:] for segment in declared[1:] if segment.startswith(":")]
    params = {
        segment[1:]: segments[index]
        for index, segment in enumerate(declared)
        if index > 0 and segment.startswith(":") and index < len(segments)
    }
    return "/".join([declared[0], *(f":{name}" for name in names)]), params


def match_endpoint(routes: Mapping[str, Any], endpoint: str) -> MatchResult:
    """Resolve ``endpoint`` to a declared route key and its path parameters.

    A literal key always wins. Otherwise parametric keys are tried in
    declaration order: the first segment must be equal and each ``:name``
    takes the endpoint segment at the same position. The first parametric
    key whose reconstructed form exists and binds a parameter is used.
    """

    key = endpoint.removeprefix("/")
    if key in routes:
        return MatchResult(key, {})

    segments = key.split("/")
    for declared_key in routes:
        declared = declared_key.split("/")
        if declared[0] != segments[0]:
            continue
        if not any(segment.startswith(":") for segment in declared[1:]):
            continue
        route_key, params = _bind_positional(declared, segments)
        if params and route_key in routes:
            return MatchResult(route_key, params)
    return MatchResult(None, {})
