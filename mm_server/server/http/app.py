"""HTTP application wiring for the cached content resolver."""

from __future__ import annotations

import signal
import time
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncIterator, Mapping

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse, PlainTextResponse, Response

from ...config import ServerConfig
from ...errors import ContentReadError
from ...log import get_logger
from ..cache import CacheClient
from ..compose import Composed, DocumentPayload, NotFound, RawText, RenderedHtml, Template
from ..resolver import ContentResolver, RouteMap
from ..routes import RouteTable
from .models import DocumentResponse

logger = get_logger("mm_server.http")


@dataclass(frozen=True)
class RuntimeState:
    """Objects shared across HTTP handlers for the lifetime of the app."""

    config: ServerConfig
    resolver: ContentResolver
    cache_client: CacheClient


def create_app(
    config: ServerConfig | None = None,
    *,
    routes: Mapping[str, Any] | None = None,
    route_map: RouteMap | None = None,
    template: Template | None = None,
    cache_client: CacheClient | None = None,
) -> FastAPI:
    """Create a FastAPI app serving texts and declared routes.

    Parameters
    ----------
    config:
        Server behaviour; read from the environment when omitted.
    routes:
        Endpoint keys mapped to strings, handlers or route objects.
    route_map:
        Optional hook mapping a raw path to a :class:`RouteMapping`, letting a
        deployment serve paths outside the API namespace.
    template:
        HTML page template ``(body, title, styles) -> str``.
    cache_client:
        Store client; one connecting to ``config.store`` is created otherwise.
    """

    config = config or ServerConfig.from_env()
    resolver = ContentResolver(
        config, RouteTable(routes), route_map=route_map, template=template
    )
    runtime = RuntimeState(
        config=config,
        resolver=resolver,
        cache_client=cache_client or CacheClient(config.store),
    )

    app = FastAPI(lifespan=_lifespan, docs_url=None, redoc_url=None, openapi_url=None)
    app.state.runtime = runtime
    app.middleware("http")(_log_requests)
    app.include_router(create_content_router())
    logger.info(
        "content_app_created",
        namespace=config.namespace,
        texts_dir=config.texts_dir,
        routes=len(resolver.routes),
    )
    return app


def create_content_router() -> APIRouter:
    """Build the catch-all router resolving every GET through the runtime state."""

    router = APIRouter()

    @router.get("/{path:path}", name="content")
    async def serve_content(
        request: Request, state: RuntimeState = Depends(_get_runtime_state)
    ) -> Response:
        if state.config.auth and request.headers.get("authorization") != state.config.auth:
            return PlainTextResponse("Unauthorized", status_code=401)
        cache = await state.cache_client.connect(
            should_flush=state.config.flush_cache_on_start
        )
        try:
            composed = await state.resolver.resolve(request.url.path, cache)
        except ContentReadError as exc:
            logger.critical("fatal_content_read", path=exc.path, reason=exc.reason)
            signal.raise_signal(signal.SIGTERM)
            return PlainTextResponse("Internal Server Error", status_code=500)
        return _to_response(composed)

    return router


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    yield
    await app.state.runtime.cache_client.close()


def _get_runtime_state(request: Request) -> RuntimeState:
    state = getattr(request.app.state, "runtime", None)
    if state is None:
        raise RuntimeError("Content runtime state is not configured")
    return state


async def _log_requests(request: Request, call_next: Any) -> Response:
    start = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception:
        logger.exception(
            "http_request_error",
            method=request.method,
            path=request.url.path,
            duration_ms=round((time.perf_counter() - start) * 1000, 2),
        )
        raise
    log_kwargs = {
        "method": request.method,
        "path": request.url.path,
        "status": response.status_code,
        "duration_ms": round((time.perf_counter() - start) * 1000, 2),
    }
    if response.status_code >= 500:
        logger.error("http_request", **log_kwargs)
    else:
        logger.info("http_request", **log_kwargs)
    return response


def _to_response(composed: Composed) -> Response:
    match composed:
        case RawText(text=text):
            return PlainTextResponse(text or "")
        case DocumentPayload():
            return JSONResponse(DocumentResponse.from_payload(composed).model_dump())
        case RenderedHtml(html=html):
            return HTMLResponse(html)
        case NotFound(body=body, media_type=media_type):
            return Response(body, status_code=404, media_type=media_type)
    raise TypeError(f"Unexpected composed result: {composed!r}")


__all__ = ["RuntimeState", "create_app", "create_content_router"]
