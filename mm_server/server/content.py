"""Cache-or-compute lookups for text content and the text listing."""

from __future__ import annotations

from pathlib import Path
from typing import Awaitable, Callable

from fastapi.concurrency import run_in_threadpool

from ..errors import ContentReadError
from ..log import get_logger
from ._invoke import invoke
from .cache import CacheHandle

__all__ = [
    "TEXT_PATHS_KEY",
    "Fallback",
    "content_key",
    "fetch_text",
    "list_text_files",
    "list_texts",
    "read_text_file",
]

logger = get_logger("mm_server.content")

# Cache key of the text listing set; shared with already deployed caches.
TEXT_PATHS_KEY = "text-paths"

Fallback = Callable[[str], "str | None | Awaitable[str | None]"]


def content_key(texts_dir: str, filename: str) -> str:
    return f"{texts_dir}/{filename}"


async def fetch_text(
    cache: CacheHandle, key: str | None, fallback: Fallback
) -> str | None:
    """Return the text stored under ``key``, producing and caching it on a miss."""

    if not key:
        return None
    text = await cache.string_get(key)
    if text:
        return text
    logger.debug("cache_miss", key=key)
    text = await invoke(fallback, key)
    if text is not None:
        await cache.string_set(key, text)
    return text


async def read_text_file(path: str, *, fatal: bool = False) -> str | None:
    """Read ``path`` as UTF-8 without blocking the event loop.

    Failures are logged and answered with ``None`` unless ``fatal`` is set,
    in which case :class:`ContentReadError` is raised.
    """

    try:
        return await run_in_threadpool(Path(path).read_text, encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.error("text_read_failed", path=path, error=str(exc), fatal=fatal)
        if fatal:
            raise ContentReadError(path, str(exc)) from exc
        return None


def _scan_directory(texts_dir: str, extension: str) -> list[str]:
    return sorted(
        entry.name for entry in Path(texts_dir).iterdir() if entry.name.endswith(extension)
    )


async def list_text_files(
    texts_dir: str, *, extension: str = ".md", fatal: bool = False
) -> list[str]:
    """List file names in ``texts_dir`` carrying ``extension``."""

    try:
        return await run_in_threadpool(_scan_directory, texts_dir, extension)
    except OSError as exc:
        logger.error("text_listing_failed", texts_dir=texts_dir, error=str(exc), fatal=fatal)
        if fatal:
            raise ContentReadError(texts_dir, str(exc)) from exc
        return []


async def list_texts(
    cache: CacheHandle,
    texts_dir: str,
    *,
    extension: str = ".md",
    fatal: bool = False,
) -> list[str]:
    """Return the cached text listing, rebuilding it from disk when empty."""

    texts = await cache.array_get(TEXT_PATHS_KEY)
    if texts:
        return list(texts)
    texts = await list_text_files(texts_dir, extension=extension, fatal=fatal)
    for name in texts:
        await cache.array_add(TEXT_PATHS_KEY, name)
    return texts
