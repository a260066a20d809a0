"""Redis-backed content cache that degrades to a no-op when unreachable."""

from __future__ import annotations

import asyncio
from enum import Enum
from typing import Any, Callable, Protocol

from redis.asyncio import Redis
from redis.exceptions import RedisError

from ..config import StoreSettings
from ..log import get_logger

__all__ = [
    "CacheClient",
    "CacheEvent",
    "CacheHandle",
    "CacheState",
    "flush_store",
    "transition",
]

logger = get_logger("mm_server.cache")

_STORE_ERRORS = (RedisError, OSError)
_COMMAND_ERRORS = (*_STORE_ERRORS, UnicodeDecodeError)


class CacheState(str, Enum):
    CONNECTING = "connecting"
    READY = "ready"
    DEGRADED = "degraded"


class CacheEvent(str, Enum):
    READY = "ready"
    ERROR = "error"


_TRANSITIONS: dict[tuple[CacheState, CacheEvent], CacheState] = {
    (CacheState.CONNECTING, CacheEvent.READY): CacheState.READY,
    (CacheState.CONNECTING, CacheEvent.ERROR): CacheState.DEGRADED,
}


def transition(state: CacheState, event: CacheEvent) -> CacheState:
    """Return the state reached from ``state`` on ``event``.

    Only a connecting client moves; a settled client keeps its state for the
    rest of its lifetime.
    """

    return _TRANSITIONS.get((state, event), state)


class _Store(Protocol):
    async def string_get(self, key: str) -> str | None: ...

    async def string_set(self, key: str, value: str) -> None: ...

    async def array_get(self, key: str) -> list[str] | None: ...

    async def array_add(self, key: str, value: str) -> None: ...

    async def flush_all(self) -> None: ...


class _NullStore:
    """Capabilities of a degraded cache: every call is a miss."""

    async def string_get(self, key: str) -> str | None:
        return None

    async def string_set(self, key: str, value: str) -> None:
        return None

    async def array_get(self, key: str) -> list[str] | None:
        return None

    async def array_add(self, key: str, value: str) -> None:
        return None

    async def flush_all(self) -> None:
        return None


class _RedisStore:
    """Capabilities bound to a live Redis connection."""

    def __init__(self, client: Any) -> None:
        self._client = client

    async def string_get(self, key: str) -> str | None:
        return await self._client.get(key)

    async def string_set(self, key: str, value: str) -> None:
        await self._client.set(key, value)

    async def array_get(self, key: str) -> list[str] | None:
        members = await self._client.smembers(key)
        if members is None:
            return None
        return sorted(members)

    async def array_add(self, key: str, value: str) -> None:
        await self._client.sadd(key, value)

    async def flush_all(self) -> None:
        await self._client.flushall()


class CacheHandle:
    """Uniform cache capabilities; no method raises, whatever the store does."""

    __slots__ = ("_state", "_store")

    def __init__(self, state: CacheState, store: _Store) -> None:
        self._state = state
        self._store = store

    @property
    def state(self) -> CacheState:
        return self._state

    @property
    def healthy(self) -> bool:
        return self._state is CacheState.READY

    async def string_get(self, key: str) -> str | None:
        return await self._guard("get", key, self._store.string_get(key))

    async def string_set(self, key: str, value: str) -> None:
        await self._guard("set", key, self._store.string_set(key, value))

    async def array_get(self, key: str) -> list[str] | None:
        return await self._guard("smembers", key, self._store.array_get(key))

    async def array_add(self, key: str, value: str) -> None:
        await self._guard("sadd", key, self._store.array_add(key, value))

    async def flush_all(self) -> None:
        await self._guard("flushall", None, self._store.flush_all())

    async def _guard(self, command: str, key: str | None, pending: Any) -> Any:
        try:
            return await pending
        except _COMMAND_ERRORS as exc:
            logger.warning("cache_command_failed", command=command, key=key, error=str(exc))
            return None

    @classmethod
    def degraded(cls) -> "CacheHandle":
        return cls(CacheState.DEGRADED, _NullStore())


def _create_redis_client(settings: StoreSettings) -> Redis:
    return Redis(
        host=settings.host,
        port=settings.port,
        password=settings.password,
        db=settings.db,
        decode_responses=True,
    )


class CacheClient:
    """Owns the store connection and hands out a memoized :class:`CacheHandle`.

    The connection is opened lazily by the first :meth:`connect` call.
    Concurrent first callers share a single in-flight connection attempt.
    """

    def __init__(
        self,
        settings: StoreSettings | None = None,
        *,
        client_factory: Callable[[StoreSettings], Any] | None = None,
    ) -> None:
        self._settings = settings or StoreSettings.from_env()
        self._client_factory = client_factory or _create_redis_client
        self._client: Any = None
        self._state = CacheState.CONNECTING
        self._handle: CacheHandle | None = None
        self._pending: asyncio.Future[CacheHandle] | None = None
        self._flushed = False

    @property
    def state(self) -> CacheState:
        return self._state

    @property
    def handle(self) -> CacheHandle | None:
        return self._handle

    async def connect(self, *, should_flush: bool = False) -> CacheHandle:
        if self._handle is None:
            if self._pending is None:
                self._pending = asyncio.ensure_future(self._establish())
            self._handle = await asyncio.shield(self._pending)
        if should_flush and not self._flushed:
            self._flushed = True
            await self._handle.flush_all()
            logger.info("cache_flushed", healthy=self._handle.healthy)
        return self._handle

    async def close(self) -> None:
        client, self._client = self._client, None
        if client is not None:
            await _close_quietly(client)

    async def _establish(self) -> CacheHandle:
        settings = self._settings
        client = self._client_factory(settings)
        try:
            await client.ping()
        except _STORE_ERRORS as exc:
            self._state = transition(self._state, CacheEvent.ERROR)
            logger.warning(
                "cache_store_unavailable",
                host=settings.host,
                port=settings.port,
                error=str(exc),
            )
            await _close_quietly(client)
            return CacheHandle.degraded()
        self._state = transition(self._state, CacheEvent.READY)
        self._client = client
        logger.info("cache_store_ready", host=settings.host, port=settings.port)
        return CacheHandle(self._state, _RedisStore(client))


async def _close_quietly(client: Any) -> None:
    try:
        await client.aclose()
    except _STORE_ERRORS as exc:
        logger.debug("cache_close_failed", error=str(exc))


async def flush_store(
    settings: StoreSettings | None = None,
    *,
    client_factory: Callable[[StoreSettings], Any] | None = None,
) -> bool:
    """Flush every cached listing and text once, then disconnect.

    Returns ``True`` when a live store was flushed.
    """

    cache = CacheClient(settings, client_factory=client_factory)
    try:
        handle = await cache.connect(should_flush=True)
        return handle.healthy
    finally:
        await cache.close()
