"""Shared fixtures: an in-memory Redis double and a populated texts directory."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from mm_server.config import StoreSettings
from mm_server.server.cache import CacheClient


class FakeRedis:
    """Subset of ``redis.asyncio.Redis`` used by the cache adapter."""

    def __init__(self, *, fail_ping: bool = False, fail_commands: bool = False) -> None:
        self.fail_ping = fail_ping
        self.fail_commands = fail_commands
        self.strings: dict[str, str] = {}
        self.sets: dict[str, set[str]] = {}
        self.commands: list[tuple[str, Any]] = []
        self.pings = 0
        self.closed = False
        self.undecodable: set[str] = set()

    def _record(self, command: str, key: Any = None) -> None:
        self.commands.append((command, key))
        if self.fail_commands:
            raise RedisConnectionError(f"{command} failed")
        if command in ("get", "smembers") and key in self.undecodable:
            raise UnicodeDecodeError("utf-8", b"\xff\xfe", 0, 1, "invalid start byte")

    async def ping(self) -> bool:
        self.pings += 1
        await asyncio.sleep(0)
        if self.fail_ping:
            raise RedisConnectionError("Error 111 connecting to redis:6379. Connection refused.")
        return True

    async def get(self, key: str) -> str | None:
        self._record("get", key)
        return self.strings.get(key)

    async def set(self, key: str, value: str) -> bool:
        self._record("set", key)
        self.strings[key] = value
        return True

    async def smembers(self, key: str) -> set[str]:
        self._record("smembers", key)
        return set(self.sets.get(key, set()))

    async def sadd(self, key: str, *values: str) -> int:
        self._record("sadd", key)
        members = self.sets.setdefault(key, set())
        added = len(set(values) - members)
        members.update(values)
        return added

    async def flushall(self) -> bool:
        self._record("flushall")
        self.strings.clear()
        self.sets.clear()
        return True

    async def aclose(self) -> None:
        self.closed = True


def make_cache_client(fake: FakeRedis) -> CacheClient:
    return CacheClient(StoreSettings(host="fake-redis"), client_factory=lambda settings: fake)


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def down_redis() -> FakeRedis:
    return FakeRedis(fail_ping=True)


@pytest.fixture
def texts_dir(tmp_path: Path) -> Path:
    root = tmp_path / "texts"
    root.mkdir()
    (root / "hello.md").write_text(
        "---\ntitle: Hello\ndescription: A greeting\n---\n# Hello there\n\nSome *text*.\n",
        encoding="utf-8",
    )
    (root / "plain.md").write_text("# Plain heading\n\nNo metadata here.\n", encoding="utf-8")
    (root / "notes.txt").write_text("not served", encoding="utf-8")
    return root


@pytest.fixture
def flaky_redis() -> FakeRedis:
    """Store that answers PING but fails every command afterwards."""

    return FakeRedis(fail_commands=True)


@pytest.fixture
def client_for():
    return make_cache_client
