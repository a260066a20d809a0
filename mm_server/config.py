"""Server and store configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping

from .errors import ConfigError

__all__ = [
    "DEFAULT_NAMESPACE",
    "TARGETS",
    "NotFoundFormat",
    "ServerConfig",
    "StoreSettings",
    "TitleMode",
]

DEFAULT_NAMESPACE = "/mm/api/v1"
TARGETS = ("raw", "json", "html")

_TRUTHY = {"1", "true", "yes", "on"}


class TitleMode(str, Enum):
    """How a document title is derived for json/html targets."""

    FRONT_MATTER = "front-matter"
    HEADING = "heading"


class NotFoundFormat(str, Enum):
    """Body flavour used for 404 responses."""

    HTML = "html"
    PLAIN = "plain"


def _flag(raw: str | None) -> bool:
    return raw is not None and raw.strip().lower() in _TRUTHY


@dataclass(frozen=True)
class StoreSettings:
    """Connection parameters for the Redis content cache."""

    host: str = "redis"
    port: int = 6379
    password: str | None = None
    db: int = 0

    def __post_init__(self) -> None:
        try:
            port = int(self.port)
            db = int(self.db)
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"Invalid store port/db: {self.port!r}/{self.db!r}") from exc
        if not 0 < port < 65536:
            raise ConfigError(f"Store port out of range: {port}")
        object.__setattr__(self, "port", port)
        object.__setattr__(self, "db", db)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "StoreSettings":
        env = os.environ if environ is None else environ
        return cls(
            host=env.get("REDIS_PORT_6379_TCP_ADDR", "redis"),
            port=env.get("REDIS_PORT_6379_TCP_PORT", 6379),
            password=env.get("REDIS_PASSWORD") or None,
            db=env.get("REDIS_DB", 0),
        )


@dataclass(frozen=True)
class ServerConfig:
    """Behaviour of the content server, frozen once the app is built."""

    namespace: str = DEFAULT_NAMESPACE
    texts_dir: str = "./texts"
    extension: str = ".md"
    auth: str | None = None
    title_mode: TitleMode = TitleMode.FRONT_MATTER
    not_found_format: NotFoundFormat = NotFoundFormat.HTML
    fatal_disk_errors: bool = False
    flush_cache_on_start: bool = False
    store: StoreSettings = field(default_factory=StoreSettings)

    def __post_init__(self) -> None:
        namespace = str(self.namespace).rstrip("/")
        if namespace and not namespace.startswith("/"):
            raise ConfigError(f"Namespace must start with '/': {self.namespace!r}")
        object.__setattr__(self, "namespace", namespace)
        if not self.extension.startswith(".") or len(self.extension) < 2:
            raise ConfigError(f"Content extension must look like '.md': {self.extension!r}")
        object.__setattr__(self, "texts_dir", str(self.texts_dir).rstrip("/") or "/")
        try:
            object.__setattr__(self, "title_mode", TitleMode(self.title_mode))
            object.__setattr__(
                self, "not_found_format", NotFoundFormat(self.not_found_format)
            )
        except ValueError as exc:
            raise ConfigError(str(exc)) from exc

    @property
    def api_routes(self) -> Mapping[str, str]:
        """Map each target format to the path prefix that selects it."""

        return MappingProxyType(
            {target: f"{self.namespace}/{target}" for target in TARGETS}
        )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ServerConfig":
        env = os.environ if environ is None else environ
        return cls(
            namespace=env.get("MM_NAMESPACE", DEFAULT_NAMESPACE),
            texts_dir=env.get("MM_TEXTS_DIR", "./texts"),
            auth=env.get("MM_AUTH") or None,
            title_mode=env.get("MM_TITLE_MODE", TitleMode.FRONT_MATTER.value),
            fatal_disk_errors=_flag(env.get("MM_FATAL_DISK_ERRORS")),
            flush_cache_on_start=_flag(env.get("MM_FLUSH_CACHE")),
            store=StoreSettings.from_env(env),
        )
