from __future__ import annotations

import pytest

from mm_server.config import (
    DEFAULT_NAMESPACE,
    NotFoundFormat,
    ServerConfig,
    StoreSettings,
    TitleMode,
)
from mm_server.errors import ConfigError


def test_defaults_match_the_deployed_layout() -> None:
    config = ServerConfig()
    assert config.namespace == DEFAULT_NAMESPACE == "/mm/api/v1"
    assert config.texts_dir == "./texts"
    assert dict(config.api_routes) == {
        "raw": "/mm/api/v1/raw",
        "json": "/mm/api/v1/json",
        "html": "/mm/api/v1/html",
    }
    assert config.fatal_disk_errors is False


def test_string_modes_are_coerced() -> None:
    config = ServerConfig(title_mode="heading", not_found_format="plain")
    assert config.title_mode is TitleMode.HEADING
    assert config.not_found_format is NotFoundFormat.PLAIN


@pytest.mark.parametrize(
    "overrides",
    [
        {"namespace": "mm/api"},
        {"extension": "md"},
        {"title_mode": "first-line"},
        {"not_found_format": "xml"},
    ],
)
def test_invalid_server_config_is_rejected(overrides) -> None:
    with pytest.raises(ConfigError):
        ServerConfig(**overrides)


def test_store_settings_from_env() -> None:
    settings = StoreSettings.from_env(
        {
            "REDIS_PORT_6379_TCP_ADDR": "cache.internal",
            "REDIS_PORT_6379_TCP_PORT": "6380",
            "REDIS_PASSWORD": "pw",
        }
    )
    assert settings == StoreSettings(host="cache.internal", port=6380, password="pw", db=0)
    assert StoreSettings.from_env({}) == StoreSettings(host="redis", port=6379)


def test_store_settings_validate_port() -> None:
    with pytest.raises(ConfigError):
        StoreSettings(port="not-a-port")
    with pytest.raises(ConfigError):
        StoreSettings(port=70000)


def test_server_config_from_env() -> None:
    config = ServerConfig.from_env(
        {
            "MM_NAMESPACE": "/api",
            "MM_TEXTS_DIR": "/srv/texts/",
            "MM_AUTH": "token",
            "MM_TITLE_MODE": "heading",
            "MM_FATAL_DISK_ERRORS": "yes",
            "MM_FLUSH_CACHE": "0",
        }
    )
    assert config.namespace == "/api"
    assert config.texts_dir == "/srv/texts"
    assert config.auth == "token"
    assert config.title_mode is TitleMode.HEADING
    assert config.fatal_disk_errors is True
    assert config.flush_cache_on_start is False
    assert config.store == StoreSettings()
