"""The example blog deployment served end to end."""

from __future__ import annotations

from fastapi.testclient import TestClient

from mm_server.config import ServerConfig
from mm_server.examples import DEMO_TEXTS, create_demo_app, demo_route_map
from mm_server.server.routes import RouteMapping


def test_route_map_leaves_the_api_namespace_alone() -> None:
    assert demo_route_map("/mm/api/v1/raw/test") is None
    assert demo_route_map("/home") == RouteMapping(route="/home", target="html")


def test_demo_blog(down_redis, client_for, tmp_path) -> None:
    app = create_demo_app(
        ServerConfig(texts_dir=str(tmp_path)), cache_client=client_for(down_redis)
    )
    with TestClient(app) as client:
        home = client.get("/home")
        assert home.status_code == 200
        assert "<title>A blog</title>" in home.text
        assert "<h1>This is a blog.</h1>" in home.text
        assert "<li># hi, this works, too.</li>" in home.text

        assert client.get("/mm/api/v1/raw/test").text == DEMO_TEXTS["test"]
        assert "<h1>hi, this works, too.</h1>" in client.get("/more-please").text
        assert client.get("/no-promise").status_code == 404
        assert client.get("/user/7").text == "user 7"
