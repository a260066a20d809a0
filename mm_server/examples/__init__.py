"""Example deployment used by the CLI ``--demo`` flag and the tests."""

from .demo import DEMO_TEXTS, build_demo_routes, create_demo_app, demo_route_map

__all__ = ["DEMO_TEXTS", "build_demo_routes", "create_demo_app", "demo_route_map"]
