"""Command line entry point: ``python -m mm_server {serve,flush}``."""

from __future__ import annotations

import argparse
import asyncio
import dataclasses
import sys
from typing import Sequence

from .config import ServerConfig, TitleMode
from .log import configure_logging, get_logger
from .server.cache import flush_store

logger = get_logger("mm_server.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="mm_server", description=__doc__)
    parser.add_argument("--log-level", default="INFO")
    parser.add_argument("--json-logs", action="store_true", help="Emit JSON log lines.")
    commands = parser.add_subparsers(dest="command", required=True)

    serve = commands.add_parser("serve", help="Run the HTTP server.")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=3000)
    serve.add_argument("--texts-dir", help="Directory holding the markdown texts.")
    serve.add_argument("--namespace", help="API prefix, e.g. /mm/api/v1.")
    serve.add_argument("--auth", help="Shared secret expected in the Authorization header.")
    serve.add_argument(
        "--title-mode", choices=[mode.value for mode in TitleMode], default=None
    )
    serve.add_argument(
        "--flush", action="store_true", help="Flush the cache once on the first request."
    )
    serve.add_argument("--demo", action="store_true", help="Serve the example blog routes.")
    serve.add_argument("--ssl-keyfile")
    serve.add_argument("--ssl-certfile")

    commands.add_parser("flush", help="Flush cached listings and texts, then exit.")
    return parser


def config_from_args(args: argparse.Namespace) -> ServerConfig:
    config = ServerConfig.from_env()
    overrides = {
        "texts_dir": args.texts_dir,
        "namespace": args.namespace,
        "auth": args.auth,
        "title_mode": args.title_mode,
    }
    changes = {name: value for name, value in overrides.items() if value is not None}
    if args.flush:
        changes["flush_cache_on_start"] = True
    return dataclasses.replace(config, **changes)


def _serve(args: argparse.Namespace) -> int:
    import uvicorn  # local import; flush does not need the server stack

    from .examples import create_demo_app
    from .server.http import create_app

    config = config_from_args(args)
    app = create_demo_app(config) if args.demo else create_app(config)
    uvicorn.run(
        app,
        host=args.host,
        port=args.port,
        ssl_keyfile=args.ssl_keyfile,
        ssl_certfile=args.ssl_certfile,
        log_config=None,
    )
    return 0


def _flush() -> int:
    flushed = asyncio.run(flush_store(ServerConfig.from_env().store))
    if not flushed:
        logger.warning("cache_flush_skipped", reason="store unavailable")
        return 1
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(level=args.log_level, json_format=args.json_logs)
    if args.command == "serve":
        return _serve(args)
    return _flush()


if __name__ == "__main__":
    sys.exit(main())
