"""HTTP server entry point: routing and startup."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Callable, Iterable
from typing import Any

from werkzeug.serving import run_simple
from werkzeug.wrappers import Request
from werkzeug.wrappers import Response as HttpResponse

from jiafile import logger
from jiafile.config import ConfigError, load_config
from jiafile.fileservice import FileService
from jiafile.handler import Handler
from jiafile.middleware import (
    cors_middleware,
    logging_middleware,
    path_validation_middleware,
    recovery_middleware,
)

WELCOME = "Welcome to jiafile server!"
_PLAIN = "text/plain; charset=utf-8"


def create_app(handler: Handler) -> Callable[[dict, Callable[..., Any]], Iterable[bytes]]:
    """Build the WSGI application routing requests to ``handler``, with middleware."""
    routes: dict[str, Callable[[Request], HttpResponse]] = {
        "/list": handler.list,
        "/mkdir": handler.create_dir,
        "/touch": handler.create_file,
        "/delete": handler.delete,
        "/move": handler.move,
        "/copy": handler.copy,
        "/info": handler.get_info,
        "/document": handler.create_document,
    }

    def router(environ: dict, start_response: Callable[..., Any]) -> Iterable[bytes]:
        request = Request(environ)
        route = routes.get(request.path)
        if route is not None:
            response = route(request)
        elif request.path == "/":
            response = HttpResponse(WELCOME, content_type=_PLAIN)
        else:
            response = HttpResponse("404 page not found\n", status=404, content_type=_PLAIN)
        return response(environ, start_response)

    return logging_middleware(
        recovery_middleware(cors_middleware(path_validation_middleware(router)))
    )


def main(argv: list[str] | None = None) -> None:
    """Load the configuration and serve the file API until interrupted."""
    parser = argparse.ArgumentParser(prog="jiafile", description="Serve the file API over HTTP.")
    parser.parse_args(argv)

    try:
        config = load_config("")
    except ConfigError as exc:
        print(f"Failed to load config: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    try:
        logger.init_logging(config.log.dir)
    except OSError as exc:
        print(exc, file=sys.stderr)
        raise SystemExit(1) from exc

    app = create_app(Handler(FileService(config)))
    address = ":" + config.server.port
    logger.info("Server starting on %s...", address)
    try:
        run_simple("0.0.0.0", int(config.server.port), app)
    except (OSError, ValueError, OverflowError) as exc:
        logger.error("Server error: %s", exc)
        print(exc, file=sys.stderr)
        raise SystemExit(1) from exc