"""WSGI middleware: request logging, crash recovery, CORS and path checks."""

from __future__ import annotations

import json
import os
import time
from collections.abc import Callable, Iterable, Iterator
from typing import Any
from urllib.parse import quote

from werkzeug.wrappers import Request

from jiafile import logger
from jiafile.types import Code
from jiafile.types import Response as ApiResponse

WSGIApp = Callable[[dict, Callable[..., Any]], Iterable[bytes]]

_CORS_HEADERS = (
    ("Access-Control-Allow-Origin", "*"),
    ("Access-Control-Allow-Methods", "GET, POST, PUT, DELETE, OPTIONS"),
    ("Access-Control-Allow-Headers", "Content-Type, Authorization"),
)
_CORS_NAMES = frozenset(name.lower() for name, _ in _CORS_HEADERS)


def _plain_error(start_response: Callable[..., Any], status: str, text: str) -> list[bytes]:
    body = text.encode("utf-8")
    start_response(
        status,
        [
            ("Content-Type", "text/plain; charset=utf-8"),
            ("X-Content-Type-Options", "nosniff"),
            ("Content-Length", str(len(body))),
        ],
    )
    return [body]


def _json_reply(start_response: Callable[..., Any], code: int, message: str) -> list[bytes]:
    body = (json.dumps(ApiResponse(code, message, None).to_dict()) + "\n").encode("utf-8")
    start_response(
        "200 OK",
        [("Content-Type", "application/json"), ("Content-Length", str(len(body)))],
    )
    return [body]


def _request_uri(environ: dict) -> str:
    uri = environ.get("REQUEST_URI") or environ.get("RAW_URI")
    if uri:
        return uri
    uri = quote(environ.get("SCRIPT_NAME", "") + environ.get("PATH_INFO", ""))
    query = environ.get("QUERY_STRING", "")
    return f"{uri}?{query}" if query else uri


def _remote_addr(environ: dict) -> str:
    addr = environ.get("REMOTE_ADDR", "")
    port = environ.get("REMOTE_PORT")
    return f"{addr}:{port}" if port else addr


def _format_duration(seconds: float) -> str:
    nanos = seconds * 1e9
    if nanos < 1e3:
        return f"{nanos:.0f}ns"
    if nanos < 1e6:
        return f"{nanos / 1e3:g}µs"
    if nanos < 1e9:
        return f"{nanos / 1e6:g}ms"
    return f"{seconds:g}s"


def logging_middleware(app: WSGIApp) -> WSGIApp:
    """Log method, request URI, client address and duration of every request."""

    def wrapped(environ: dict, start_response: Callable[..., Any]) -> Iterator[bytes]:
        start = time.perf_counter()
        result = app(environ, start_response)

        def body() -> Iterator[bytes]:
            try:
                yield from result
            finally:
                close = getattr(result, "close", None)
                if close is not None:
                    close()
                logger.info(
                    "%s %s %s %s",
                    environ.get("REQUEST_METHOD", ""),
                    _request_uri(environ),
                    _remote_addr(environ),
                    _format_duration(time.perf_counter() - start),
                )

        return body()

    return wrapped


def recovery_middleware(app: WSGIApp) -> WSGIApp:
    """Turn an exception raised by the application into a 500 reply."""

    def wrapped(environ: dict, start_response: Callable[..., Any]) -> list[bytes]:
        captured: dict[str, Any] = {}
        chunks: list[bytes] = []

        def capture(status: str, headers: list, exc_info: Any = None) -> Callable[[bytes], None]:
            captured["status"] = status
            captured["headers"] = headers
            return chunks.append

        try:
            result = app(environ, capture)
            try:
                chunks.extend(result)
            finally:
                close = getattr(result, "close", None)
                if close is not None:
                    close()
            if "status" not in captured:
                raise RuntimeError("application did not start a response")
        except Exception as exc:
            logger.error("Panic recovered: %s", exc)
            return _plain_error(start_response, "500 Internal Server Error", "Internal Server Error\n")

        start_response(captured["status"], captured["headers"])
        return chunks

    return wrapped


def cors_middleware(app: WSGIApp) -> WSGIApp:
    """Add permissive CORS headers and answer preflight requests directly."""

    def wrapped(environ: dict, start_response: Callable[..., Any]) -> Iterable[bytes]:
        def with_cors(status: str, headers: list, exc_info: Any = None) -> Any:
            merged = [(k, v) for k, v in headers if k.lower() not in _CORS_NAMES]
            merged.extend(_CORS_HEADERS)
            return start_response(status, merged, exc_info)

        if environ.get("REQUEST_METHOD") == "OPTIONS":
            with_cors("200 OK", [("Content-Length", "0")])
            return [b""]
        return app(environ, with_cors)

    return wrapped


def method_middleware(*args: str) -> Callable[[WSGIApp], WSGIApp]:
    """Build a middleware that only lets the given HTTP methods through."""
    allowed = frozenset(args)

    def decorate(app: WSGIApp) -> WSGIApp:
        def wrapped(environ: dict, start_response: Callable[..., Any]) -> Iterable[bytes]:
            if environ.get("REQUEST_METHOD") in allowed:
                return app(environ, start_response)
            return _plain_error(start_response, "405 Method Not Allowed", "Method Not Allowed\n")

        return wrapped

    return decorate


def path_validation_middleware(app: WSGIApp) -> WSGIApp:
    """Reject requests whose path, src or dst parameter is not a clean absolute path."""

    def wrapped(environ: dict, start_response: Callable[..., Any]) -> Iterable[bytes]:
        args = Request(environ).args
        path = args.get("path", "")
        if path and not is_valid_path(path):
            return _json_reply(start_response, Code.PARAM_MISSING, "Path must be an absolute path")

        src = args.get("src", "")
        dst = args.get("dst", "")
        if (src and not is_valid_path(src)) or (dst and not is_valid_path(dst)):
            return _json_reply(
                start_response,
                Code.PARAM_MISSING,
                "Source and destination paths must be absolute paths",
            )
        return app(environ, start_response)

    return wrapped


def is_valid_path(path: str) -> bool:
    """Return True for an absolute path free of ``..`` and ``./``."""
    if not os.path.isabs(path):
        return False
    return ".." not in path and "./" not in path