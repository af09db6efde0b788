"""File-backed logging with info, error and debug helpers."""

from __future__ import annotations

import logging
import os
from datetime import date

_logger = logging.getLogger("jiafile")
_logger.propagate = False
_logger.setLevel(logging.DEBUG)
_initialized = False


def init_logging(log_dir: str) -> str:
    """Open today's log file in ``log_dir`` and route messages to it.

    Returns the path of the log file.
    """
    global _initialized
    try:
        os.makedirs(log_dir, exist_ok=True)
    except OSError as exc:
        raise OSError(f"failed to create log directory: {exc}") from exc

    log_file = os.path.join(log_dir, f"app-{date.today():%Y-%m-%d}.log")
    try:
        handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
    except OSError as exc:
        raise OSError(f"failed to open log file: {exc}") from exc
    handler.setFormatter(
        logging.Formatter(
            "%(levelname)s: %(asctime)s %(filename)s:%(lineno)d: %(message)s",
            datefmt="%Y/%m/%d %H:%M:%S",
        )
    )

    for old in list(_logger.handlers):
        _logger.removeHandler(old)
        old.close()
    _logger.addHandler(handler)
    _initialized = True
    return log_file


def info(format: str, *args: object) -> None:
    if _initialized:
        _logger.info(format, *args, stacklevel=2)


def error(format: str, *args: object) -> None:
    if _initialized:
        _logger.error(format, *args, stacklevel=2)


def debug(format: str, *args: object) -> None:
    if _initialized:
        _logger.debug(format, *args, stacklevel=2)