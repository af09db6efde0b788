"""Application error carrying an HTTP status code and an optional cause."""

from __future__ import annotations

from http import HTTPStatus


class AppError(Exception):
    """An error with an HTTP status code, a message and the error it wraps."""

    def __init__(self, code: int, message: str, err: BaseException | None = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.err = err
        self.__cause__ = err

    def __str__(self) -> str:
        if self.err is not None:
            return f"{self.message}: {self.err}"
        return self.message


def _has_code(err: object, code: int) -> bool:
    return isinstance(err, AppError) and err.code == code


def is_not_found(err: object) -> bool:
    return _has_code(err, HTTPStatus.NOT_FOUND)


def is_bad_request(err: object) -> bool:
    return _has_code(err, HTTPStatus.BAD_REQUEST)


def is_internal_server(err: object) -> bool:
    return _has_code(err, HTTPStatus.INTERNAL_SERVER_ERROR)


def wrap(err: BaseException | None, message: str) -> AppError | None:
    """Wrap an error with a message, keeping the status code of an AppError."""
    if err is None:
        return None
    if isinstance(err, AppError):
        return AppError(err.code, message, err)
    return AppError(HTTPStatus.INTERNAL_SERVER_ERROR, message, err)