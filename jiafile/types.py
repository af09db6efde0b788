"""Wire types shared by the HTTP layer: response envelope, file info, requests."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum
from typing import Any

_ZERO_TIME = "0001-01-01T00:00:00Z"


class Code(IntEnum):
    """Status codes carried in the ``code`` field of every response."""

    SUCCESS = 0
    PARAM_MISSING = 1001
    METHOD_NOT_ALLOWED = 1002
    PATH_NOT_EXIST = 1003
    OPERATION_FAIL = 1004


def format_time(value: datetime | None) -> str:
    """Render a timestamp as RFC 3339 with trailing fractional zeros dropped."""
    if value is None:
        return _ZERO_TIME
    if value.tzinfo is None:
        value = value.astimezone()
    text = value.strftime("%Y-%m-%dT%H:%M:%S")
    if value.microsecond:
        text += "." + f"{value.microsecond:06d}".rstrip("0")
    offset = value.utcoffset()
    if not offset:
        return text + "Z"
    total_minutes = int(offset.total_seconds()) // 60
    sign = "+" if total_minutes >= 0 else "-"
    hours, minutes = divmod(abs(total_minutes), 60)
    return f"{text}{sign}{hours:02d}:{minutes:02d}"


def _to_jsonable(value: Any) -> Any:
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    if isinstance(value, (list, tuple)):
        return [_to_jsonable(item) for item in value]
    if isinstance(value, dict):
        return {key: _to_jsonable(item) for key, item in value.items()}
    if isinstance(value, IntEnum):
        return int(value)
    return value


@dataclass
class Response:
    """Uniform response envelope: a status code, a message and a payload."""

    code: int
    message: str
    data: Any = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": int(self.code),
            "message": self.message,
            "data": _to_jsonable(self.data),
        }


@dataclass
class FileInfo:
    """Details of one file or directory."""

    name: str = ""
    is_dir: bool = False
    size: int = 0
    size_human: str = ""
    path: str = ""
    ext: str = ""
    mime_type: str = ""
    create_time: datetime | None = None
    mod_time: datetime | None = None
    access_time: datetime | None = None
    mode: str = ""
    is_hidden: bool = False
    is_symlink: bool = False
    symlink_target: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "isDir": self.is_dir,
            "size": self.size,
            "sizeHuman": self.size_human,
            "path": self.path,
            "ext": self.ext,
            "mimeType": self.mime_type,
            "createTime": format_time(self.create_time),
            "modTime": format_time(self.mod_time),
            "accessTime": format_time(self.access_time),
            "mode": self.mode,
            "isHidden": self.is_hidden,
            "isSymlink": self.is_symlink,
            "symlinkTarget": self.symlink_target,
        }


@dataclass
class CreateDocumentRequest:
    """Body of a document creation request."""

    path: str = ""
    type: str = ""
    content: str = ""

    @staticmethod
    def from_dict(data: Any) -> CreateDocumentRequest:
        """Build a request from decoded JSON; absent fields become empty strings."""
        if not isinstance(data, dict):
            raise ValueError("request body must be a JSON object")
        values: dict[str, str] = {}
        for field_name in ("path", "type", "content"):
            value = data.get(field_name)
            if value is None:
                values[field_name] = ""
            elif isinstance(value, str):
                values[field_name] = value
            else:
                raise ValueError(f"field {field_name!r} must be a string")
        return CreateDocumentRequest(**values)