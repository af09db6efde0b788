"""File operations exposed by the server: listing, creating, moving and copying."""

from __future__ import annotations

import mimetypes
import os
import shutil
import stat
from datetime import datetime, timezone

from jiafile.config import Config, load_config
from jiafile.paths import PathProcessor
from jiafile.types import FileInfo

_SNIFF_LEN = 512
_OCTET_STREAM = "application/octet-stream"
_WHITESPACE = b"\t\n\x0c\r "
_BINARY_BYTES = frozenset([*range(0x00, 0x09), 0x0B, *range(0x0E, 0x1B), *range(0x1C, 0x20)])

_HTML_TAGS = (
    b"<!DOCTYPE HTML", b"<HTML", b"<HEAD", b"<SCRIPT", b"<IFRAME", b"<H1", b"<DIV",
    b"<FONT", b"<TABLE", b"<A", b"<STYLE", b"<TITLE", b"<B", b"<BODY", b"<BR", b"<P",
    b"<!--",
)

_EXACT_SIGNATURES = (
    (b"%PDF-", "application/pdf"),
    (b"%!PS-Adobe-", "application/postscript"),
    (b"\xfe\xff", "text/plain; charset=utf-16be"),
    (b"\xff\xfe", "text/plain; charset=utf-16le"),
    (b"\xef\xbb\xbf", "text/plain; charset=utf-8"),
    (b"\x00\x00\x01\x00", "image/x-icon"),
    (b"\x00\x00\x02\x00", "image/x-icon"),
    (b"BM", "image/bmp"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"OggS\x00", "application/ogg"),
    (b"ID3", "audio/mpeg"),
    (b"\x1f\x8b\x08", "application/x-gzip"),
    (b"PK\x03\x04", "application/zip"),
    (b"Rar!\x1a\x07\x00", "application/x-rar-compressed"),
    (b"Rar!\x1a\x07\x01\x00", "application/x-rar-compressed"),
    (b"\x00asm", "application/wasm"),
)


class FileServiceError(Exception):
    """Raised when a file operation cannot be carried out."""


def format_file_size(size: int) -> str:
    """Render a byte count with binary units, e.g. ``1.5 KB``."""
    unit = 1024
    if size < unit:
        return f"{size} B"
    div, exp = unit, 0
    n = size // unit
    while n >= unit:
        div *= unit
        exp += 1
        n //= unit
    return f"{size / div:.1f} {'KMGTPE'[exp]}B"


def _extension(name: str) -> str:
    """Return the suffix from the last dot of the final path element, dot included."""
    for index in range(len(name) - 1, -1, -1):
        char = name[index]
        if char in (os.sep, os.altsep or os.sep):
            return ""
        if char == ".":
            return name[index:]
    return ""


def _type_by_extension(ext: str) -> str:
    if not ext:
        return ""
    if not mimetypes.inited:
        mimetypes.init()
    mime_type = mimetypes.types_map.get(ext) or mimetypes.types_map.get(ext.lower())
    if not mime_type:
        mime_type = mimetypes.common_types.get(ext) or mimetypes.common_types.get(ext.lower())
    if not mime_type:
        return ""
    if mime_type.startswith("text/") and "charset" not in mime_type:
        mime_type += "; charset=utf-8"
    return mime_type


def _matches_html(data: bytes) -> bool:
    body = data.lstrip(_WHITESPACE)
    for tag in _HTML_TAGS:
        if len(body) <= len(tag):
            continue
        if body[: len(tag)].upper() == tag and body[len(tag)] in b" >":
            return True
    return False


def _sniff(data: bytes) -> str:
    """Guess a content type from the leading bytes of a file."""
    if _matches_html(data):
        return "text/html; charset=utf-8"
    if data.lstrip(_WHITESPACE).startswith(b"<?xml"):
        return "text/xml; charset=utf-8"
    for signature, mime_type in _EXACT_SIGNATURES:
        if data.startswith(signature):
            return mime_type
    if data.startswith(b"RIFF") and data[8:14] == b"WEBPVP":
        return "image/webp"
    if any(byte in _BINARY_BYTES for byte in data):
        return _OCTET_STREAM
    return "text/plain; charset=utf-8"


def detect_mime_type(path: str, is_dir: bool) -> str:
    """Detect a MIME type from the extension, then the content, then the name."""
    if is_dir:
        return "inode/directory"

    by_extension = _type_by_extension(_extension(path))
    if by_extension:
        return by_extension

    try:
        with open(path, "rb") as handle:
            head = handle.read(_SNIFF_LEN)
    except OSError:
        return _OCTET_STREAM

    mime_type = _sniff(head.ljust(_SNIFF_LEN, b"\x00"))
    if mime_type == _OCTET_STREAM:
        lowered = path.lower()
        if path.startswith("."):
            return "text/plain"
        if "readme" in lowered or "license" in lowered or "makefile" in lowered:
            return "text/plain"
        if ".git" in lowered:
            return "application/x-git"
    return mime_type


def _mode_string(st_mode: int) -> str:
    kind = stat.S_IFMT(st_mode)
    flags = ""
    if kind == stat.S_IFDIR:
        flags += "d"
    if kind == stat.S_IFLNK:
        flags += "L"
    if kind in (stat.S_IFBLK, stat.S_IFCHR):
        flags += "D"
    if kind == stat.S_IFIFO:
        flags += "p"
    if kind == stat.S_IFSOCK:
        flags += "S"
    if st_mode & stat.S_ISUID:
        flags += "u"
    if st_mode & stat.S_ISGID:
        flags += "g"
    if kind == stat.S_IFCHR:
        flags += "c"
    if st_mode & stat.S_ISVTX:
        flags += "t"
    known = (stat.S_IFREG, stat.S_IFDIR, stat.S_IFLNK, stat.S_IFBLK,
             stat.S_IFCHR, stat.S_IFIFO, stat.S_IFSOCK)
    if kind and kind not in known:
        flags += "?"
    perms = "".join(
        char if st_mode & (1 << (8 - index)) else "-"
        for index, char in enumerate("rwxrwxrwx")
    )
    return (flags or "-") + perms


def _timestamp(seconds: float) -> datetime:
    return datetime.fromtimestamp(seconds, tz=timezone.utc).astimezone()


def _base_name(path: str) -> str:
    stripped = path.rstrip(os.sep)
    if not stripped:
        return os.sep if path else "."
    return os.path.basename(stripped)


def _entry_info(entry: os.DirEntry, directory: str) -> FileInfo:
    info = entry.stat(follow_symlinks=False)
    full_path = os.path.normpath(os.path.join(directory, entry.name))
    is_dir = entry.is_dir(follow_symlinks=False)
    is_symlink = stat.S_ISLNK(info.st_mode)

    symlink_target = ""
    if is_symlink:
        try:
            symlink_target = os.readlink(full_path)
        except OSError:
            pass

    create_time = access_time = None
    try:
        followed = os.stat(full_path)
    except OSError:
        pass
    else:
        create_time = access_time = _timestamp(followed.st_mtime)

    return FileInfo(
        name=entry.name,
        is_dir=is_dir,
        size=info.st_size,
        size_human=format_file_size(info.st_size),
        path=full_path,
        ext=_extension(entry.name),
        mime_type=detect_mime_type(full_path, is_dir),
        create_time=create_time,
        mod_time=_timestamp(info.st_mtime),
        access_time=access_time,
        mode=_mode_string(info.st_mode),
        is_hidden=entry.name.startswith("."),
        is_symlink=is_symlink,
        symlink_target=symlink_target,
    )


class FileService:
    """File operations confined to the configured root directory, if any."""

    def __init__(self, config: Config | None = None):
        self.config = config if config is not None else load_config("")
        self.path_processor = PathProcessor(self.config.file.root_path)

    def list(self, path: str) -> list[FileInfo]:
        """List the entries of a directory, sorted by name."""
        processed = self.path_processor.process_path(path)
        try:
            os.stat(processed)
        except FileNotFoundError:
            raise FileServiceError(f"directory does not exist: {path}") from None
        except OSError:
            pass

        try:
            with os.scandir(processed) as iterator:
                entries = sorted(iterator, key=lambda entry: entry.name)
        except OSError as exc:
            raise FileServiceError(f"error reading directory: {exc}") from exc

        files = []
        for entry in entries:
            try:
                files.append(_entry_info(entry, processed))
            except OSError:
                continue
        return files

    def create_dir(self, path: str) -> None:
        """Create a directory and any missing parents."""
        os.makedirs(self.path_processor.process_path(path), mode=0o755, exist_ok=True)

    def create_file(self, path: str, content: bytes | None = None) -> None:
        """Create a new file with the given content; an existing file is an error."""
        processed = self.path_processor.process_path(path)
        try:
            os.stat(processed)
        except OSError:
            pass
        else:
            raise FileServiceError(f"file already exists: {path}")

        try:
            os.makedirs(os.path.dirname(processed) or ".", mode=0o755, exist_ok=True)
        except OSError as exc:
            raise FileServiceError(f"failed to create parent directory: {exc}") from exc

        with open(processed, "wb") as handle:
            handle.write(content or b"")

    def delete(self, path: str) -> None:
        """Remove a file, or a directory with everything in it."""
        processed = self.path_processor.process_path(path)
        try:
            os.stat(processed)
        except FileNotFoundError:
            raise FileServiceError(f"file or directory does not exist: {path}") from None
        except OSError:
            pass

        if os.path.isdir(processed) and not os.path.islink(processed):
            shutil.rmtree(processed)
        else:
            os.remove(processed)

    def move(self, src: str, dst: str) -> None:
        """Rename ``src`` to ``dst``, replacing a file already at ``dst``."""
        processed_src = self.path_processor.process_path(src)
        processed_dst = self.path_processor.process_path(dst)
        os.replace(processed_src, processed_dst)

    def copy(self, src: str, dst: str) -> None:
        """Copy the content of file ``src`` to ``dst``, truncating ``dst``."""
        processed_src = self.path_processor.process_path(src)
        processed_dst = self.path_processor.process_path(dst)
        with open(processed_src, "rb") as source, open(processed_dst, "wb") as target:
            shutil.copyfileobj(source, target)

    def get_info(self, path: str) -> FileInfo:
        """Describe one file or directory; symbolic links are followed."""
        processed = self.path_processor.process_path(path)
        info = os.stat(processed)
        name = _base_name(processed)
        is_dir = stat.S_ISDIR(info.st_mode)
        modified = _timestamp(info.st_mtime)
        return FileInfo(
            name=name,
            is_dir=is_dir,
            size=info.st_size,
            size_human=format_file_size(info.st_size),
            path=path,
            ext=_extension(name),
            mime_type=detect_mime_type(processed, is_dir),
            create_time=modified,
            mod_time=modified,
            access_time=modified,
            mode=_mode_string(info.st_mode),
            is_hidden=name.startswith("."),
            is_symlink=stat.S_ISLNK(info.st_mode),
            symlink_target="",
        )

    def create_document(self, path: str, doc_type: str, content: str) -> None:
        """Create an empty document file, making parent directories as needed.

        The type and content are accepted but not written.
        """
        processed = self.path_processor.process_path(path)
        try:
            os.makedirs(os.path.dirname(processed) or ".", mode=0o755, exist_ok=True)
        except OSError as exc:
            raise FileServiceError(f"failed to create directory: {exc}") from exc
        with open(processed, "wb"):
            pass