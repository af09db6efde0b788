"""HTTP handlers that map requests onto file service operations."""

from __future__ import annotations

import json
import os

from werkzeug.wrappers import Request
from werkzeug.wrappers import Response as HttpResponse

from jiafile import logger
from jiafile.fileservice import FileService, FileServiceError
from jiafile.paths import PathError
from jiafile.types import Code, CreateDocumentRequest
from jiafile.types import Response as ApiResponse

_SERVICE_ERRORS = (FileServiceError, PathError, OSError)
_JSON_ESCAPES = (
    ("<", "\\u003c"),
    (">", "\\u003e"),
    ("&", "\\u0026"),
    ("\u2028", "\\u2028"),
    ("\u2029", "\\u2029"),
)


def _respond(code: int, message: str, data: object = None) -> HttpResponse:
    body = json.dumps(ApiResponse(code, message, data).to_dict(), ensure_ascii=False)
    for raw, escaped in _JSON_ESCAPES:
        body = body.replace(raw, escaped)
    return HttpResponse(body + "\n", content_type="application/json")


def _extension(path: str) -> str:
    name = os.path.basename(path)
    index = name.rfind(".")
    return name[index:] if index >= 0 else ""


def _decode_document_request(body: str) -> CreateDocumentRequest:
    value, _ = json.JSONDecoder().raw_decode(body.lstrip(" \t\r\n"))
    if value is None:
        return CreateDocumentRequest()
    return CreateDocumentRequest.from_dict(value)


class Handler:
    """Request handlers; every reply is a JSON envelope with status 200."""

    def __init__(self, file_service: FileService):
        self.file_service = file_service

    def list(self, request: Request) -> HttpResponse:
        path = request.args.get("path", "")
        if not path:
            return _respond(Code.PARAM_MISSING, "Missing path parameter")
        try:
            files = self.file_service.list(path)
        except _SERVICE_ERRORS as exc:
            logger.error("List error: %s", exc)
            return _respond(Code.OPERATION_FAIL, str(exc))
        return _respond(Code.SUCCESS, "success", files)

    def create_dir(self, request: Request) -> HttpResponse:
        if request.method != "POST":
            return _respond(Code.METHOD_NOT_ALLOWED, "Method not allowed")
        path = request.args.get("path", "")
        if not path:
            return _respond(Code.PARAM_MISSING, "Missing path parameter")
        try:
            self.file_service.create_dir(path)
        except _SERVICE_ERRORS as exc:
            logger.error("CreateDir error: %s", exc)
            return _respond(Code.OPERATION_FAIL, str(exc))
        return _respond(Code.SUCCESS, "Directory created successfully")

    def create_file(self, request: Request) -> HttpResponse:
        if request.method != "POST":
            return _respond(Code.METHOD_NOT_ALLOWED, "Method not allowed")
        path = request.args.get("path", "")
        if not path:
            return _respond(Code.PARAM_MISSING, "Missing path parameter")
        try:
            self.file_service.create_file(path, None)
        except _SERVICE_ERRORS as exc:
            logger.error("CreateFile error: %s", exc)
            return _respond(Code.OPERATION_FAIL, str(exc))
        return _respond(Code.SUCCESS, "File created successfully")

    def delete(self, request: Request) -> HttpResponse:
        if request.method != "DELETE":
            return _respond(Code.METHOD_NOT_ALLOWED, "Method not allowed")
        path = request.args.get("path", "")
        if not path:
            return _respond(Code.PARAM_MISSING, "Missing path parameter")
        try:
            self.file_service.delete(path)
        except _SERVICE_ERRORS as exc:
            logger.error("Delete error: %s", exc)
            return _respond(Code.OPERATION_FAIL, str(exc))
        return _respond(Code.SUCCESS, "File or directory deleted successfully")

    def move(self, request: Request) -> HttpResponse:
        if request.method != "POST":
            return _respond(Code.METHOD_NOT_ALLOWED, "Method not allowed")
        src = request.args.get("src", "")
        dst = request.args.get("dst", "")
        if not src or not dst:
            return _respond(Code.PARAM_MISSING, "Missing src or dst parameter")
        try:
            self.file_service.move(src, dst)
        except _SERVICE_ERRORS as exc:
            logger.error("Move error: %s", exc)
            return _respond(Code.OPERATION_FAIL, str(exc))
        return _respond(Code.SUCCESS, "File or directory moved successfully")

    def copy(self, request: Request) -> HttpResponse:
        if request.method != "POST":
            return _respond(Code.METHOD_NOT_ALLOWED, "Method not allowed")
        src = request.args.get("src", "")
        dst = request.args.get("dst", "")
        if not src or not dst:
            return _respond(Code.PARAM_MISSING, "Missing src or dst parameter")
        try:
            self.file_service.copy(src, dst)
        except _SERVICE_ERRORS as exc:
            logger.error("Copy error: %s", exc)
            return _respond(Code.OPERATION_FAIL, str(exc))
        return _respond(Code.SUCCESS, "File or directory copied successfully")

    def get_info(self, request: Request) -> HttpResponse:
        path = request.args.get("path", "")
        if not path:
            return _respond(Code.PARAM_MISSING, "Missing path parameter")
        try:
            info = self.file_service.get_info(path)
        except _SERVICE_ERRORS as exc:
            logger.error("GetInfo error: %s", exc)
            return _respond(Code.OPERATION_FAIL, str(exc))
        return _respond(Code.SUCCESS, "success", info)

    def create_document(self, request: Request) -> HttpResponse:
        if request.method != "POST":
            return _respond(Code.METHOD_NOT_ALLOWED, "Method not allowed")
        try:
            document = _decode_document_request(request.get_data(as_text=True))
        except ValueError as exc:
            logger.error("CreateDocument decode error: %s", exc)
            return _respond(Code.PARAM_MISSING, "Invalid request body")

        if not document.path or not document.type:
            return _respond(Code.PARAM_MISSING, "Path and type are required")

        path = document.path
        if not _extension(path):
            path = f"{path}.{document.type}"

        try:
            self.file_service.create_document(path, document.type, document.content)
        except _SERVICE_ERRORS as exc:
            logger.error("CreateDocument error: %s", exc)
            return _respond(Code.OPERATION_FAIL, str(exc))
        return _respond(Code.SUCCESS, "Document created successfully")