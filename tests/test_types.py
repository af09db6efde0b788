import json
from datetime import datetime, timezone

import pytest

from jiafile.types import Code, CreateDocumentRequest, FileInfo, Response


def test_response_serialises_code_as_plain_int():
    result = Response(Code.PARAM_MISSING, "Missing path parameter").to_dict()
    assert result == {"code": 1001, "message": "Missing path parameter", "data": None}
    assert json.dumps(result) == (
        '{"code": 1001, "message": "Missing path parameter", "data": null}'
    )


@pytest.mark.parametrize(
    "code, expected",
    [
        (Code.SUCCESS, 0),
        (Code.PARAM_MISSING, 1001),
        (Code.METHOD_NOT_ALLOW, 1002),
        (Code.PATH_NOT_EXIST, 1003),
        (Code.OPERATION_FAIL, 1004),
    ],
)
def test_response_carries_each_code_value(code, expected):
    result = Response(code, "message").to_dict()
    assert result["code"] == expected
    assert json.loads(json.dumps(result))["code"] == expected


def test_file_info_uses_camel_case_keys():
    info = FileInfo(name=".bashrc", is_dir=False, size=10, is_hidden=True)
    result = info.to_dict()
    assert result["name"] == ".bashrc"
    assert result["isDir"] is False
    assert result["isHidden"] is True
    assert result["size"] == 10
    assert set(result) == {
        "name", "isDir", "size", "sizeHuman", "path", "ext", "mimeType",
        "createTime", "modTime", "accessTime", "mode", "isHidden",
        "isSymlink", "symlinkTarget",
    }


def test_file_info_missing_time_renders_zero_time():
    result = FileInfo(name="a").to_dict()
    assert result["createTime"] == "0001-01-01T00:00:00Z"
    assert result["modTime"] == result["accessTime"] == result["createTime"]


def test_file_info_utc_time_ends_with_z():
    stamp = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    result = FileInfo(mod_time=stamp).to_dict()
    assert result["modTime"] == "2024-01-02T03:04:05Z"


def test_response_nests_file_infos():
    files = [FileInfo(name="a"), FileInfo(name="b")]
    result = Response(Code.SUCCESS, "success", files).to_dict()
    assert [item["name"] for item in result["data"]] == ["a", "b"]
    assert result["code"] == 0


def test_create_document_request_from_dict_full():
    request = CreateDocumentRequest.from_dict(
        {"path": "/tmp/doc", "type": "md", "content": "hi"}
    )
    assert request == CreateDocumentRequest(path="/tmp/doc", type="md", content="hi")


def test_create_document_request_missing_fields_are_empty():
    request = CreateDocumentRequest.from_dict({"path": "/tmp/doc"})
    assert request.type == ""
    assert request.content == ""


@pytest.mark.parametrize("body", [[], "text", {"path": 5}])
def test_create_document_request_rejects_bad_bodies(body):
    with pytest.raises(ValueError):
        CreateDocumentRequest.from_dict(body)