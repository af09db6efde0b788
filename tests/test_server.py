import json
from unittest import mock

import pytest
from werkzeug.test import Client

from jiafile.config import Config
from jiafile.fileservice import FileService
from jiafile.handler import Handler
from jiafile.server import WELCOME, create_app, main


@pytest.fixture
def client():
    return Client(create_app(Handler(FileService(Config()))))


def body_of(response):
    return json.loads(response.get_data(as_text=True))


def test_root_returns_welcome(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.get_data(as_text=True) == WELCOME


def test_unknown_path_is_404(client):
    response = client.get("/nowhere")
    assert response.status_code == 404
    assert response.get_data(as_text=True) == "404 page not found\n"


def test_trailing_slash_is_not_routed(client):
    assert client.get("/list/").status_code == 404


def test_mkdir_then_list(client, tmp_path):
    target = tmp_path / "made"
    created = body_of(client.post("/mkdir", query_string={"path": str(target)}))
    assert created["code"] == 0
    assert created["message"] == "Directory created successfully"
    assert target.is_dir()

    listed = body_of(client.get("/list", query_string={"path": str(tmp_path)}))
    assert listed["code"] == 0
    assert [entry["name"] for entry in listed["data"]] == ["made"]


def test_relative_path_rejected_by_validation(client):
    body = body_of(client.get("/list", query_string={"path": "relative"}))
    assert body["code"] == 1001
    assert body["message"] == "Path must be an absolute path"


def test_mkdir_wrong_method(client, tmp_path):
    body = body_of(client.get("/mkdir", query_string={"path": str(tmp_path / "x")}))
    assert body["code"] == 1002
    assert not (tmp_path / "x").exists()


def test_options_gets_cors(client):
    response = client.options("/list")
    assert response.status_code == 200
    assert response.headers["Access-Control-Allow-Origin"] == "*"


def test_responses_carry_cors_header(client):
    response = client.get("/")
    assert response.headers["Access-Control-Allow-Methods"] == "GET, POST, PUT, DELETE, OPTIONS"


def test_main_serves_on_configured_port(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / ".env").write_text("# settings\n", encoding="utf-8")
    monkeypatch.setenv("PORT", "9000")
    monkeypatch.setenv("LOG_DIR", str(tmp_path / "logdir"))
    with mock.patch("jiafile.server.run_simple") as run:
        result = main([])
    assert result is None
    assert run.call_count == 1
    host, port, app = run.call_args.args
    assert (host, port) == ("0.0.0.0", 9000)
    served = Client(app).get("/")
    assert served.status_code == 200
    assert served.get_data(as_text=True) == WELCOME
    assert (tmp_path / "logdir").is_dir()


def test_main_defaults_without_env_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    with mock.patch("jiafile.server.run_simple") as run:
        result = main([])
    assert result is None
    assert run.call_args.args[1] == 8190
    assert (tmp_path / "logs").is_dir()


def test_main_bad_port_exits(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / ".env").write_text("# settings\n", encoding="utf-8")
    monkeypatch.setenv("PORT", "notaport")
    monkeypatch.setenv("LOG_DIR", str(tmp_path / "logs"))
    with mock.patch("jiafile.server.run_simple") as run:
        with pytest.raises(SystemExit) as excinfo:
            main([])
    assert excinfo.value.code == 1
    assert run.call_count == 0