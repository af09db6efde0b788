import json

import pytest

from jiafile.config import (
    Config,
    ConfigError,
    IgnoreConfig,
    get_env,
    get_env_bool,
    get_env_int,
    get_env_string_slice,
    load_config,
    load_env,
    load_ignore_config,
)

_KEYS = ("PORT", "LOG_LEVEL", "LOG_DIR", "ROOT_PATH", "JIAFILE_TEST_VAR")


@pytest.fixture
def clean_env(monkeypatch):
    for key in _KEYS:
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)
    return monkeypatch


def test_missing_env_file_gives_defaults(tmp_path, clean_env):
    config = load_config(str(tmp_path / "absent.env"))
    assert config == Config()
    assert config.server.port == "8190"
    assert config.log.level == "info"
    assert config.log.dir == "logs"
    assert config.file.root_path == ""


def test_env_file_values_are_applied(tmp_path, clean_env):
    env_file = tmp_path / ".env"
    env_file.write_text("PORT=9000\nROOT_PATH=/data\n", encoding="utf-8")
    config = load_config(str(env_file))
    assert config.server.port == "9000"
    assert config.file.root_path == "/data"
    assert config.log.dir == "logs"


def test_existing_environment_wins_over_file(tmp_path, clean_env):
    clean_env.setenv("PORT", "7000")
    env_file = tmp_path / ".env"
    env_file.write_text("PORT=9000\n", encoding="utf-8")
    assert load_config(str(env_file)).server.port == "7000"


def test_unreadable_env_file_raises(tmp_path, clean_env):
    with pytest.raises(ConfigError):
        load_config(str(tmp_path))


def test_load_ignore_config_reads_lists(tmp_path):
    path = tmp_path / "ignore.json"
    path.write_text(
        json.dumps({"paths": ["/tmp"], "extensions": [".log"], "patterns": ["*~"]}),
        encoding="utf-8",
    )
    assert load_ignore_config(str(path)) == IgnoreConfig(
        paths=["/tmp"], extensions=[".log"], patterns=["*~"]
    )


def test_load_ignore_config_missing_fields_are_empty(tmp_path):
    path = tmp_path / "ignore.json"
    path.write_text("{}", encoding="utf-8")
    assert load_ignore_config(str(path)) == IgnoreConfig()


def test_load_ignore_config_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_ignore_config(str(tmp_path / "nope.json"))


def test_load_ignore_config_bad_json(tmp_path):
    path = tmp_path / "ignore.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ValueError):
        load_ignore_config(str(path))


def test_get_env_default_and_value(clean_env):
    assert get_env("JIAFILE_TEST_VAR", "fallback") == "fallback"
    clean_env.setenv("JIAFILE_TEST_VAR", "value")
    assert get_env("JIAFILE_TEST_VAR", "fallback") == "value"


@pytest.mark.parametrize(
    "raw, expected",
    [("42", 42), ("-7", -7), ("+3", 3), ("abc", 5), (" 42", 5), ("", 5)],
)
def test_get_env_int(clean_env, raw, expected):
    clean_env.setenv("JIAFILE_TEST_VAR", raw)
    assert get_env_int("JIAFILE_TEST_VAR", 5) == expected


@pytest.mark.parametrize(
    "raw, expected",
    [("t", True), ("TRUE", True), ("1", True), ("0", False), ("False", False), ("yes", None)],
)
def test_get_env_bool(clean_env, raw, expected):
    clean_env.setenv("JIAFILE_TEST_VAR", raw)
    default_marker = object()
    result = get_env_bool("JIAFILE_TEST_VAR", default_marker)
    assert result is (default_marker if expected is None else expected)


def test_get_env_string_slice(clean_env):
    assert get_env_string_slice("JIAFILE_TEST_VAR", ["x"]) == ["x"]
    clean_env.setenv("JIAFILE_TEST_VAR", "a,b,c")
    assert get_env_string_slice("JIAFILE_TEST_VAR", ["x"]) == ["a", "b", "c"]


def test_load_env_skips_missing_and_loads_existing(tmp_path, clean_env):
    env_file = tmp_path / "app.env"
    env_file.write_text("JIAFILE_TEST_VAR=loaded\n", encoding="utf-8")
    load_env(str(tmp_path / "missing.env"), str(env_file))
    assert get_env("JIAFILE_TEST_VAR") == "loaded"


def test_load_env_reports_unreadable_file(tmp_path):
    with pytest.raises(ConfigError, match="error loading"):
        load_env(str(tmp_path))