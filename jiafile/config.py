"""Application configuration loaded from a dotenv file and the environment."""

from __future__ import annotations

import io
import json
import os
import re
from dataclasses import dataclass, field

from dotenv import dotenv_values

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")
_TRUE_WORDS = {"1", "t", "T", "TRUE", "true", "True"}
_FALSE_WORDS = {"0", "f", "F", "FALSE", "false", "False"}


class ConfigError(Exception):
    """Raised when a configuration file exists but cannot be loaded."""


@dataclass
class ServerConfig:
    port: str = "8190"


@dataclass
class LogConfig:
    level: str = "info"
    dir: str = "logs"


@dataclass
class FileConfig:
    root_path: str = ""  # empty means file operations are not confined


@dataclass
class Config:
    server: ServerConfig = field(default_factory=ServerConfig)
    log: LogConfig = field(default_factory=LogConfig)
    file: FileConfig = field(default_factory=FileConfig)


def _load_env_file(path: str) -> None:
    """Load a dotenv file into the environment without overriding set variables.

    Raises FileNotFoundError when the file is absent, ConfigError on other failures.
    """
    try:
        with open(path, encoding="utf-8") as handle:
            text = handle.read()
    except FileNotFoundError:
        raise
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(str(exc)) from exc
    for key, value in dotenv_values(stream=io.StringIO(text)).items():
        if value is not None and key not in os.environ:
            os.environ[key] = value


def load_config(env_path: str = "") -> Config:
    """Load configuration; a missing env file yields the defaults."""
    env_path = env_path or ".env"
    try:
        _load_env_file(env_path)
    except FileNotFoundError:
        return Config()
    except ConfigError as exc:
        raise ConfigError(f"error loading .env file: {exc}") from exc

    config = Config()
    if port := os.environ.get("PORT"):
        config.server.port = port
    if level := os.environ.get("LOG_LEVEL"):
        config.log.level = level
    if log_dir := os.environ.get("LOG_DIR"):
        config.log.dir = log_dir
    if root_path := os.environ.get("ROOT_PATH"):
        config.file.root_path = root_path
    return config


@dataclass
class IgnoreConfig:
    paths: list[str] = field(default_factory=list)
    extensions: list[str] = field(default_factory=list)
    patterns: list[str] = field(default_factory=list)


def load_ignore_config(config_path: str = "") -> IgnoreConfig:
    """Read the JSON ignore list; file and decoding errors propagate."""
    if not config_path:
        config_path = os.path.join("internal", "config", "ignore.json")
    with open(config_path, encoding="utf-8") as handle:
        data = json.load(handle)
    if not isinstance(data, dict):
        raise ConfigError("ignore config must be a JSON object")

    def _strings(key: str) -> list[str]:
        value = data.get(key)
        if value is None:
            return []
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise ConfigError(f"ignore config field {key!r} must be a list of strings")
        return list(value)

    return IgnoreConfig(
        paths=_strings("paths"),
        extensions=_strings("extensions"),
        patterns=_strings("patterns"),
    )


def get_env(key: str, default: str = "") -> str:
    """Return the variable, or the default when it is unset or empty."""
    return os.environ.get(key) or default


def get_env_int(key: str, default: int = 0) -> int:
    """Return the variable as an integer, or the default if unset or malformed."""
    value = os.environ.get(key, "")
    if not value or not _INT_PATTERN.fullmatch(value):
        return default
    return int(value)


def get_env_bool(key: str, default: bool = False) -> bool:
    """Return the variable as a boolean, or the default if unset or malformed."""
    value = os.environ.get(key, "")
    if value in _TRUE_WORDS:
        return True
    if value in _FALSE_WORDS:
        return False
    return default


def get_env_string_slice(key: str, default: list[str] | None = None) -> list[str] | None:
    """Return the comma-separated variable as a list, or the default if unset."""
    value = os.environ.get(key, "")
    if not value:
        return default
    return value.split(",")


def load_env(*args: str) -> None:
    """Load each dotenv file in turn, skipping files that do not exist."""
    for filename in args or (".env",):
        try:
            _load_env_file(filename)
        except FileNotFoundError:
            continue
        except ConfigError as exc:
            raise ConfigError(f"error loading {filename}: {exc}") from exc