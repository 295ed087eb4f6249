from __future__ import annotations

import dataclasses
import os
import tomllib
from typing import Any, Mapping

from platformdirs import user_config_dir

from .config_types import ClientConfig, DEFAULT_URL
from .errors import InvalidArgument

APP_NAME = "trello-client"
CONFIG_FILENAME = "config.toml"

ENV_PREFIX = "TRELLO_"
_ENV_FIELDS = {
    "KEY": "key",
    "TOKEN": "token",
    "BASE_URL": "base_url",
    "IDENTIFIER": "identifier",
    "VERSION": "version",
    "CASING": "casing",
    "DEBUG": "debug",
    "FATAL": "fatal",
    "RETRIES": "retries",
    "TIMEOUT": "timeout_s",
}
_BOOL_FIELDS = {"debug", "fatal"}
# fields an explicit None override sets to None; others fall back to their default
_NULLABLE_FIELDS = {"token", "casing"}
_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


def config_path() -> str:
    return f"{user_config_dir(APP_NAME)}/{CONFIG_FILENAME}"


def normalize_base_url(raw: str | None) -> str:
    value = (raw or "").strip()
    if not value:
        return DEFAULT_URL
    value = value.rstrip("/")
    lowered = value.lower()
    if lowered.startswith("http://") or lowered.startswith("https://"):
        return value

    host = value.split("/", 1)[0]
    host = host.split(":", 1)[0].lower()
    if host in {"localhost", "127.0.0.1", "0.0.0.0"}:
        return f"http://{value}"
    return f"https://{value}"


def _coerce(name: str, value: Any) -> Any:
    if name in _BOOL_FIELDS:
        if isinstance(value, bool):
            return value
        text = str(value).strip().lower()
        if text in _TRUE:
            return True
        if text in _FALSE:
            return False
        raise InvalidArgument(f"{name} must be a boolean, got {value!r}")
    if name == "retries":
        try:
            return int(value)
        except (TypeError, ValueError) as e:
            raise InvalidArgument(f"retries must be an integer, got {value!r}") from e
    if name == "timeout_s":
        try:
            return float(value)
        except (TypeError, ValueError) as e:
            raise InvalidArgument(f"timeout must be a number, got {value!r}") from e
    if name == "version":
        text = str(value).strip()
        return int(text) if text.isdigit() else text
    if name == "casing":
        text = str(value or "").strip().lower()
        return text or None
    if name == "base_url":
        return normalize_base_url(str(value))
    return str(value) if value is not None else None


def _settings(raw: Mapping[str, Any], *, keep_none: bool = False) -> dict[str, Any]:
    """Coerce known fields; ``None`` clears a field only when ``keep_none``."""
    fields = {f.name for f in dataclasses.fields(ClientConfig)}
    # "timeout" is accepted as an alias in files and overrides.
    out: dict[str, Any] = {}
    for name, value in raw.items():
        if name == "timeout":
            name = "timeout_s"
        if name not in fields:
            continue
        if value is None:
            if keep_none:
                out[name] = None
            continue
        out[name] = _coerce(name, value)
    return out


def _build(settings: dict[str, Any], source: str) -> ClientConfig:
    if not settings.get("key"):
        raise InvalidArgument(f"no Trello API key configured; set {ENV_PREFIX}KEY or key in {source}")
    return ClientConfig(**settings)


def from_toml(data: dict[str, Any]) -> ClientConfig:
    return _build(_settings(data), "the config file")


def _env_settings(env: Mapping[str, str] | None = None) -> dict[str, Any]:
    env = os.environ if env is None else env
    raw = {
        field: env[ENV_PREFIX + suffix]
        for suffix, field in _ENV_FIELDS.items()
        if ENV_PREFIX + suffix in env
    }
    return _settings(raw)


def load_config(
        path: str | None = None,
        *,
        env: Mapping[str, str] | None = None,
        **overrides: Any,
) -> ClientConfig:
    """Build a ClientConfig from the config file, then env, then overrides."""
    settings: dict[str, Any] = {}
    try:
        with open(path or config_path(), "rb") as f:
            settings.update(_settings(tomllib.load(f)))
    except FileNotFoundError:
        pass
    settings.update(_env_settings(env))
    for name, value in _settings(overrides, keep_none=True).items():
        if value is None and name not in _NULLABLE_FIELDS:
            settings.pop(name, None)
        else:
            settings[name] = value
    return _build(settings, path or config_path())
