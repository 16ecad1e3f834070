"""YAML config loader with environment variable expansion."""

from __future__ import annotations

import os
import re
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, field_validator


def _expand_env_vars(value: str) -> str:
    """Replace ${VAR_NAME} with environment variable values."""
    pattern = re.compile(r"\$\{([^}]+)\}")
    def replacer(match: re.Match) -> str:
        var = match.group(1)
        return os.environ.get(var, match.group(0))
    return pattern.sub(replacer, value)


def _walk_and_expand(obj: object) -> object:
    """Recursively expand environment variables in strings."""
    if isinstance(obj, str):
        return _expand_env_vars(obj)
    if isinstance(obj, dict):
        return {k: _walk_and_expand(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_walk_and_expand(item) for item in obj]
    return obj


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class WebConfig(BaseModel):
    listen_address: str = ":9070"
    telemetry_path: str = "/metrics"

    @field_validator("listen_address")
    @classmethod
    def check_listen_address(cls, value: str) -> str:
        _, sep, port = value.rpartition(":")
        if not sep or not port.isdigit():
            raise ValueError(
                f"listen_address must be '[host]:port', got '{value}'"
            )
        return value

    @field_validator("telemetry_path")
    @classmethod
    def check_telemetry_path(cls, value: str) -> str:
        if not value.startswith("/"):
            raise ValueError("telemetry_path must start with '/'")
        return value

    @property
    def host(self) -> str:
        host = self.listen_address.rpartition(":")[0]
        # ":9070" listens on every interface; "[::1]:9070" is IPv6
        return host.strip("[]") or "0.0.0.0"

    @property
    def port(self) -> int:
        return int(self.listen_address.rpartition(":")[2])


class NameNodeConfig(BaseModel):
    jmx_url: str = "http://localhost:50070/jmx"
    timeout: float = 10.0


class LoggingConfig(BaseModel):
    level: str = "INFO"

    @field_validator("level")
    @classmethod
    def check_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(
                f"level must be one of {', '.join(LOG_LEVELS)}, got '{value}'"
            )
        return level


class Settings(BaseModel):
    web: WebConfig = Field(default_factory=WebConfig)
    namenode: NameNodeConfig = Field(default_factory=NameNodeConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_config(path: str | Path | None = None) -> Settings:
    """Load configuration from a YAML file, falling back to defaults."""
    if path is None:
        candidates = [
            Path("config.yaml"),
            Path("config.yml"),
            Path.home() / ".namenode_exporter" / "config.yaml",
        ]
        for candidate in candidates:
            if candidate.exists():
                path = candidate
                break

    if path is not None:
        path = Path(path)
        with open(path) as f:
            raw = yaml.safe_load(f) or {}
        if not isinstance(raw, dict):
            raise ValueError(f"Config file {path} must contain a mapping")
        raw = _walk_and_expand(raw)
        return Settings.model_validate(raw)

    return Settings()


def apply_overrides(settings: Settings, overrides: dict[str, object]) -> Settings:
    """Return a copy of *settings* with dotted-key overrides applied.

    Keys are ``section.field`` (e.g. ``web.listen_address``); ``None``
    values are ignored so unset command-line flags keep file values.
    """
    data = settings.model_dump()
    for key, value in overrides.items():
        if value is None:
            continue
        section, _, field = key.partition(".")
        if section not in data or field not in data[section]:
            raise ValueError(f"Unknown setting '{key}'")
        data[section][field] = value
    return Settings.model_validate(data)
