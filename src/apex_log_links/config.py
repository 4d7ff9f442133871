"""Configuration management for apex-log-links."""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

_config_logger = logging.getLogger(__name__)


class LoggingSettings(BaseModel):
    level: str = Field(default="INFO", description="Python logging level name")
    file: str | None = Field(default=None, description="Optional log file path")


class SalesforceSettings(BaseModel):
    api_version: str = Field(default="62.0", description="Tooling API version, e.g. 62.0")
    session_cookie: str = Field(default="sid", description="Name of the session cookie")
    http_timeout_seconds: float | None = Field(
        default=None,
        gt=0,
        description="Optional HTTP timeout. None leaves requests unbounded.",
    )

    @field_validator("api_version")
    @classmethod
    def _validate_api_version(cls, value: str) -> str:
        candidate = value.strip().lstrip("vV")
        major, _, minor = candidate.partition(".")
        if not major.isdigit() or (minor and not minor.isdigit()):
            raise ValueError(f"api_version must look like '62.0', got {value!r}")
        return candidate if minor else f"{candidate}.0"


class SessionSettings(BaseModel):
    cookie_file: str | None = Field(
        default=None,
        description="Netscape cookies.txt holding the browser session cookies",
    )
    session_id: str | None = Field(
        default=None,
        description="Static session id used as bearer credential",
    )


class StorageSettings(BaseModel):
    artifact_path: str = Field(default="./data/logs")


class Settings(BaseModel):
    salesforce: SalesforceSettings = Field(default_factory=SalesforceSettings)
    session: SessionSettings = Field(default_factory=SessionSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


ENV_KEYS = {
    "api_version": "SF_API_VERSION",
    "session_cookie": "SF_SESSION_COOKIE",
    "http_timeout": "HTTP_TIMEOUT_SECONDS",
    "cookie_file": "SF_COOKIE_FILE",
    "session_id": "SF_SESSION_ID",
    "artifact_path": "ARTIFACT_PATH",
    "log_level": "LOG_LEVEL",
    "log_file": "LOG_FILE",
}


def _resolve_path(path: str) -> str:
    return str(Path(path).expanduser().resolve())


def _env_str(key: str) -> str | None:
    value = os.getenv(key)
    if value is None or value.strip() == "":
        return None
    return value.strip()


def _env_float(key: str, default: float | None) -> float | None:
    value = os.getenv(key)
    if value is None or value.strip() == "":
        return default
    try:
        return float(value)
    except ValueError:
        _config_logger.warning(
            "Invalid float value for %s: %r, using default %s", key, value, default
        )
        return default


def load_settings() -> Settings:
    """Load configuration and cache the result."""

    return _load_settings_cached()


@lru_cache(maxsize=1)
def _load_settings_cached() -> Settings:
    load_dotenv(dotenv_path=Path.cwd() / ".env")
    cookie_file_env = _env_str(ENV_KEYS["cookie_file"])
    log_file_env = _env_str(ENV_KEYS["log_file"])

    settings_data: dict[str, object] = {
        "salesforce": {
            "api_version": os.getenv(
                ENV_KEYS["api_version"], SalesforceSettings().api_version
            ),
            "session_cookie": os.getenv(
                ENV_KEYS["session_cookie"], SalesforceSettings().session_cookie
            ),
            "http_timeout_seconds": _env_float(
                ENV_KEYS["http_timeout"],
                SalesforceSettings().http_timeout_seconds,
            ),
        },
        "session": {
            "cookie_file": _resolve_path(cookie_file_env) if cookie_file_env else None,
            "session_id": _env_str(ENV_KEYS["session_id"]),
        },
        "storage": {
            "artifact_path": _resolve_path(
                os.getenv(ENV_KEYS["artifact_path"], StorageSettings().artifact_path)
            ),
        },
        "logging": {
            "level": os.getenv(ENV_KEYS["log_level"], LoggingSettings().level),
            "file": _resolve_path(log_file_env) if log_file_env else None,
        },
    }

    try:
        settings = Settings.model_validate(settings_data)
    except ValidationError as exc:
        raise RuntimeError(f"Invalid configuration: {exc}") from exc

    return settings
