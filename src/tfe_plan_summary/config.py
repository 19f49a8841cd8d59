"""Configuration management for the plan summary pipeline."""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

from tfe_plan_summary.errors import ConfigurationError

_config_logger = logging.getLogger(__name__)

DEFAULT_TFE_HOST = "app.terraform.io"


class LoggingSettings(BaseModel):
    level: str = Field(default="WARNING", description="Python logging level name")
    file: str | None = Field(default=None, description="Optional log file path")
    syslog: bool = Field(default=False, description="Also emit records to local syslog")


class TfeSettings(BaseModel):
    token: str | None = Field(default=None, repr=False)
    host: str = Field(default=DEFAULT_TFE_HOST)
    organization: str | None = Field(default=None)
    workspace: str | None = Field(default=None)
    timeout_seconds: float = Field(default=30.0, ge=0.1, le=600.0)

    @field_validator("host")
    @classmethod
    def _normalize_host(cls, value: str) -> str:
        return normalize_host(value)


class Settings(BaseModel):
    tfe: TfeSettings = Field(default_factory=TfeSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    def require_workspace(self) -> tuple[str, str]:
        """Return ``(organization, workspace)`` or raise if either is unset."""
        missing = [
            key
            for key, value in (
                (ENV_KEYS["organization"], self.tfe.organization),
                (ENV_KEYS["workspace"], self.tfe.workspace),
            )
            if not value
        ]
        if missing:
            raise ConfigurationError(
                "missing required environment variable(s): " + ", ".join(missing)
            )
        return self.tfe.organization, self.tfe.workspace  # type: ignore[return-value]


ENV_KEYS = {
    "token": "TFE_TOKEN",
    "host": "TFE_URL",
    "organization": "TFE_ORG",
    "workspace": "WORKSPACE_NAME",
    "timeout": "TFE_TIMEOUT_SECONDS",
    "log_level": "LOG_LEVEL",
    "log_file": "LOG_FILE",
    "log_syslog": "LOG_SYSLOG",
}

_TRUE_VALUES = frozenset({"1", "true", "yes"})


def normalize_host(value: str) -> str:
    """Strip an optional scheme, path separators and whitespace from a host."""
    candidate = value.strip()
    lowered = candidate.lower()
    for scheme in ("https://", "http://"):
        if lowered.startswith(scheme):
            candidate = candidate[len(scheme):]
            break
    candidate = candidate.rstrip("/")
    if not candidate:
        raise ValueError("TFE host must not be empty")
    if "/" in candidate:
        raise ValueError(f"TFE host must not include a path: {value}")
    return candidate


def _env_str(key: str) -> str | None:
    value = os.getenv(key)
    if value is None:
        return None
    value = value.strip()
    return value or None


def _env_bool(key: str, default: bool) -> bool:
    value = os.getenv(key)
    if value is None:
        return default
    return value.strip().lower() in _TRUE_VALUES


def _env_float(key: str, default: float) -> float:
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

    settings_data: dict[str, object] = {
        "tfe": {
            "token": _env_str(ENV_KEYS["token"]),
            "host": _env_str(ENV_KEYS["host"]) or DEFAULT_TFE_HOST,
            "organization": _env_str(ENV_KEYS["organization"]),
            "workspace": _env_str(ENV_KEYS["workspace"]),
            "timeout_seconds": _env_float(
                ENV_KEYS["timeout"],
                TfeSettings().timeout_seconds,
            ),
        },
        "logging": {
            "level": os.getenv(ENV_KEYS["log_level"], LoggingSettings().level),
            "file": _env_str(ENV_KEYS["log_file"]),
            "syslog": _env_bool(ENV_KEYS["log_syslog"], LoggingSettings().syslog),
        },
    }

    try:
        return Settings.model_validate(settings_data)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid configuration: {exc}") from exc
