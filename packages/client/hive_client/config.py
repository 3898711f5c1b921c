"""
Configuration loading and validation.

Settings come from ``HIVE_``-prefixed environment variables, optionally layered
under a YAML file. Tokens are resolved from the environment variables the
config names; they are never stored in config files.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .http import ConfigurationError


class ApiConfig(BaseModel):
    base_url: str = "http://localhost:8000"
    bearer_token_env: str = "HIVE_API_BEARER"
    request_timeout_seconds: Optional[float] = 30
    verify_tls: bool = True

    @property
    def bearer_token(self) -> str | None:
        token = os.environ.get(self.bearer_token_env, "").strip()
        return token or None


class AuditConfig(BaseModel):
    base_url: str = ""  # empty = audit API not configured
    read_token_env: str = "HIVE_AUDIT_READ_TOKEN"
    default_limit: int = Field(default=25, ge=1, le=500)

    @property
    def read_token(self) -> str | None:
        token = os.environ.get(self.read_token_env, "").strip()
        return token or None

    @property
    def configured(self) -> bool:
        return bool(self.base_url.strip())


class LoggingConfig(BaseModel):
    level: str = "info"
    format: Literal["json", "text"] = "json"


class ClientSettings(BaseSettings):
    """Hive client configuration."""

    model_config = SettingsConfigDict(
        env_prefix="HIVE_",
        env_nested_delimiter="__",
        env_file=".env",
        extra="ignore",
    )

    api: ApiConfig = Field(default_factory=ApiConfig)
    audit: AuditConfig = Field(default_factory=AuditConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_settings(path: str | Path | None = None) -> ClientSettings:
    """Build settings from the environment, with a YAML file layered on top.

    Keys present in the file win over ``HIVE_*`` variables; keys it omits fall
    back to the environment. Without ``path`` the cached environment-only
    settings are returned.
    """
    if path is None:
        return get_settings()

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        raw = yaml.safe_load(path.read_text()) or {}
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"{path} is not valid YAML: {exc}") from exc
    if not isinstance(raw, dict):
        raise ConfigurationError(f"{path} must contain a mapping at the top level")

    return ClientSettings(**raw)


@lru_cache
def get_settings() -> ClientSettings:
    return ClientSettings()
