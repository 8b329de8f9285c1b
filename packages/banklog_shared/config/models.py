"""Typed configuration models for banklog runtime settings."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, SecretStr, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "banklog" / "banklog.yaml"
ENV_PREFIX = "BANKLOG_"

API_HOSTS: dict[str, str] = {
    "sandbox": "https://sandbox.api.starkbank.com",
    "production": "https://api.starkbank.com",
}


class LoggingSettings(BaseModel):
    """Structured logging configuration for SDK consumers."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    json_output: bool = True
    service: str = "banklog"
    environment: str = "dev"


class ApiSettings(BaseModel):
    """Remote banking API connection defaults."""

    environment: Literal["sandbox", "production"] = "sandbox"
    base_url: str = ""
    version: str = "v2"
    language: str = "en-US"
    timeout_seconds: float = Field(default=15.0, gt=0)
    page_size: int = Field(default=100, ge=1, le=100)
    user_id: str = ""
    access_token: SecretStr = SecretStr("")
    workspace_id: str = ""

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.strip().rstrip("/")


class BankLogSettings(BaseSettings):
    """Root runtime settings resolved from init/env/yaml/defaults sources."""

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_nested_delimiter="__",
        extra="ignore",
        yaml_file=DEFAULT_CONFIG_PATH,
        yaml_file_encoding="utf-8",
    )

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    api: ApiSettings = Field(default_factory=ApiSettings)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Apply precedence: init > env > yaml > model defaults."""
        return (
            init_settings,
            env_settings,
            YamlConfigSettingsSource(settings_cls),
        )
