"""Configuration management for the PGC Ansible inventory."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Literal, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

from .inventory.projector import DEFAULT_PYTHON_INTERPRETER

CONFIG_FILES = ("pgc-inventory.yml", "pgc-inventory.yaml")


class AwsSettings(BaseModel):
    """Credentials used to sign inventory API requests."""

    region: str = Field(default="us-east-2")
    profile: str = Field(default="default", description="Shared-credentials profile name.")


class Settings(BaseSettings):
    """Centralised runtime configuration."""

    # Inventory API
    baseurl: Optional[str] = Field(default=None, description="Base URL of the inventory API.")
    aws: AwsSettings = Field(default_factory=AwsSettings)
    request_timeout: float = Field(default=30.0, gt=0)

    # Output
    python_interpreter: str = Field(
        default=DEFAULT_PYTHON_INTERPRETER,
        description="Value of ansible_python_interpreter; empty to omit it.",
    )
    host_alias: Literal["fqdn", "hostname"] = Field(default="fqdn")

    # Runtime
    log_level: str = Field(default="WARNING")
    api_host: str = Field(default="127.0.0.1")
    api_port: int = Field(default=8000)

    model_config = SettingsConfigDict(
        env_prefix="PGC_INVENTORY_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        yaml_file=CONFIG_FILES,
        extra="ignore",
        validate_assignment=True,
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )

    @field_validator("baseurl")
    def _validate_baseurl(cls, value: Optional[str]) -> Optional[str]:
        if not value:
            return None
        parsed = urlparse(value)
        if parsed.scheme not in {"http", "https"} or not parsed.netloc:
            raise ValueError(f"unable to parse api base url '{value}'")
        return value

    @field_validator("log_level")
    def _normalise_log_level(cls, value: str) -> str:
        value = value.upper()
        if not isinstance(logging.getLevelName(value), int):
            raise ValueError(f"unknown log level '{value}'")
        return value


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance."""
    return Settings()
