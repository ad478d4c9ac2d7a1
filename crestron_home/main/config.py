"""
Application Settings - Main Layer

Use Pydantic Settings for configuration management.
This module handles configuration settings provided using
environment variables, .env files and default values.
"""

import json
from pathlib import Path
from typing import Annotated, Any, List, Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from crestron_home.shared import EnumEnvironment, EnumLogLevel

DEFAULT_ENABLED_TYPES = [
    "Dimmer",
    "Switch",
    "Shade",
    "Scene",
    "Thermostat",
    "DoorLock",
    "SecuritySystem",
]


class CrestronSettings(BaseSettings):
    """Controller connection and discovery settings."""

    host: str = Field(min_length=1, description="Controller host name or address")
    api_token: str = Field(
        min_length=1,
        repr=False,
        description="Long-lived API token of the controller web API",
    )
    api_token_file: Optional[Path] = Field(
        default=None,
        description="File holding the API token (Docker secret) when api_token is unset",
    )
    enabled_types: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: list(DEFAULT_ENABLED_TYPES),
        description="Resolved device types to expose (JSON list or comma separated)",
    )
    refresh_interval: float = Field(
        default=30.0, gt=0, description="Seconds between discovery passes"
    )
    request_timeout: float = Field(
        default=10.0, gt=0, description="Timeout of every controller request, seconds"
    )
    verify_ssl: bool = Field(
        default=False,
        description="Verify the controller certificate (controllers ship self-signed)",
    )
    session_ttl: float = Field(
        default=600.0, gt=0, description="Server-side lifetime of a session, seconds"
    )
    session_safety_margin: float = Field(
        default=60.0, ge=0, description="Renew this many seconds before expiry"
    )

    model_config = SettingsConfigDict(
        env_prefix="CRESTRON_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @model_validator(mode="before")
    @classmethod
    def _read_api_token_file(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        token_file = data.get("api_token_file")
        if not token_file or data.get("api_token"):
            return data
        try:
            token = Path(token_file).read_text(encoding="utf-8").strip()
        except (OSError, UnicodeDecodeError) as e:
            raise ValueError(f"Cannot read api_token_file {token_file}: {e}") from e
        return {**data, "api_token": token}

    @field_validator("host")
    @classmethod
    def _strip_host(cls, value: str) -> str:
        host = value.strip().rstrip("/")
        for scheme in ("https://", "http://"):
            if host.lower().startswith(scheme):
                host = host[len(scheme) :]
        if not host:
            raise ValueError("host must not be empty")
        return host

    @field_validator("enabled_types", mode="before")
    @classmethod
    def _parse_enabled_types(cls, value: Any) -> Any:
        if isinstance(value, str):
            text = value.strip()
            if text.startswith("["):
                return json.loads(text)
            return [item.strip() for item in text.split(",") if item.strip()]
        return value

    @model_validator(mode="after")
    def _check_session_margin(self) -> "CrestronSettings":
        if self.session_safety_margin >= self.session_ttl:
            raise ValueError("session_safety_margin must be smaller than session_ttl")
        return self


class ApiSettings(BaseSettings):
    """HTTP API settings."""

    title: str = Field(default="Crestron Home Bridge", description="API title")
    description: str = Field(
        default="Canonical device model and commands for a Crestron Home controller",
        description="API description",
    )
    version: str = Field(default="1.0.0", description="API version")
    host: str = Field(default="0.0.0.0", description="Address to bind the server")
    port: int = Field(default=8000, description="Port to bind the server")
    reload: bool = Field(
        default=False, description="Enable auto-reload for development"
    )

    model_config = SettingsConfigDict(
        env_prefix="API_", case_sensitive=False, extra="ignore"
    )


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    level: EnumLogLevel = Field(default=EnumLogLevel.INFO, description="Logging level")
    file_path: Optional[str] = Field(
        default=None, description="Log file path (if None, logs to console)"
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_", case_sensitive=False, extra="ignore"
    )


class AppSettings(BaseSettings):
    """Main application settings, aggregating all sub-settings."""

    environment: EnumEnvironment = Field(
        default=EnumEnvironment.DEVELOPMENT, description="Application environment"
    )

    crestron: CrestronSettings = Field(default_factory=CrestronSettings)
    api: ApiSettings = Field(default_factory=ApiSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_nested_delimiter="__",
        extra="ignore",
    )


def get_settings() -> AppSettings:
    """
    Get application settings instance Factory.

    Used to be mocked in tests, allowing different settings based on environment.
    """
    return AppSettings()
