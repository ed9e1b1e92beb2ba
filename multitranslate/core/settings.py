"""Application settings and configuration management."""

from __future__ import annotations

from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import AliasChoices, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class GatewayMode(str, Enum):
    """How round-trip translations are obtained."""

    LOCAL = "local"
    REMOTE = "remote"


class Settings(BaseSettings):
    """Runtime configuration derived from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_file=(".env",),
        extra="ignore",
        populate_by_name=True,
    )

    app_name: str = Field(default="Multi Translation Service")
    app_version: str = Field(default="0.1.0")
    environment: str = Field(default="development")
    log_level: str = Field(default="INFO")

    allowed_origins: list[str] = Field(
        default_factory=list,
        description="List of origins permitted by CORS configuration.",
    )

    min_repeat_count: int = Field(default=1, ge=1)
    max_repeat_count: int = Field(default=10, ge=1)
    default_repeat_count: int = Field(default=5, ge=1)
    step_delay_seconds: float = Field(
        default=0.5,
        ge=0.0,
        description="Pause between successful steps so progress can be observed.",
    )

    target_language: str = Field(
        default="ja",
        description="Language every round trip translates back into.",
    )
    languages_file: Path | None = Field(
        default=None,
        validation_alias=AliasChoices("APP_LANGUAGES_FILE", "LANGUAGES_FILE"),
        description="JSON file listing candidate intermediate languages.",
    )

    gateway_mode: GatewayMode = Field(default=GatewayMode.LOCAL)
    remote_base_url: str = Field(
        default="http://localhost:8080",
        description="Base URL of a remote translation service used in remote mode.",
    )
    google_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("APP_GOOGLE_API_KEY", "GOOGLE_API_KEY"),
        description="API key for Google Cloud Translation.",
    )
    google_base_url: str = Field(default="https://translation.googleapis.com")
    request_timeout: float = Field(default=30.0, gt=0.0, description="HTTP request timeout in seconds")

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def _split_allowed_origins(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @model_validator(mode="after")
    def _check_repeat_bounds(self) -> "Settings":
        if self.min_repeat_count > self.max_repeat_count:
            raise ValueError("min_repeat_count must not exceed max_repeat_count")
        if not self.min_repeat_count <= self.default_repeat_count <= self.max_repeat_count:
            raise ValueError("default_repeat_count must lie within the repeat count bounds")
        return self

    @property
    def uses_mock_provider(self) -> bool:
        return self.environment in {"development", "test"} or not self.google_api_key


@lru_cache()
def get_settings() -> Settings:
    """Return a cached instance of application settings."""

    return Settings()
