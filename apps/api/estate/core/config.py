"""Application configuration for the listings service."""
from __future__ import annotations

from functools import lru_cache
from typing import Annotated

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    app_env: str = Field(default="development")
    log_level: str = Field(default="INFO")
    cors_allow_origins: Annotated[list[str], NoDecode] = Field(default_factory=lambda: ["*"])

    backend_url: str = Field(default="")
    backend_key: str = Field(default="")
    backend_ssl_required: bool = Field(default=False)

    local_storage_path: str = Field(default=".data/local-storage.json")
    local_storage_quota_bytes: int = Field(default=5 * 1024 * 1024, ge=0)

    change_poll_interval_seconds: float = Field(default=2.0, gt=0)

    @field_validator("cors_allow_origins", mode="before")
    @classmethod
    def _split_origins(cls, value: object) -> object:
        """Allow comma-separated env values for CORS origins."""

        if isinstance(value, str):
            parts = [item.strip() for item in value.split(",") if item.strip()]
            return parts
        return value

    @property
    def backend_configured(self) -> bool:
        """Backend mode needs both the endpoint and the access key."""

        return bool(self.backend_url.strip()) and bool(self.backend_key.strip())


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""

    return Settings()


settings = get_settings()
