"""Configuration management for Threat Store using Pydantic Settings."""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_STORAGE_DIRECTORY = "threat-models"


class StorageConfig(BaseSettings):
    """Git-backed storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="THREAT_STORE_STORAGE_",
        populate_by_name=True,
    )

    path: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("THREAT_STORE_STORAGE_PATH", "LOCAL_STORAGE_PATH"),
        description="Root directory of the model repository",
    )
    author_name: Optional[str] = None
    author_email: Optional[str] = None

    def resolved_path(self) -> Path:
        """Resolve the storage root, falling back to ./threat-models."""
        if self.path:
            return Path(self.path).expanduser().resolve()
        return Path.cwd() / DEFAULT_STORAGE_DIRECTORY


class ApiConfig(BaseSettings):
    """REST API policy configuration."""

    model_config = SettingsConfigDict(env_prefix="THREAT_STORE_API_")

    enable_delete: bool = False
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])


class ServerConfig(BaseSettings):
    """Server configuration."""

    model_config = SettingsConfigDict(env_prefix="THREAT_STORE_SERVER_")

    host: str = "0.0.0.0"
    port: int = 3000


class ObservabilityConfig(BaseSettings):
    """Observability configuration."""

    model_config = SettingsConfigDict(env_prefix="THREAT_STORE_OBSERVABILITY_")

    log_level: str = "info"
    log_format: str = "json"  # json, console
    otlp_endpoint: str = ""
    environment: str = "development"


class Config(BaseSettings):
    """Root configuration for Threat Store."""

    model_config = SettingsConfigDict(
        env_prefix="THREAT_STORE_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    storage: StorageConfig = Field(default_factory=StorageConfig)
    api: ApiConfig = Field(default_factory=ApiConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)


@lru_cache
def get_config() -> Config:
    """Get cached configuration instance."""
    return Config()
