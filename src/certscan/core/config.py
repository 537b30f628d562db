"""Configuration management using pydantic-settings."""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="CERTSCAN_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application configuration file (domains, SMTP, notifications)
    config_path: Path = Field(default=Path("config.json"))

    # Scan Configuration
    port: int = Field(default=443, ge=1, le=65535)
    connect_timeout: float = Field(default=10.0, gt=0, le=120)
    max_concurrent_scans: int = Field(default=50, ge=1, le=1000)
    connections_per_second: int = Field(default=100, ge=1, le=1000)

    # PEM bundle of trust anchors; platform defaults when unset
    ca_bundle: Path | None = Field(default=None)
    # Retrieve missing intermediates from the Authority Information Access URLs
    fetch_intermediates: bool = Field(default=True)

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO"
    )
    log_format: Literal["json", "text"] = Field(default="text")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
