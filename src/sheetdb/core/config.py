"""Configuration management for SheetDB.

This module uses Pydantic Settings to load and validate configuration from
environment variables and .env files. Configuration is loaded at application
startup and is immutable during runtime.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration settings.

    Settings are loaded from environment variables and .env files.
    All configuration values are validated at startup.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="SHEETDB_",
        case_sensitive=False,
        extra="ignore",
    )

    # Application Settings
    app_name: str = "SheetDB"
    app_version: str = "0.1.0"
    environment: Literal["development", "production", "testing"] = "development"
    debug: bool = False
    external_url: str = Field(
        default="http://localhost:8000",
        description="Public URL of this deployment, baked into the generated client driver",
    )

    # Server Settings
    host: str = "0.0.0.0"
    port: int = 8000
    workers: int = 1

    # Backing Store Settings
    store_backend: Literal["memory", "sql"] = "memory"
    database_url: str = "sqlite+aiosqlite:///./sheetdb_data/sheetdb.db"
    db_echo: bool = False

    # Engine Settings
    verify_row_identity: bool = Field(
        default=False,
        description="Re-read a row's _id before writing to or deleting it",
    )

    # Logging Settings
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "console"] = "json"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_testing(self) -> bool:
        """Check if running in testing environment."""
        return self.environment == "testing"

    @model_validator(mode="after")
    def validate_single_worker_backends(self) -> "Settings":
        """Validate that process-local and SQLite stores run with one worker."""
        if self.workers > 1 and self.store_backend == "memory":
            raise ValueError(
                "The memory store is local to one process. "
                f"Requested {self.workers} workers, but the memory store requires workers=1. "
                "Either use --workers 1 or switch to the sql backend."
            )
        if (
            self.workers > 1
            and self.store_backend == "sql"
            and self.database_url.startswith("sqlite")
        ):
            raise ValueError(
                "SQLite does not support multiple worker processes. "
                f"Requested {self.workers} workers, but SQLite requires workers=1. "
                "Either use --workers 1 or switch to PostgreSQL."
            )
        return self


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    This function caches the settings instance to avoid reloading
    configuration on every call. Settings are loaded once at startup.

    Returns:
        Settings: Cached application settings instance.
    """
    return Settings()
