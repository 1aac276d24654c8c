"""
Centralized configuration for the magazine backend.
Uses Pydantic Settings for validation and type safety.
"""

from functools import lru_cache
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppBaseSettings(BaseSettings):
    """Base settings with shared configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


class DatabaseSettings(AppBaseSettings):
    """MongoDB connection settings."""

    database_url: str = Field(
        default="mongodb://localhost:27017",
        validation_alias="DATABASE_URL",
    )
    database_name: str = Field(
        default="magazine",
        validation_alias="DATABASE_NAME",
    )
    server_selection_timeout_ms: int = Field(
        default=5000,
        validation_alias="DATABASE_TIMEOUT_MS",
    )

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v):
        """Only mongodb:// and mongodb+srv:// URLs are usable."""
        if not v.startswith(("mongodb://", "mongodb+srv://")):
            raise ValueError("DATABASE_URL must start with mongodb:// or mongodb+srv://")
        return v


class SecuritySettings(AppBaseSettings):
    """Password hashing settings."""

    bcrypt_rounds: int = Field(
        default=12,
        validation_alias="BCRYPT_ROUNDS",
    )

    @field_validator("bcrypt_rounds")
    @classmethod
    def validate_rounds(cls, v):
        if not 4 <= v <= 31:
            raise ValueError("BCRYPT_ROUNDS must be between 4 and 31")
        return v


class ServerSettings(AppBaseSettings):
    """HTTP server settings."""

    port: int = Field(
        default=8000,
        validation_alias="PORT",
    )
    cors_origins: str = Field(
        default="*",
        validation_alias="CORS_ORIGINS",
    )

    @property
    def allowed_origins(self) -> List[str]:
        """Parse the comma-separated CORS_ORIGINS value."""
        return [item.strip() for item in self.cors_origins.split(",") if item.strip()]


class LoggingSettings(AppBaseSettings):
    """Logging configuration settings."""

    level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
    )
    include_correlation_id: bool = Field(
        default=True,
        validation_alias="LOG_INCLUDE_CORRELATION_ID",
    )
    json_logs: bool = Field(
        default=False,
        validation_alias="JSON_LOGS",
    )

    @field_validator("level")
    @classmethod
    def validate_level(cls, v):
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {v}")
        return level


class Settings(AppBaseSettings):
    """Main settings class that combines all configuration sections."""

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    security: SecuritySettings = Field(default_factory=SecuritySettings)
    server: ServerSettings = Field(default_factory=ServerSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    service_name: str = Field(
        default="magazine",
        validation_alias="SERVICE_NAME",
    )
    environment: str = Field(
        default="development",
        validation_alias="ENVIRONMENT",
    )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
