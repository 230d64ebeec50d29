"""Configuration management for the account server.

This module provides centralized configuration management using Pydantic settings
with environment variable support, validation, and error handling.
"""

from typing import Annotated
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support and validation."""
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", case_sensitive=False)

    # Database Configuration
    database_url: Annotated[str, Field(description="SQLite, PostgreSQL or MySQL database connection URL")] = "sqlite:///./accounts.db"
    debug: Annotated[bool, Field(description="Enable debug mode")] = False
    log_level: Annotated[str, Field(description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)")] = "INFO"

    # Hashing Configuration
    salt_rounds: Annotated[int, Field(description="bcrypt cost factor used for password and email hashes")] = 10

    # Environment Configuration
    environment: Annotated[str, Field(description="Application environment (development, testing, production)")] = "development"
    cors_origins: Annotated[list[str], Field(description="Origins allowed outside development (JSON list)")] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is one of the allowed values."""
        allowed_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed_levels:
            raise ValueError(f"log_level must be one of {allowed_levels}")
        return v.upper()

    @field_validator("salt_rounds")
    @classmethod
    def validate_salt_rounds(cls, v: int) -> int:
        """Validate the cost factor is inside bcrypt's supported range."""
        if not 4 <= v <= 31:
            raise ValueError("salt_rounds must be between 4 and 31")
        return v

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Validate database URL format."""
        if not v.startswith(("postgresql://", "postgresql+psycopg2://", "mysql+pymysql://", "sqlite:///")):
            raise ValueError("database_url must be a valid PostgreSQL, MySQL or SQLite URL")
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment.lower() == "development"

    @property
    def is_testing(self) -> bool:
        """Check if running in testing environment."""
        return self.environment.lower() == "testing"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"


class ConfigurationError(Exception):
    """Raised when configuration validation fails."""
    pass


def get_settings() -> Settings:
    """Get application settings with error handling.

    Returns:
        Settings: Validated application settings

    Raises:
        ConfigurationError: If configuration validation fails
    """
    try:
        return Settings()
    except Exception as e:
        raise ConfigurationError(f"Configuration validation failed: {str(e)}") from e


# Global settings instance
settings = get_settings()
