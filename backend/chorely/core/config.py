"""
Application configuration using Pydantic Settings.

Environment-based behaviour (background jobs, docs) is controlled by the ENVIRONMENT variable.
"""

from functools import lru_cache
from typing import List, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # ===========================================
    # Environment
    # ===========================================
    ENVIRONMENT: Literal["local", "test"] = "local"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # ===========================================
    # Database
    # ===========================================
    DATABASE_URL: str = "sqlite+aiosqlite:///./chorely.db"
    DATABASE_ECHO: bool = False

    # ===========================================
    # Auth (password + JWT)
    # ===========================================
    JWT_SECRET: str = "change-me"
    JWT_ISSUER: str = "chorely"
    JWT_EXPIRE_MINUTES: int = 60 * 24 * 7
    PASSWORD_MIN_LENGTH: int = 8
    PASSWORD_HASH_ITERATIONS: int = 600_000

    # ===========================================
    # Server
    # ===========================================
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    ALLOWED_ORIGINS: List[str] = Field(
        default=["http://localhost:3000", "http://localhost:5173"]
    )

    # ===========================================
    # Recurrence
    # ===========================================
    # How many days ahead recurring task instances are materialised
    RECURRENCE_LOOKAHEAD_DAYS: int = 30
    # Hour (UTC) of the daily top-up job
    RECURRENCE_JOB_HOUR: int = 3

    @property
    def is_test(self) -> bool:
        """Check if running under the test environment."""
        return self.ENVIRONMENT == "test"

    @property
    def is_local(self) -> bool:
        """Check if running in local environment."""
        return self.ENVIRONMENT == "local"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Using lru_cache ensures settings are loaded only once.
    """
    return Settings()
