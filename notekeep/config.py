"""
Notekeep Backend: Application Configuration
============================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads from environment variables (or a .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by the app factory, the store and Alembic.
When:  Loaded once at module import time.

Database connection:
    The connection string is assembled from DB_HOST, DB_PORT, DB_USER,
    DB_PASSWORD and DB_NAME. DATABASE_URL, when set, replaces the assembled
    URL entirely (tests point it at sqlite+aiosqlite).
"""

from typing import List, Optional
from urllib.parse import quote_plus

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

# The service always listens on this port.
SERVER_PORT = 3000


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have development defaults. Production deployments
    override the DB_* credentials.
    """

    # ── Database ──────────────────────────────────────────────────────────
    db_host: str = Field(default="localhost", description="Database host")
    db_port: int = Field(default=5432, ge=1, le=65535, description="Database port")
    db_user: str = Field(default="notekeep", description="Database user")
    db_password: str = Field(default="notekeep", description="Database password")
    db_name: str = Field(default="notekeep", description="Database name")

    # Full URL override; takes precedence over the DB_* fields
    database_url_override: Optional[str] = Field(
        default=None,
        alias="DATABASE_URL",
        description="Async SQLAlchemy URL used instead of the assembled one",
    )

    # Pool sizing for the asyncpg engine (ignored by drivers without pooling)
    db_pool_size: int = Field(default=5, ge=1, le=100)
    db_max_overflow: int = Field(default=10, ge=0, le=50)
    db_pool_pre_ping: bool = Field(default=True)

    # ── CORS ──────────────────────────────────────────────────────────────
    # Comma-separated origins; "*" allows every origin
    cors_origins: str = Field(default="*")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── Server ────────────────────────────────────────────────────────────
    server_host: str = Field(default="0.0.0.0")

    @property
    def server_port(self) -> int:
        return SERVER_PORT

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "populate_by_name": True,
        "extra": "ignore",
    }

    @property
    def database_url(self) -> str:
        """
        What:  The async SQLAlchemy URL for the note store.
        How:   DATABASE_URL if set, else postgresql+asyncpg built from DB_*
               with URL-escaped credentials.
        """
        if self.database_url_override:
            return self.database_url_override
        return (
            f"postgresql+asyncpg://{quote_plus(self.db_user)}:{quote_plus(self.db_password)}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )


# Singleton instance imported throughout the application
settings = Settings()
