"""Centralized application configuration using Pydantic settings."""
from functools import lru_cache
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-driven configuration for the reservation service."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    database_url: str = Field(
        default="sqlite:///./campusbook.db",
        description="SQLAlchemy database URL. SQLite and PostgreSQL are supported; defaults to local SQLite.",
    )
    run_db_migrations: bool = Field(
        default=True,
        description="Whether the service should create database tables on startup.",
    )
    jwt_secret: str = Field(default="campusbook-secret-key", description="JWT signing secret")
    jwt_algorithm: str = Field(default="HS256", description="JWT signing algorithm")
    access_token_expire_minutes: int = Field(default=24 * 60, description="Token lifetime in minutes")
    cors_origins: List[str] = Field(default_factory=lambda: ["*"], description="Allowed CORS origins")
    default_rate_limit: str = Field(default="60/minute", description="Global rate limiting rule")
    rate_limiting_enabled: bool = Field(default=True, description="Toggle to disable SlowAPI limits (useful in tests)")
    seed_admin_username: str = Field(default="admin", description="Username of the admin created on first start")
    seed_admin_password: str = Field(default="admin123", description="Password of the admin created on first start")
    log_dir: str = Field(default="logs", description="Directory for the HTTP audit log files")

    service_port: int = 3001


@lru_cache
def get_settings() -> Settings:
    """Return a cached instance of the Settings object."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the cached Settings instance (useful for tests)."""

    get_settings.cache_clear()
