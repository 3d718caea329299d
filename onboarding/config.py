"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All settings overridable from environment variables or a .env file
    - get_settings() is cached (lru_cache) — single instance per process

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults work out-of-the-box: SQLite file database, JSON logs
"""

from functools import lru_cache
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Storage
    storage_backend: Literal["memory", "sql"] = "sql"
    database_url: str = "sqlite+aiosqlite:///./onboarding.db"

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosted Postgres URLs come as postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10
    database_create_tables: bool = True

    # Retry (initial attempt + storage_max_retries, linear backoff)
    storage_max_retries: int = 3
    storage_retry_base_delay_seconds: float = 1.0

    # Config files
    config_dir: str = "config"
    config_cache_ttl_seconds: float = 300

    # API
    cors_origins: list[str] = ["http://localhost:4321"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
