"""Application configuration loaded from environment variables."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# HS256 needs a key at least as long as the hash output
MIN_PRODUCTION_SECRET_LENGTH = 32


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    environment: Literal["development", "staging", "production"] = "development"
    log_level: str = "INFO"

    # PostgreSQL; a plain postgresql:// URL is switched to the asyncpg driver
    database_url: str
    db_pool_size: int = 5
    db_max_overflow: int = 10
    db_pool_timeout: int = 30
    db_pool_recycle: int = 3600

    # Tokens are issued elsewhere; this service only verifies them
    jwt_secret_key: str
    jwt_algorithm: str = "HS256"

    api_host: str = "0.0.0.0"
    api_port: int = 8000
    # Comma-separated; empty means localhost only in development
    cors_origins: str = ""

    # Engine windows, in days
    active_user_window_days: int = Field(default=7, ge=1)
    mastery_sweep_window_days: int = Field(default=2, ge=1)
    recommendation_retention_days: int = Field(default=30, ge=1)
    streak_lookback_days: int = Field(default=30, ge=1)

    # Feature flag defaults, read as FF_* variables
    ff_use_database_persistence: bool = False
    ff_enable_background_jobs: bool = False

    @field_validator("database_url")
    @classmethod
    def use_async_driver(cls, value: str) -> str:
        for prefix in ("postgresql://", "postgres://"):
            if value.startswith(prefix):
                return "postgresql+asyncpg://" + value[len(prefix):]
        return value

    @model_validator(mode="after")
    def check_production_secret(self) -> "Settings":
        if self.is_production and len(self.jwt_secret_key) < MIN_PRODUCTION_SECRET_LENGTH:
            raise ValueError(
                f"JWT_SECRET_KEY must be at least {MIN_PRODUCTION_SECRET_LENGTH} characters in production"
            )
        return self

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def cors_origins_list(self) -> list[str]:
        if self.cors_origins:
            return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]
        if self.is_development:
            return ["http://localhost:3000", "http://127.0.0.1:3000"]
        return []


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
