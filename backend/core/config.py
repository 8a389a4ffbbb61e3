"""
Configuration management for the review backend.

All tunables are read from environment variables (or a local .env file)
so deployments never need code changes to adjust routing policy,
retry behaviour or database location.
"""

from functools import lru_cache
from typing import List

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings with environment variable support.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database Configuration
    database_url: str = "sqlite:///./reviewflow.db"
    db_pool_size: int = 10
    db_max_overflow: int = 20
    log_sql_queries: bool = False

    # Environment Settings
    environment: str = "development"
    debug: bool = True
    log_level: str = "INFO"

    # API
    cors_origins: List[str] = ["http://localhost:3000"]
    public_base_url: str = "http://localhost:3000"

    # Review routing policy
    review_public_threshold: int = 4

    # Aggregate update retries (conflicts, lock timeouts)
    aggregate_max_retries: int = 5
    aggregate_retry_initial_delay: float = 0.05  # seconds
    aggregate_retry_max_delay: float = 1.0  # seconds
    aggregate_retry_backoff: float = 2.0

    # Dashboard
    analytics_default_period_days: int = 30
    analytics_max_period_days: int = 365

    # Reconciliation of reviews whose aggregate update was deferred
    reconcile_batch_size: int = 100

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS origins from string or list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @field_validator("review_public_threshold")
    @classmethod
    def validate_threshold(cls, v):
        if not 1 <= v <= 5:
            raise ValueError("review_public_threshold must be between 1 and 5")
        return v

    @field_validator("public_base_url")
    @classmethod
    def strip_trailing_slash(cls, v):
        return v.rstrip("/")

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment.lower() == "development"


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Returns:
        Settings instance with environment variables loaded
    """
    return Settings()


settings = get_settings()


def validate_production_config(config: Settings = None) -> List[str]:
    """Return the list of problems that make a config unsafe for production."""
    config = config or settings
    issues = []

    if not config.is_production:
        return issues

    if config.debug:
        issues.append("DEBUG is enabled in production")

    if config.database_url.startswith("sqlite"):
        issues.append("SQLite database configured in production")

    return issues
