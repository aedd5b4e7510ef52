from functools import lru_cache
from typing import Literal, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Global application settings."""

    # Application
    ENVIRONMENT: Literal["local", "development", "production"] = "local"
    LOG_LEVEL: str = "INFO"
    TIMEZONE: str = "Europe/Zagreb"

    # Database
    DATABASE_URL: str
    DB_POOL_SIZE: int = 20
    DB_MAX_OVERFLOW: int = 10
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 1800

    # Redis (arq worker)
    REDIS_URL: str = "redis://localhost:6379/0"

    # Auth
    JWT_SECRET: str = "test-jwt-secret"
    JWT_ALGORITHM: str = "HS256"

    # Time traveler: honour X-Mock-Date outside production
    MOCK_DATE_ENABLED: bool = False

    # Membership defaults used when an organization has no stored settings
    DEFAULT_RENEWAL_START_MONTH: int = 11
    DEFAULT_RENEWAL_START_DAY: int = 1
    DEFAULT_ACTIVITY_HOURS_THRESHOLD: int = 20
    SETTINGS_CACHE_TTL_SECONDS: int = 300

    # Hours of the day on which the status reconciliation cron fires
    STATUS_SYNC_HOURS: set[int] = {0, 12}

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    @field_validator("DATABASE_URL")
    @classmethod
    def assemble_db_connection(cls, v: Optional[str]) -> str:
        if isinstance(v, str):
            if v.startswith("postgresql://"):
                return v.replace("postgresql://", "postgresql+psycopg://", 1)
        return v

    @property
    def mock_date_allowed(self) -> bool:
        return self.MOCK_DATE_ENABLED and self.ENVIRONMENT != "production"


@lru_cache
def get_settings() -> Settings:
    """
    Return the global settings instance, cached.
    """
    return Settings()
