"""Application configuration via environment variables.

Provides type-safe settings loading using pydantic-settings.
Environment variables can be loaded from a .env file.
"""

from functools import lru_cache
from typing import List

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Environment Variables:
        DATABASE_URL: SQLAlchemy URL of the store holding ping records and mail
        DATABASE_POOL_SIZE: Connection pool size (ignored for SQLite)
        DATABASE_MAX_OVERFLOW: Extra connections above the pool size
        GUID_FILTER_LOOKUP_TABLE: Table holding correlation (ping) records
        GUID_FILTER_LOOKUP_FIELD: Column read when a ping record is found
        SAVE_PROCESS: Ordered stage names separated by '|'
        SMTP_HOST / SMTP_PORT: Bind address of the SMTP listener
        SMTP_DOMAIN: Hostname announced in the SMTP greeting
        SMTP_MAX_SIZE: Maximum accepted message size in bytes
        LOG_LEVEL: Logging level (default INFO)
        LOG_JSON: Emit JSON log lines (default True)
    """

    # Database
    DATABASE_URL: str = "sqlite:///./mailprobe.db"
    DATABASE_POOL_SIZE: int = 5
    DATABASE_MAX_OVERFLOW: int = 10

    # GUID filter
    GUID_FILTER_LOOKUP_TABLE: str = "pings"
    GUID_FILTER_LOOKUP_FIELD: str = "guid"

    # Pipeline
    SAVE_PROCESS: str = "HeadersParser|GuidFilter|MailStore"

    # Email (SMTP ingest)
    SMTP_HOST: str = "0.0.0.0"
    SMTP_PORT: int = 2525
    SMTP_DOMAIN: str = "mailprobe.example.com"
    SMTP_MAX_SIZE: int = 10_485_760  # 10 MB

    # Application
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True
    ENVIRONMENT: str = "development"

    @field_validator("LOG_LEVEL")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        return value.upper()

    @property
    def save_process_stages(self) -> List[str]:
        """Stage names from SAVE_PROCESS, in order, blanks removed."""
        return [name.strip() for name in self.SAVE_PROCESS.split("|") if name.strip()]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses lru_cache for singleton behavior.
    Call get_settings.cache_clear() to reload settings.
    """
    return Settings()
