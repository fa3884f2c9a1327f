"""Application configuration using pydantic-settings."""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App settings
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # Quote service
    QUOTE_CACHE_TTL_SECONDS: float = 300.0
    QUOTE_FETCH_TIMEOUT_SECONDS: float = 10.0
    QUOTE_DEFAULT_CURRENCY: str = "EUR"

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize LOG_LEVEL to an uppercase Python logging level."""
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"LOG_LEVEL must be one of {valid}, got {v!r}")
        return v.upper()

    @field_validator("QUOTE_CACHE_TTL_SECONDS", "QUOTE_FETCH_TIMEOUT_SECONDS")
    @classmethod
    def validate_positive_seconds(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"must be greater than zero, got {v!r}")
        return v

    @field_validator("QUOTE_DEFAULT_CURRENCY", mode="before")
    @classmethod
    def normalize_currency(cls, v: str) -> str:
        """Upper-case the ISO currency code used when the provider omits one."""
        if isinstance(v, str):
            v = v.strip().upper()
        return v


settings = Settings()
