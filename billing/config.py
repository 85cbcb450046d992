"""Application configuration from environment variables."""

from decimal import Decimal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = Field(
        default="sqlite:///./billing.db",
        description="SQLAlchemy database URL",
    )
    database_echo: bool = Field(default=False, description="Log SQL statements to the server log")

    # Billing
    igv_rate: Decimal = Field(
        default=Decimal("0.18"),
        ge=0,
        description="IGV (value-added tax) rate applied to energy and pre-tax services",
    )
    transaction_max_retries: int = Field(
        default=3,
        ge=0,
        description="Retries of a generation run after a serialization conflict",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_file: str = Field(default="logs/server.log", description="Log file path")

    # API
    api_title: str = Field(default="Tenant Utility Billing API", description="API title")
    api_version: str = Field(default="0.1.0", description="API version")


def get_settings() -> Settings:
    """Build settings from the current environment."""
    return Settings()


__all__ = ["Settings", "get_settings"]
