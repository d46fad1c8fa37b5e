"""Application configuration using Pydantic Settings."""
from decimal import Decimal
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from solowork.core.time_entries import BillingConfig


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # MongoDB
    mongodb_url: str
    mongodb_db_name: str = "solowork"

    # JWT
    jwt_secret: str
    jwt_algorithm: str = "HS256"
    jwt_expiration_minutes: int = 10080  # 7 days

    # Single-user system: registration closes once the first account exists
    allow_registration: bool = False

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    debug: bool = False

    # CORS
    cors_origins: str = "http://localhost:3000,http://localhost:8000"

    # Logging
    log_level: str = "INFO"
    log_format: str = "standard"

    # Billing
    default_currency: str = "USD"
    default_hourly_rate: Optional[Decimal] = None

    # Appearance
    app_theme: str = "dark"
    app_font: str = "JetBrains Mono"

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_origins.split(",")]


settings = Settings()


def get_billing_config() -> BillingConfig:
    """Dependency that builds the billing configuration for a request."""
    return BillingConfig(
        default_hourly_rate=settings.default_hourly_rate,
        currency=settings.default_currency,
    )
