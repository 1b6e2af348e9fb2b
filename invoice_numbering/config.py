"""Configuration settings for the invoice numbering service."""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    # Application
    app_name: str = Field(default="Invoice Numbering")
    debug: bool = Field(default=False)
    environment: str = Field(default="development")

    # Database
    database_url: str = Field(default="sqlite:///./invoice_numbering.db")

    # Security
    jwt_secret_key: str = Field(default="your-jwt-secret-key-here")
    jwt_algorithm: str = Field(default="HS256")
    access_token_expire_minutes: int = Field(default=30)

    # Logging
    log_level: str = Field(default="INFO")
    log_file: Optional[str] = Field(default="invoice_numbering.log")

    # Numbering
    template_max_length: int = Field(default=64)
    default_numbering_template: Optional[str] = Field(default=None)
    default_reset_period: str = Field(default="YEARLY")
    counter_lock_timeout_seconds: float = Field(default=10.0)

    # Feature flags
    counters_observability_enabled: bool = Field(default=True)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


# Create global settings instance
settings = Settings()
