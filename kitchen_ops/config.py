"""Configuration management for the kitchen operations service."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Storage Configuration
    storage_backend: Literal["redis", "memory"] = Field(
        default="redis", description="Where stock, orders and settings are kept"
    )
    redis_url: str = Field(default="redis://localhost:6379/0", description="Redis URL")

    # API Configuration
    api_port: int = Field(default=8000, description="API server port")
    api_host: str = Field(default="0.0.0.0", description="API server host")

    # Environment
    environment: Literal["development", "staging", "production"] = Field(
        default="development"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: Literal["json", "text"] = Field(default="json", description="Log format")

    # Inventory Settings
    default_low_stock_threshold: float = Field(
        default=10, description="Threshold given to ingredients created on the fly"
    )

    # Kitchen Settings (defaults until staff save their own)
    base_prep_minutes: int = Field(default=10, description="Minutes per pizza batch")
    batch_capacity: int = Field(default=3, description="Pizzas cooked simultaneously")
    rush_multiplier: float = Field(default=1.5, description="Manual rush mode multiplier")
    rush_hour_multiplier: float = Field(
        default=1.3, description="Multiplier for historically busy hours"
    )
    predictive_enabled: bool = Field(
        default=True, description="Use historical patterns in estimates"
    )
    delay_threshold_minutes: int = Field(
        default=15, description="Estimate growth that counts as a delay"
    )

    # Notification Settings
    manager_email: str = Field(default="manager@example.com", description="Report recipient")
    notifications_enabled: bool = Field(default=True)
    notification_hour: int = Field(default=22, ge=0, le=23)
    notification_minute: int = Field(default=0, ge=0, le=59)
    notification_log_retention_days: int = Field(
        default=30, description="Days of notification history to keep"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}")
        return v_upper


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
