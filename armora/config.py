"""Booking engine settings.

Each concern gets its own BaseSettings group, read from the environment or
a local .env file, and the groups hang off one root Settings instance.
"""

from __future__ import annotations

from decimal import Decimal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class BookingSettings(BaseSettings):
    """Business constants for quotes, timing and the recent-destinations list."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="BOOKING_", extra="ignore")

    minimum_billable_hours: int = Field(default=2, description="Hours always charged in full")
    member_discount_rate: Decimal = Field(
        default=Decimal("0.5"),
        description="Fraction of the base fee waived for reward-holding members",
    )
    recent_destinations_limit: int = Field(default=5, description="Max entries in the recent destinations list")
    scheduled_min_lead_minutes: int = Field(
        default=0,
        description="Minimum advance notice for scheduled commencement (0 = any future time)",
    )
    default_origin_label: str = Field(
        default="Current location",
        description="Commencement point used until the requester enters one",
    )
    currency: str = Field(default="GBP")

    @field_validator("member_discount_rate")
    @classmethod
    def validate_discount_rate(cls, v: Decimal) -> Decimal:
        """Discount must be a fraction between 0 and 1."""
        if not Decimal("0") <= v <= Decimal("1"):
            msg = f"Invalid discount rate: {v}. Must be between 0 and 1"
            raise ValueError(msg)
        return v


class PaymentSettings(BaseSettings):
    """Payment gateway connection settings."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    payment_api_url: str = Field(default="http://localhost:8787/v1/charges", description="Gateway charge endpoint")
    payment_api_key: str = Field(default="", description="Gateway API key (empty = bypass mode)")
    payment_timeout: float = Field(default=15.0, description="Gateway request timeout in seconds")


class StorageSettings(BaseSettings):
    """Redis settings for draft snapshots and assignment history."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    redis_url: str = Field(default="redis://localhost:6379/0", description="Redis connection string")
    snapshot_key_prefix: str = Field(default="armora:draft:")
    snapshot_ttl: int = Field(default=86400, description="Draft snapshot TTL in seconds")
    history_key: str = Field(default="armora:assignments")
    history_max_length: int = Field(default=50, description="Confirmed assignments kept per history list")


class Settings(BaseSettings):
    """Root settings with the booking, payment and storage groups.

    Usage:
        settings = Settings()
        settings.booking.minimum_billable_hours
        settings.payment.payment_api_key
        settings.storage.redis_url
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Environment
    environment: str = Field(default="development")
    log_level: str = Field(default="DEBUG")

    # Groups read the same .env
    booking: BookingSettings = Field(default_factory=BookingSettings)
    payment: PaymentSettings = Field(default_factory=PaymentSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Accept standard level names in any case."""
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid:
            msg = f"Invalid log level: {v}. Must be one of {valid}"
            raise ValueError(msg)
        return upper

    @property
    def is_production(self) -> bool:
        """True when deployed with ENVIRONMENT=production."""
        return self.environment == "production"


# Module-level singleton
settings = Settings()
