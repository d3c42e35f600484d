# litrato/core/config.py
"""
Application settings.

Values come from the environment (and a local ``.env`` file). Scheduling
constants are grouped in ``SchedulingSettings`` so every engine service
receives them explicitly instead of reading module globals.
"""

from decimal import Decimal
import logging
import os
from typing import Literal

from dotenv import load_dotenv
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..utils.time_utils import parse_time
from .constants import (
    DEFAULT_BUFFER_MINUTES,
    DEFAULT_BUSINESS_HOURS_END,
    DEFAULT_BUSINESS_HOURS_START,
    DEFAULT_DURATION_HOURS,
    DEFAULT_EXTENSION_CEILING_HOURS,
    DEFAULT_EXTENSION_HOURLY_RATE,
)

load_dotenv()

logger = logging.getLogger(__name__)


def is_running_tests() -> bool:
    """
    Detect if code is running under pytest.

    PYTEST_CURRENT_TEST is set automatically by pytest during test runs, and is
    not expected to be present in production environments.
    """
    return os.getenv("PYTEST_CURRENT_TEST") is not None


class SchedulingSettings(BaseSettings):
    """Business constants for conflict detection and availability."""

    buffer_minutes: int = Field(
        default=DEFAULT_BUFFER_MINUTES,
        ge=0,
        description="Setup/teardown buffer applied before and after every booking",
    )
    extension_ceiling_hours: int = Field(
        default=DEFAULT_EXTENSION_CEILING_HOURS,
        ge=0,
        description="Most extension hours a booking may still be granted; reserved pessimistically",
    )
    default_duration_hours: int = Field(
        default=DEFAULT_DURATION_HOURS,
        gt=0,
        description="Base event length when neither the booking nor its package defines one",
    )
    business_hours_start: str = Field(default=DEFAULT_BUSINESS_HOURS_START)
    business_hours_end: str = Field(default=DEFAULT_BUSINESS_HOURS_END)
    extension_hourly_rate: Decimal = Field(
        default=Decimal(DEFAULT_EXTENSION_HOURLY_RATE),
        ge=0,
        description="Price charged per extension hour",
    )
    enforce_buffer_on_accept: bool = Field(
        default=True,
        description="Re-check buffered conflicts inside the accept transaction",
    )

    model_config = SettingsConfigDict(
        env_prefix="SCHEDULING_",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    @field_validator("business_hours_start", "business_hours_end")
    @classmethod
    def _validate_clock_time(cls, v: str) -> str:
        if parse_time(v) is None:
            raise ValueError(f"Invalid business hour '{v}', expected HH:MM")
        return v

    @model_validator(mode="after")
    def _validate_business_window(self) -> "SchedulingSettings":
        if self.business_start_minutes > self.business_end_minutes:
            raise ValueError("business_hours_start must not be after business_hours_end")
        return self

    @property
    def business_start_minutes(self) -> int:
        return parse_time(self.business_hours_start)  # type: ignore[return-value]

    @property
    def business_end_minutes(self) -> int:
        return parse_time(self.business_hours_end)  # type: ignore[return-value]

    @property
    def buffer_hours(self) -> float:
        return self.buffer_minutes / 60


class Settings(BaseSettings):
    environment: Literal["development", "test", "production"] = Field(
        default="development", alias="ENVIRONMENT"
    )
    database_url: str = Field(
        default="sqlite:///./litrato.db",
        alias="DATABASE_URL",
        description="SQLAlchemy URL; PostgreSQL in production, SQLite for local runs",
    )
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    email_provider: Literal["console", "resend"] = Field(
        default="console", alias="EMAIL_PROVIDER"
    )
    resend_api_key: str = Field(default="", alias="RESEND_API_KEY")
    from_email: str = Field(default="Litrato <bookings@litrato.ph>", alias="FROM_EMAIL")

    is_testing: bool = Field(default_factory=is_running_tests)

    scheduling: SchedulingSettings = Field(default_factory=SchedulingSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


settings = Settings()
