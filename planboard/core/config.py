"""
Application configuration using Pydantic Settings.

Business calendar constants and engine guard limits are read once per process
from environment variables (or a local .env file).
"""

from functools import lru_cache
from typing import List, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # ===========================================
    # Environment
    # ===========================================
    ENVIRONMENT: Literal["local", "production"] = "local"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # ===========================================
    # Server
    # ===========================================
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    ALLOWED_ORIGINS: List[str] = Field(
        default=["http://localhost:3000", "http://localhost:5173"]
    )

    # ===========================================
    # Business calendar
    # ===========================================
    BUSINESS_START_HOUR: int = 9
    BUSINESS_END_HOUR: int = 18
    BREAK_START_HOUR: int = 12
    BREAK_END_HOUR: int = 13
    MAX_DAILY_HOURS: float = 8.0

    # Display range (two hours of padding around business hours)
    DISPLAY_START_HOUR: int = 7
    DISPLAY_END_HOUR: int = 20

    # ===========================================
    # Workload / leveling
    # ===========================================
    DEFAULT_DAILY_CAPACITY_HOURS: float = 8.0
    DEFAULT_DAILY_CAP_HOURS: float = 8.0
    LEVELING_LOOKBACK_DAYS: int = 7
    LEVELING_MAX_ADVANCE_DAYS: int = 60

    # Multiplier for the multi-day scheduler's iteration bound
    SCHEDULE_ITERATION_FACTOR: int = 4
    # Keep planned calendar start hours on days other than today
    RESPECT_PLANNED_TIMES: bool = True

    # ===========================================
    # Classification
    # ===========================================
    BUFFER_KEYWORDS: List[str] = Field(default=["buffer", "バッファ"])

    # ===========================================
    # Dates
    # ===========================================
    # False: unparsable dates become "now"; True: raise MalformedDateError
    STRICT_DATE_PARSING: bool = False


class BusinessHoursConfig(BaseModel):
    """Daily working window used by the placement scheduler."""

    model_config = ConfigDict(frozen=True)

    start_hour: float = 9
    end_hour: float = 18
    break_start: float = 12
    break_end: float = 13
    max_daily_hours: float = Field(8.0, gt=0, le=24)

    @model_validator(mode="after")
    def validate_window(self) -> "BusinessHoursConfig":
        if not (self.start_hour <= self.break_start <= self.break_end <= self.end_hour):
            raise ValueError(
                "business hours must satisfy start <= break_start <= break_end <= end"
            )
        return self

    @property
    def break_hours(self) -> float:
        return self.break_end - self.break_start


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Using lru_cache ensures settings are loaded only once.
    """
    return Settings()


@lru_cache()
def get_business_hours() -> BusinessHoursConfig:
    """Build the process-wide business calendar from settings."""
    settings = get_settings()
    return BusinessHoursConfig(
        start_hour=settings.BUSINESS_START_HOUR,
        end_hour=settings.BUSINESS_END_HOUR,
        break_start=settings.BREAK_START_HOUR,
        break_end=settings.BREAK_END_HOUR,
        max_daily_hours=settings.MAX_DAILY_HOURS,
    )
