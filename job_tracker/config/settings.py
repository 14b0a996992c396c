"""Configuration settings for Job Tracker."""

from pathlib import Path
from typing import Annotated

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from job_tracker.query.engine import SortOption

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Every value has a default; override with ``JOB_TRACKER_*`` variables
    or a .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="JOB_TRACKER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Storage
    db_path: Path = Field(
        default=Path("./data/jobs.db"),
        description="Path to the SQLite database holding job records",
    )

    # Reminders
    notification_hour: Annotated[int, Field(ge=0, le=23)] = Field(
        default=9,
        description="Hour of day (local time) at which reminders fire",
    )
    notification_minute: Annotated[int, Field(ge=0, le=59)] = Field(
        default=0,
        description="Minute of the hour at which reminders fire",
    )
    interview_reminder_days_before: Annotated[int, Field(ge=0)] = Field(
        default=1,
        description="Days ahead of an interview to send the prep reminder",
    )

    # Listing
    default_sort_option: SortOption = Field(
        default=SortOption.DATE_NEWEST,
        description="Sort order applied when the controller starts",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Level for the job_tracker logger",
    )
    log_file: Path | None = Field(
        default=None,
        description="Optional file receiving a copy of all log output",
    )

    @field_validator("default_sort_option", mode="before")
    @classmethod
    def parse_sort_option(cls, v: str | SortOption) -> SortOption:
        """Accept sort options by value ("nameAZ") or by member name ("NAME_AZ")."""
        if isinstance(v, SortOption):
            return v
        if isinstance(v, str):
            raw = v.strip()
            for option in SortOption:
                if raw.lower() in (option.value.lower(), option.name.lower()):
                    return option
            raise ValueError(
                f"Invalid sort option: {v}. Must be one of "
                f"{[option.value for option in SortOption]}"
            )
        raise ValueError(f"Invalid sort option type: {type(v)}")

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Uppercase the level name and reject names logging does not know."""
        level = str(v).strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level {v!r}, expected one of {LOG_LEVELS}")
        return level


_settings: Settings | None = None


def get_settings() -> Settings:
    """Return the shared settings, loading them on first use."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Forget the shared settings so the next call reloads them."""
    global _settings
    _settings = None
