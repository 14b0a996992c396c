"""Tests for Settings configuration class."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from job_tracker.config.settings import Settings, get_settings, reset_settings
from job_tracker.query.engine import SortOption

ENV_VARS = [
    "JOB_TRACKER_DB_PATH",
    "JOB_TRACKER_NOTIFICATION_HOUR",
    "JOB_TRACKER_NOTIFICATION_MINUTE",
    "JOB_TRACKER_INTERVIEW_REMINDER_DAYS_BEFORE",
    "JOB_TRACKER_DEFAULT_SORT_OPTION",
    "JOB_TRACKER_LOG_LEVEL",
    "JOB_TRACKER_LOG_FILE",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    reset_settings()
    yield
    reset_settings()


class TestSettingsDefaults:
    """Test that Settings loads sensible defaults."""

    def test_settings_loads_with_defaults(self):
        settings = Settings(_env_file=None)

        assert settings.db_path == Path("./data/jobs.db")
        assert settings.notification_hour == 9
        assert settings.notification_minute == 0
        assert settings.interview_reminder_days_before == 1
        assert settings.default_sort_option == SortOption.DATE_NEWEST
        assert settings.log_level == "INFO"
        assert settings.log_file is None


class TestSettingsFromEnvironment:
    """Test that Settings reads from environment variables."""

    def test_reads_reminder_time(self, monkeypatch):
        monkeypatch.setenv("JOB_TRACKER_NOTIFICATION_HOUR", "18")
        monkeypatch.setenv("JOB_TRACKER_NOTIFICATION_MINUTE", "30")

        settings = Settings(_env_file=None)

        assert settings.notification_hour == 18
        assert settings.notification_minute == 30

    def test_reads_paths(self, monkeypatch):
        monkeypatch.setenv("JOB_TRACKER_DB_PATH", "/custom/jobs.db")
        monkeypatch.setenv("JOB_TRACKER_LOG_FILE", "/custom/tracker.log")

        settings = Settings(_env_file=None)

        assert settings.db_path == Path("/custom/jobs.db")
        assert settings.log_file == Path("/custom/tracker.log")

    @pytest.mark.parametrize("raw", ["nameZA", "NAME_ZA", "name_za", " namEza "])
    def test_sort_option_by_value_or_name(self, monkeypatch, raw):
        monkeypatch.setenv("JOB_TRACKER_DEFAULT_SORT_OPTION", raw)

        settings = Settings(_env_file=None)

        assert settings.default_sort_option == SortOption.NAME_ZA

    def test_log_level_is_uppercased(self, monkeypatch):
        monkeypatch.setenv("JOB_TRACKER_LOG_LEVEL", "debug")

        assert Settings(_env_file=None).log_level == "DEBUG"


class TestSettingsValidation:
    """Test that Settings validates values correctly."""

    @pytest.mark.parametrize(
        "var, value",
        [
            ("JOB_TRACKER_NOTIFICATION_HOUR", "24"),
            ("JOB_TRACKER_NOTIFICATION_MINUTE", "60"),
            ("JOB_TRACKER_INTERVIEW_REMINDER_DAYS_BEFORE", "-1"),
            ("JOB_TRACKER_DEFAULT_SORT_OPTION", "by_salary"),
            ("JOB_TRACKER_LOG_LEVEL", "chatty"),
        ],
    )
    def test_rejects_invalid_values(self, monkeypatch, var, value):
        monkeypatch.setenv(var, value)

        with pytest.raises(ValidationError):
            Settings(_env_file=None)


class TestSettingsSingleton:
    """Test the cached settings accessor."""

    def test_get_settings_is_cached_until_reset(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)

        first = get_settings()
        assert get_settings() is first

        reset_settings()
        assert get_settings() is not first
