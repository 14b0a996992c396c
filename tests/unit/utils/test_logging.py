"""Tests for logging utility."""

import logging
from io import StringIO

import pytest

from job_tracker.utils.logging import (
    LOGGER_NAME,
    configure_logging,
    get_logger,
    reset_logging,
)


@pytest.fixture(autouse=True)
def fresh_logging():
    reset_logging()
    yield
    reset_logging()


class TestLoggerConfiguration:
    """Test that the package logger configures correctly."""

    def test_configure_logging_returns_package_logger(self):
        logger = configure_logging()

        assert isinstance(logger, logging.Logger)
        assert logger.name == LOGGER_NAME == "job_tracker"
        assert logger.level == logging.INFO
        assert logger.propagate is False

    def test_unknown_level_falls_back_to_info(self):
        assert configure_logging(level="LOUD").level == logging.INFO

    def test_reconfiguring_only_changes_level(self):
        """A second call must not stack another console handler."""
        logger = configure_logging(level="DEBUG")
        handlers = list(logger.handlers)

        logger = configure_logging(level="WARNING")

        assert logger.handlers == handlers
        assert logger.level == logging.WARNING
        assert all(h.level == logging.WARNING for h in logger.handlers)

    def test_log_file_receives_records(self, tmp_path):
        log_file = tmp_path / "logs" / "tracker.log"
        logger = configure_logging(level="INFO", log_file=log_file, stream=StringIO())

        get_logger("store").info("saved job")
        for handler in logger.handlers:
            handler.flush()

        assert "saved job" in log_file.read_text(encoding="utf-8")


class TestLogOutput:
    """Test that log output format is correct."""

    def test_message_includes_level_name_and_timestamp(self):
        buffer = StringIO()
        configure_logging(level="INFO", stream=buffer)

        get_logger("controller").info("Loaded 3 jobs")

        output = buffer.getvalue()
        assert "INFO" in output
        assert "job_tracker.controller" in output
        assert "Loaded 3 jobs" in output
        assert output[:4].isdigit()

    def test_records_below_level_are_dropped(self):
        buffer = StringIO()
        configure_logging(level="WARNING", stream=buffer)

        get_logger("controller").info("quiet")

        assert buffer.getvalue() == ""


class TestGetLogger:
    """Test the get_logger convenience function."""

    def test_short_name_becomes_child(self):
        assert get_logger("my_module").name == "job_tracker.my_module"

    def test_module_name_is_not_prefixed_twice(self):
        assert get_logger("job_tracker.records.store").name == "job_tracker.records.store"
        assert get_logger(LOGGER_NAME).name == LOGGER_NAME

    def test_child_inherits_level(self):
        configure_logging(level="DEBUG")

        assert get_logger("test_module").getEffectiveLevel() == logging.DEBUG
