# =============================================================================
# tests/test_logging_config.py - Logging Setup Tests
# =============================================================================
# Tests for configure_logging: file/console sinks, level mapping and
# repeated configuration.
# =============================================================================

import io
import logging

import pytest

from app.config import load_settings
from lib.logging_config import (
    LOG_FILE_NAME,
    TRACE,
    configure_logging,
    to_logging_level,
)


def _flush(root_logger):
    for handler in root_logger.handlers:
        handler.flush()


class TestLevels:
    """Tests for LOG_LEVEL tag mapping."""

    @pytest.mark.parametrize(
        "tag,level",
        [
            ("fatal", logging.CRITICAL),
            ("error", logging.ERROR),
            ("warn", logging.WARNING),
            ("info", logging.INFO),
            ("debug", logging.DEBUG),
            ("trace", TRACE),
        ],
    )
    def test_mapping(self, tag, level):
        assert to_logging_level(tag) == level

    def test_trace_name_registered(self):
        assert logging.getLevelName(TRACE) == "TRACE"

    def test_unknown_tag(self):
        with pytest.raises(ValueError):
            to_logging_level("loud")


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_creates_log_file(self, settings, restore_root_logger):
        root_logger = configure_logging(settings, console_stream=io.StringIO())

        logging.getLogger("tests.sample").info("hello file")
        _flush(root_logger)

        log_file = f"{settings.LOG_DIR}/{LOG_FILE_NAME}"
        with open(log_file, encoding="utf-8") as f:
            content = f.read()
        assert "tests.sample - INFO - hello file" in content

    def test_writes_to_console(self, settings, restore_root_logger):
        stream = io.StringIO()
        configure_logging(settings, console_stream=stream)

        logging.getLogger("tests.sample").warning("hello console")

        assert "hello console" in stream.getvalue()

    def test_level_applied(self, valid_environment, tmp_path, restore_root_logger):
        settings = load_settings(
            {**valid_environment, "LOG_LEVEL": "warn", "LOG_DIR": str(tmp_path)}
        )
        stream = io.StringIO()
        root_logger = configure_logging(settings, console_stream=stream)

        logging.getLogger("tests.sample").info("should be dropped")
        logging.getLogger("tests.sample").warning("should be kept")

        assert root_logger.level == logging.WARNING
        assert "should be dropped" not in stream.getvalue()
        assert "should be kept" in stream.getvalue()

    def test_production_console_matches_file_format(
        self, valid_environment, tmp_path, restore_root_logger
    ):
        settings = load_settings(
            {**valid_environment, "ENVIRONMENT": "production", "LOG_DIR": str(tmp_path)}
        )
        stream = io.StringIO()
        configure_logging(settings, console_stream=stream)

        logging.getLogger("tests.sample").info("structured")

        assert " - tests.sample - INFO - structured" in stream.getvalue()

    def test_reconfigure_does_not_duplicate(self, settings, restore_root_logger):
        configure_logging(settings, console_stream=io.StringIO())
        count = len(logging.getLogger().handlers)

        stream = io.StringIO()
        configure_logging(settings, console_stream=stream)
        logging.getLogger("tests.sample").warning("once")

        assert len(logging.getLogger().handlers) == count
        assert stream.getvalue().count("once") == 1
