"""Tests for logging setup."""

import logging

from class_db_to_dts.logging_config import LOG_LEVEL_ENV, LOGGER_NAME, get_logger, setup_logging


class TestLoggingConfig:
    """Test cases for setup_logging and get_logger"""

    def test_get_logger_is_parented(self):
        assert get_logger("class_db_to_dts.pipeline.generator").name == "class_db_to_dts.pipeline.generator"
        assert get_logger("plugin").name == "class_db_to_dts.plugin"

    def test_explicit_level(self):
        setup_logging("debug")
        logger = logging.getLogger(LOGGER_NAME)
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1

    def test_level_from_environment(self, monkeypatch):
        monkeypatch.setenv(LOG_LEVEL_ENV, "ERROR")
        setup_logging()
        assert logging.getLogger(LOGGER_NAME).level == logging.ERROR

    def test_unknown_level_falls_back_to_warning(self):
        setup_logging("chatty")
        assert logging.getLogger(LOGGER_NAME).level == logging.WARNING

    def test_repeated_setup_does_not_duplicate_handlers(self):
        setup_logging("INFO")
        setup_logging("INFO")
        assert len(logging.getLogger(LOGGER_NAME).handlers) == 1

    def test_log_file(self, tmp_path):
        log_file = tmp_path / "run.log"
        setup_logging("INFO", str(log_file))
        get_logger("test").info("hello")
        for handler in logging.getLogger(LOGGER_NAME).handlers:
            handler.flush()
        assert "hello" in log_file.read_text()
