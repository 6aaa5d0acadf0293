"""Tests for logging functionality."""

import logging
from pathlib import Path


from scm_collector.utils.logger import (
    LoggerSetup,
    ColoredFormatter,
    get_logger,
    log_exception,
)
from scm_collector.config import get_settings


class TestLogging:
    """Test logging functionality."""

    def test_logger_setup(self):
        LoggerSetup._loggers_configured = False
        LoggerSetup.setup_logging()

        assert LoggerSetup._loggers_configured is True
        assert LoggerSetup._file_handler is not None
        assert LoggerSetup._console_handler is not None

    def test_console_handler_level(self):
        LoggerSetup.reconfigure()

        expected = logging.DEBUG if get_settings().app.debug else logging.WARNING
        assert LoggerSetup._console_handler.level == expected

    def test_get_logger(self):
        logger1 = get_logger("test.module1")
        logger2 = get_logger("test.module2")
        logger3 = get_logger("test.module1")

        assert logger1.name == "test.module1"
        assert logger2.name == "test.module2"
        assert logger1 is logger3

    def test_get_logger_defaults_to_caller_module(self):
        logger = get_logger()

        assert logger.name == __name__

    def test_log_file_creation(self):
        log_file = Path(get_settings().logging.file)

        logger = get_logger("scm_collector.test.file")
        logger.warning("Test message for file creation")
        LoggerSetup._file_handler.flush()

        assert log_file.exists()
        assert "Test message for file creation" in log_file.read_text(encoding="utf-8")

    def test_logger_reconfiguration(self):
        LoggerSetup.setup_logging()
        first_handler = LoggerSetup._file_handler

        LoggerSetup.reconfigure()

        root_logger = logging.getLogger()
        assert LoggerSetup._loggers_configured is True
        assert first_handler not in root_logger.handlers
        assert LoggerSetup._file_handler in root_logger.handlers

    def test_third_party_loggers_quieted(self):
        LoggerSetup.setup_logging()

        assert logging.getLogger("urllib3").level == logging.WARNING
        assert logging.getLogger("requests").level == logging.WARNING

    def test_log_exception(self, caplog):
        logger = get_logger("test.exception")

        try:
            raise ValueError("Test exception")
        except ValueError:
            with caplog.at_level(logging.ERROR, logger="test.exception"):
                log_exception(logger, "Caught test exception")

        assert "Caught test exception" in caplog.text
        assert caplog.records[-1].exc_info is not None


class TestColoredFormatter:
    """Test the console formatter."""

    def _record(self, console_output):
        record = logging.LogRecord("test", logging.ERROR, __file__, 1, "boom", None, None)
        if console_output:
            record.console_output = True
        return record

    def test_colours_console_records(self):
        formatter = ColoredFormatter(fmt="%(message)s")

        formatted = formatter.format(self._record(console_output=True))

        assert formatted == f"{ColoredFormatter.COLORS['ERROR']}boom{ColoredFormatter.RESET}"

    def test_plain_for_other_records(self):
        formatter = ColoredFormatter(fmt="%(message)s")

        assert formatter.format(self._record(console_output=False)) == "boom"


def test_logger_integration():
    """Exceptions log on creation without raising."""
    from scm_collector.core.exceptions import ConfigurationError

    try:
        raise ConfigurationError("Test configuration error", "Additional details")
    except ConfigurationError as e:
        assert e.details == "Additional details"
