"""
Unit tests for the logging configuration.

This module tests:
- LogConfig defaults and serialization
- The SplitLogger singleton and its handlers
- User-facing, debug and performance messages
- JSON output
"""

import json
import logging
import sys
from pathlib import Path

import pytest

import css_split.logging_config as logging_module
from css_split.logging_config import (
    JsonFormatter,
    LogConfig,
    LogLevel,
    SplitLogger,
    configure_logging,
    get_logger,
    performance_log,
    user_error,
    user_info,
    user_success,
)


def reset_singleton():
    """Drop the singleton and every handler it installed."""
    if SplitLogger._instance is not None:
        SplitLogger._instance.configure(console_output=False, file_output=False)
    SplitLogger._instance = None
    SplitLogger._initialized = False
    logging_module._logger = SplitLogger()


class TestLogConfig:
    """Test LogConfig dataclass functionality."""

    def test_default_config(self):
        """Test default logging configuration values."""
        config = LogConfig()
        assert config.level == LogLevel.NORMAL
        assert config.console_output is True
        assert config.file_output is False
        assert config.log_file is None
        assert config.collect_performance is False

    def test_config_serialization(self):
        """Test converting the logging configuration to a dict."""
        config = LogConfig(level=LogLevel.DEBUG, log_file=Path("split.log"))
        config_dict = config.to_dict()

        assert config_dict['level'] == 'debug'
        assert config_dict['log_file'] == 'split.log'
        assert config_dict['format_json'] is False


class TestSplitLogger:
    """Test the SplitLogger singleton."""

    def setup_method(self):
        reset_singleton()

    def teardown_method(self):
        reset_singleton()

    def test_singleton_behavior(self):
        """Test that the logging manager is a singleton."""
        assert SplitLogger() is SplitLogger()

    def test_default_initialization(self):
        """Test that the manager starts with the default configuration."""
        logger = SplitLogger()
        assert logger.config.level == LogLevel.NORMAL
        assert logger.session_id

    def test_configure_with_config_object(self):
        """Test configuring with a LoggingConfig object."""
        logger = SplitLogger()
        logger.configure(LogConfig(level=LogLevel.DEBUG, console_output=False))
        assert logger.config.level == LogLevel.DEBUG
        assert logger.config.console_output is False
        assert logging.getLogger("css_split").level == logging.DEBUG

    def test_configure_with_kwargs(self):
        """Test configuring with keyword arguments."""
        logger = SplitLogger()
        logger.configure(level='verbose', console_output=False, collect_performance=True)
        assert logger.config.level == LogLevel.VERBOSE
        assert logger.config.collect_performance is True

    def test_configure_rejects_unknown_option(self):
        """Test that unknown logging options are rejected."""
        with pytest.raises(ValueError):
            SplitLogger().configure(colour=True)

    def test_reconfigure_replaces_handlers(self):
        """Test that configuring again replaces the handlers."""
        logger = SplitLogger()
        package_logger = logging.getLogger("css_split")
        before = len(package_logger.handlers)

        logger.configure(console_output=True)
        logger.configure(console_output=True)
        assert len(package_logger.handlers) == before + 1

        logger.configure(console_output=False)
        assert len(package_logger.handlers) == before

    def test_does_not_touch_root_logger(self):
        """Test that the root logger is left alone."""
        root_handlers = list(logging.getLogger().handlers)
        SplitLogger().configure(console_output=True)
        assert logging.getLogger().handlers == root_handlers

    def test_file_output(self, tmp_path):
        """Test logging to a file."""
        log_file = tmp_path / "logs" / "split.log"
        logger = SplitLogger()
        logger.configure(level=LogLevel.NORMAL, console_output=False, file_output=True, log_file=log_file)

        get_logger("css_split.plugin").info("written to file")
        for handler in logging.getLogger("css_split").handlers:
            handler.flush()

        assert "written to file" in log_file.read_text(encoding="utf-8")

    def test_json_file_output(self, tmp_path):
        """Test JSON formatted file logging."""
        log_file = tmp_path / "split.jsonl"
        SplitLogger().configure(console_output=False, file_output=True, log_file=log_file, format_json=True)

        get_logger("css_split.plugin").info("json line")
        for handler in logging.getLogger("css_split").handlers:
            handler.flush()

        record = json.loads(log_file.read_text(encoding="utf-8").strip().splitlines()[-1])
        assert record['message'] == "json line"
        assert record['module'] == "css_split.plugin"

    def test_python_log_levels(self):
        """Test conversion to Python log levels."""
        logger = SplitLogger()
        assert logger._get_python_log_level(LogLevel.SILENT) == logging.CRITICAL
        assert logger._get_python_log_level(LogLevel.NORMAL) == logging.INFO
        assert logger._get_python_log_level(LogLevel.DEBUG) == logging.DEBUG

    def test_text_formatter_follows_level(self):
        """Test that the text format depends on the level."""
        logger = SplitLogger()
        logger.configure(level=LogLevel.MINIMAL, console_output=False)
        assert logger._create_text_formatter()._fmt == '%(message)s'

        logger.configure(level=LogLevel.DEBUG, console_output=False)
        assert '%(name)s' in logger._create_text_formatter()._fmt


class TestMessages:
    """Test the module-level helpers."""

    def setup_method(self):
        reset_singleton()

    def teardown_method(self):
        reset_singleton()

    def test_user_messages(self, caplog):
        """Test user facing message helpers."""
        configure_logging(level=LogLevel.NORMAL, console_output=False)
        with caplog.at_level(logging.INFO, logger="css_split"):
            user_info("checking")
            user_success("done")
            user_error("broken")

        messages = [record.getMessage() for record in caplog.records]
        assert "checking" in messages
        assert any(m.endswith("done") for m in messages)
        assert any(m.endswith("broken") for m in messages)
        assert all(getattr(record, 'user_message', False) for record in caplog.records)

    def test_silent_suppresses_info(self, caplog):
        """Test that silent mode hides info messages."""
        configure_logging(level="silent", console_output=False)
        with caplog.at_level(logging.DEBUG, logger="css_split"):
            user_info("hidden")
            user_error("shown")

        messages = [record.getMessage() for record in caplog.records]
        assert "hidden" not in messages
        assert any(m.endswith("shown") for m in messages)

    def test_performance_collection(self):
        """Test collecting performance records."""
        configure_logging(level=LogLevel.NORMAL, console_output=False, collect_performance=True)
        performance_log("css_split", 0.25, assets=3, split=1)

        entry = logging_module._logger.performance_logs[-1]
        assert entry['operation'] == "css_split"
        assert entry['duration_seconds'] == 0.25
        assert entry['assets'] == 3

    def test_performance_not_collected_by_default(self):
        """Test that performance records are off by default."""
        configure_logging(level=LogLevel.NORMAL, console_output=False)
        performance_log("css_split", 0.1)
        assert logging_module._logger.performance_logs == []

    def test_performance_logged_when_verbose(self, caplog):
        """Test that performance is logged in verbose mode."""
        configure_logging(level=LogLevel.VERBOSE, console_output=False)
        with caplog.at_level(logging.INFO, logger="css_split"):
            performance_log("css_split", 0.5)
        assert any("css_split: 0.500s" in record.getMessage() for record in caplog.records)


class TestJsonFormatter:
    """Test structured output."""

    def test_format(self):
        """Test the JSON log record format."""
        record = logging.LogRecord(
            "css_split.plugin", logging.INFO, "plugin.py", 10, "split %s", ("styles.css",), None
        )
        record.operation = "css_split_discover"
        data = json.loads(JsonFormatter().format(record))

        assert data['level'] == "INFO"
        assert data['message'] == "split styles.css"
        assert data['line_number'] == 10
        assert data['operation'] == "css_split_discover"
        assert 'args' not in data

    def test_exception(self):
        """Test that exceptions are included in JSON records."""
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = logging.LogRecord(
                "css_split", logging.ERROR, "x.py", 1, "failed", (), sys.exc_info()
            )
        data = json.loads(JsonFormatter().format(record))
        assert "RuntimeError: boom" in data['exception']
