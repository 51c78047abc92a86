"""
Tests for core/logging module

Tests for the logging configuration including formatters, logger adapters,
context variables, credential redaction and request id generation.
"""

import pytest
import logging
import json
import re
from unittest.mock import MagicMock
from roastcast.core.logging import (
    StructuredFormatter,
    DevelopmentFormatter,
    LoggerAdapter,
    setup_logging,
    get_logger,
    set_request_id,
    set_stage,
    clear_context,
    generate_request_id,
    request_id_var,
    stage_var,
)


def make_record(msg="Test message", level=logging.INFO, exc_info=None):
    return logging.LogRecord(
        name="test.module",
        level=level,
        pathname="/path/to/file.py",
        lineno=42,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )


@pytest.fixture(autouse=True)
def reset_context():
    clear_context()
    yield
    clear_context()


class TestStructuredFormatter:
    """Test suite for StructuredFormatter"""

    def test_format_basic_log(self):
        """Test basic log record formatting to JSON"""
        formatter = StructuredFormatter()

        parsed = json.loads(formatter.format(make_record()))

        assert parsed["level"] == "INFO"
        assert parsed["message"] == "Test message"
        assert parsed["timestamp"].endswith("Z")
        assert parsed["logger"] == "test.module"
        assert "request_id" not in parsed

    def test_format_with_extra_fields(self):
        """Fields passed via extra= end up under 'extra'"""
        formatter = StructuredFormatter()
        record = make_record()
        record.job_id = "job-1"

        parsed = json.loads(formatter.format(record))

        assert parsed["extra"]["job_id"] == "job-1"

    def test_format_includes_context(self):
        """Request id and stage come from the context variables"""
        set_request_id("req-123")
        set_stage("storyline_pending")

        parsed = json.loads(StructuredFormatter().format(make_record()))

        assert parsed["request_id"] == "req-123"
        assert parsed["stage"] == "storyline_pending"

    def test_sensitive_extra_is_redacted(self):
        """Credentials in extras never reach the log output"""
        record = make_record()
        record.api_key = "xai-secret-value"
        record.headers = {"Authorization": "Bearer xai-secret-value", "Accept": "json"}

        result = StructuredFormatter().format(record)
        parsed = json.loads(result)

        assert "xai-secret-value" not in result
        assert parsed["extra"]["api_key"] == "***REDACTED***"
        assert parsed["extra"]["headers"]["Authorization"] == "***REDACTED***"
        assert parsed["extra"]["headers"]["Accept"] == "json"

    def test_format_with_exception(self):
        """Test log record with exception info"""
        formatter = StructuredFormatter()

        try:
            raise ValueError("Test exception")
        except ValueError:
            import sys
            exc_info = sys.exc_info()

        parsed = json.loads(formatter.format(make_record("Error occurred", logging.ERROR, exc_info)))

        assert parsed["level"] == "ERROR"
        assert parsed["exception"]["type"] == "ValueError"
        assert parsed["exception"]["message"] == "Test exception"


class TestDevelopmentFormatter:
    """Test suite for DevelopmentFormatter"""

    def test_format_basic_log(self):
        """Test basic log record formatting for development"""
        formatter = DevelopmentFormatter()

        result = formatter.format(make_record())

        assert "Test message" in result
        assert "INFO" in result

    def test_format_shows_context(self):
        set_request_id("req-1700000000000-abcdef")
        set_stage("media_pending")

        result = DevelopmentFormatter().format(make_record())

        assert "req:req-17000000" in result
        assert "stage:media_pending" in result

    def test_format_different_levels(self):
        """Test formatting for different log levels"""
        formatter = DevelopmentFormatter()

        for level_name, level in [
            ("DEBUG", logging.DEBUG),
            ("WARNING", logging.WARNING),
            ("ERROR", logging.ERROR),
        ]:
            result = formatter.format(make_record(f"{level_name} message", level))
            assert f"{level_name} message" in result


class TestLoggerAdapter:
    """Test suite for LoggerAdapter"""

    def test_process_adds_extra_context(self):
        """Test that process adds extra context to log messages"""
        adapter = LoggerAdapter(MagicMock(), extra={"service": "test_service"})

        msg, kwargs = adapter.process("Test message", {"extra": {}})

        assert msg == "Test message"
        assert kwargs["extra"].get("service") == "test_service"

    def test_process_preserves_existing_extra(self):
        """Test that existing extra fields are preserved"""
        adapter = LoggerAdapter(MagicMock(), extra={"service": "test_service"})

        msg, kwargs = adapter.process("Test message", {"extra": {"user": "alice"}})

        assert kwargs["extra"].get("service") == "test_service"
        assert kwargs["extra"].get("user") == "alice"

    def test_process_adds_request_id(self):
        set_request_id("req-9")
        adapter = LoggerAdapter(MagicMock(), extra={})

        _, kwargs = adapter.process("msg", {})

        assert kwargs["extra"]["request_id"] == "req-9"


class TestSetupLogging:
    """Test suite for setup_logging function"""

    def test_setup_logging_with_level(self):
        setup_logging(level="DEBUG")

        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, DevelopmentFormatter)

    def test_setup_logging_json_mode(self):
        setup_logging(use_json=True)

        root = logging.getLogger()
        assert isinstance(root.handlers[0].formatter, StructuredFormatter)

    def test_setup_logging_with_file(self, tmp_path):
        log_file = tmp_path / "logs" / "roastcast.log"
        setup_logging(log_file=log_file)

        root = logging.getLogger()
        assert len(root.handlers) == 2
        assert log_file.parent.exists()

    def test_noisy_loggers_quieted(self):
        setup_logging(level="DEBUG")
        assert logging.getLogger("httpx").level == logging.WARNING


class TestGetLogger:
    """Test suite for get_logger function"""

    def test_get_logger_with_extra(self):
        """Test getting a logger with extra context"""
        logger = get_logger("test.module", component="test_component", version="1.0")

        assert isinstance(logger, logging.LoggerAdapter)
        assert logger.extra.get("component") == "test_component"
        assert logger.extra.get("version") == "1.0"


class TestContextVariables:
    """Test suite for context variable functions"""

    def test_set_request_id(self):
        set_request_id("req-123")
        assert request_id_var.get() == "req-123"

    def test_set_stage(self):
        set_stage("classifying")
        assert stage_var.get() == "classifying"

    def test_clear_context(self):
        set_request_id("req-123")
        set_stage("completed")

        clear_context()

        assert request_id_var.get() is None
        assert stage_var.get() is None


class TestGenerateRequestId:

    def test_format(self):
        assert re.fullmatch(r"req-\d+-[0-9a-f]{6}", generate_request_id())

    def test_unique(self):
        assert len({generate_request_id() for _ in range(50)}) == 50
