"""Tests for structured logging module."""

import io
import json
import logging

import pytest

from synthtype.logging import (
    ROOT_LOGGER,
    LogContext,
    LogFormat,
    StructuredFormatter,
    SynthLogger,
    TextFormatter,
    configure_logging,
    get_logger,
    parse_level,
)


def make_record(context: LogContext | None = None) -> logging.LogRecord:
    record = logging.LogRecord("synthtype.test", logging.INFO, "", 0, "hello", (), None)
    if context is not None:
        record.context = context
    return record


class TestLogContext:
    """Tests for LogContext."""

    def test_default_context(self):
        ctx = LogContext()
        assert ctx.component == ""
        assert ctx.operation == ""
        assert ctx.extra == {}

    def test_with_extra(self):
        ctx = LogContext(component="test")
        new_ctx = ctx.with_extra(key="value", num=42)

        assert new_ctx.component == "test"
        assert new_ctx.extra["key"] == "value"
        assert new_ctx.extra["num"] == 42
        # Original unchanged
        assert ctx.extra == {}


class TestSynthLogger:
    """Tests for SynthLogger."""

    def test_create_logger(self):
        logger = SynthLogger("test_component")

        assert logger._context.component == "test_component"
        assert logger.name == "synthtype.test_component"

    def test_with_context(self):
        logger = SynthLogger("test")
        new_logger = logger.with_context(target="User", strategy="stub")

        assert new_logger._context.extra["target"] == "User"
        assert new_logger._context.extra["strategy"] == "stub"
        assert logger._context.extra == {}

    def test_with_operation(self):
        logger = SynthLogger("test")
        new_logger = logger.with_operation("synthesize")

        assert new_logger._context.operation == "synthesize"
        assert new_logger._context.component == "test"

    def test_logging_levels(self, caplog):
        with caplog.at_level(logging.DEBUG, logger=ROOT_LOGGER):
            logger = SynthLogger("test_levels")

            logger.debug("debug message")
            logger.info("info message")
            logger.warning("warning message")
            logger.error("error message")

        assert "debug message" in caplog.text
        assert "info message" in caplog.text
        assert "warning message" in caplog.text
        assert "error message" in caplog.text

    def test_disabled_level_is_skipped(self, caplog):
        with caplog.at_level(logging.WARNING, logger=ROOT_LOGGER):
            SynthLogger("test_quiet").debug("hidden")

        assert "hidden" not in caplog.text

    def test_extra_fields_attached(self, caplog):
        with caplog.at_level(logging.DEBUG, logger=ROOT_LOGGER):
            SynthLogger("test_extra").debug("built", target="User")

        record = caplog.records[-1]
        assert record.context.extra == {"target": "User"}
        assert record.context.component == "test_extra"

    def test_timed_context_manager(self, caplog):
        with caplog.at_level(logging.DEBUG, logger=ROOT_LOGGER):
            logger = SynthLogger("test_timed")

            with logger.timed("test_operation") as result:
                _sum = sum(range(100))

            assert "elapsed_ms" in result
            assert result["elapsed_ms"] >= 0

        assert "test_operation completed" in caplog.text


class TestFormatters:
    """Tests for TextFormatter and StructuredFormatter."""

    def test_text_formatter_prefixes_context(self):
        ctx = LogContext(component="stub", operation="build", extra={"target": "User"})

        line = TextFormatter("%(message)s").format(make_record(ctx))

        assert line == "[stub] (build) hello target=User"

    def test_text_formatter_without_context(self):
        assert TextFormatter("%(message)s").format(make_record()) == "hello"

    def test_structured_formatter(self):
        ctx = LogContext(component="mock", extra={"calls": 3})

        data = json.loads(StructuredFormatter().format(make_record(ctx)))

        assert data["message"] == "hello"
        assert data["level"] == "INFO"
        assert data["component"] == "mock"
        assert data["calls"] == "3"
        assert "operation" not in data


class TestGetLogger:
    """Tests for get_logger function."""

    def test_get_logger(self):
        logger = get_logger("my_component")
        assert logger._context.component == "my_component"

    def test_get_logger_cached(self):
        assert get_logger("cached_component") is get_logger("cached_component")


class TestParseLevel:
    """Tests for parse_level."""

    def test_names_and_ints(self):
        assert parse_level("debug") == logging.DEBUG
        assert parse_level("WARNING") == logging.WARNING
        assert parse_level(logging.ERROR) == logging.ERROR

    def test_unknown_level(self):
        with pytest.raises(ValueError, match="Unknown log level"):
            parse_level("chatty")


class TestConfigureLogging:
    """Tests for configure_logging function."""

    def test_configure_text_format(self):
        stream = io.StringIO()
        configure_logging(level=logging.DEBUG, log_format=LogFormat.TEXT, stream=stream)

        get_logger("configured").debug("visible", key="value")

        root = logging.getLogger(ROOT_LOGGER)
        assert root.level == logging.DEBUG
        assert "[configured] " in stream.getvalue()
        assert "visible key=value" in stream.getvalue()

    def test_configure_json_format(self):
        stream = io.StringIO()
        handler = configure_logging(level="INFO", log_format=LogFormat.JSON, stream=stream)

        get_logger("configured_json").info("as json")

        assert isinstance(handler.formatter, StructuredFormatter)
        assert json.loads(stream.getvalue())["message"] == "as json"

    def test_reconfigure_replaces_handler(self):
        configure_logging(stream=io.StringIO())
        configure_logging(stream=io.StringIO())

        assert len(logging.getLogger(ROOT_LOGGER).handlers) == 1
