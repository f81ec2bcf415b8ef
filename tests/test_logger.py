"""Tests for structured logging."""

import io
import json

from formguard.utils.logger import (
    JsonFormatter,
    Logger,
    LogLevel,
    LogRecord,
    MemoryHandler,
    StreamHandler,
    TextFormatter,
    configure_logging,
    get_logger,
)


class TestLogger:
    """Tests for Logger."""

    def test_level_filtering(self):
        handler = MemoryHandler()
        logger = Logger("t", level=LogLevel.INFO, handlers=[handler])

        logger.debug("hidden")
        logger.info("shown", field="email")

        assert [r.message for r in handler.records] == ["shown"]
        assert handler.records[0].context == {"field": "email"}

    def test_with_context(self):
        handler = MemoryHandler()
        logger = Logger("t", level=LogLevel.DEBUG, handlers=[handler]).with_context(form="signup")

        logger.warning("careful", field="email")

        assert handler.records[0].context == {"form": "signup", "field": "email"}

    def test_error_carries_exception(self):
        handler = MemoryHandler()
        logger = Logger("t", handlers=[handler])
        error = RuntimeError("boom")

        logger.error("failed", exception=error)

        assert handler.records[0].exception is error
        assert handler.records[0].to_dict()["exception"] == {"type": "RuntimeError", "message": "boom"}

    def test_level_parse(self):
        assert LogLevel.parse("debug") is LogLevel.DEBUG
        assert LogLevel.parse(40) is LogLevel.ERROR


class TestFormatters:
    """Tests for formatters and stream output."""

    def test_text_formatter(self):
        record = LogRecord(level=LogLevel.INFO, message="Validation pass", context={"fields": 2})

        output = TextFormatter(colors=False).format(record)

        assert "[INFO] Validation pass fields=2" in output

    def test_json_formatter(self):
        record = LogRecord(level=LogLevel.DEBUG, message="x", context={"invalid": ["email"]})

        data = json.loads(JsonFormatter().format(record))

        assert data["level"] == "DEBUG"
        assert data["context"] == {"invalid": ["email"]}

    def test_stream_handler(self):
        stream = io.StringIO()
        logger = Logger("t", handlers=[StreamHandler(stream, TextFormatter(colors=False))])

        logger.info("hello")

        assert "hello" in stream.getvalue()


class TestRegistry:
    """Tests for get_logger and configure_logging."""

    def test_get_logger_is_cached(self):
        assert get_logger("formguard.cached") is get_logger("formguard.cached")

    def test_configure_logging_updates_existing(self):
        existing = get_logger("formguard.configured")

        root = configure_logging("WARNING", format="json")

        assert root.level is LogLevel.WARNING
        assert existing.level is LogLevel.WARNING
        configure_logging(LogLevel.INFO)
