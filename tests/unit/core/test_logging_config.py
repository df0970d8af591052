"""
Tests for logging infrastructure.
"""

import logging
import json

from zureform.core.logging_config import (
    setup_logging,
    get_logger,
    new_operation_id,
    operation_id,
    log_with_context,
    JSONFormatter,
    SensitiveDataFilter,
    _parse_size,
)


def _record(message: str) -> logging.LogRecord:
    return logging.LogRecord(
        name="test", level=logging.INFO, pathname="", lineno=0,
        msg=message, args=(), exc_info=None,
    )


class TestLoggingSetup:
    """Test suite for logging setup."""

    def test_setup_logging_defaults(self):
        """Test setting up logging with defaults."""
        setup_logging()

        root_logger = logging.getLogger()
        assert root_logger.level == logging.INFO
        assert len(root_logger.handlers) == 1

    def test_setup_logging_with_level(self):
        """Test setting up logging with custom level."""
        setup_logging(level="debug")

        assert logging.getLogger().level == logging.DEBUG

    def test_setup_logging_with_file(self, tmp_path):
        """Test setting up logging with file output."""
        log_file = tmp_path / "logs" / "zureform.log"
        setup_logging(log_file=str(log_file))

        get_logger(__name__).info("Test message")

        assert log_file.exists()
        assert "Test message" in log_file.read_text()

    def test_setup_logging_with_module_levels(self):
        """Test per-module log levels."""
        setup_logging(level="INFO", module_levels={"zureform.clients.rest": "DEBUG"})

        assert logging.getLogger("zureform.clients.rest").level == logging.DEBUG

    def test_get_logger(self):
        """Test getting a logger instance."""
        logger = get_logger("test.module")

        assert logger.name == "test.module"


class TestJSONFormatter:
    """Test suite for JSON formatter."""

    def setup_method(self):
        operation_id.set(None)

    def teardown_method(self):
        operation_id.set(None)

    def test_format_basic(self):
        """Test basic record formatting."""
        data = json.loads(JSONFormatter().format(_record("hello")))

        assert data["message"] == "hello"
        assert data["level"] == "INFO"
        assert "operation_id" not in data

    def test_format_with_operation_id(self):
        """Test operation id is included."""
        operation_id.set("op-123")

        data = json.loads(JSONFormatter().format(_record("hello")))

        assert data["operation_id"] == "op-123"

    def test_new_operation_id(self):
        """Test each new operation id is distinct and active."""
        first = new_operation_id()
        second = new_operation_id()

        assert first != second
        data = json.loads(JSONFormatter().format(_record("x")))
        assert data["operation_id"] == second

    def test_format_with_context(self):
        """Test structured context is included."""
        record = _record("hello")
        record.context = {"attributes": ["name"]}

        data = json.loads(JSONFormatter().format(record))

        assert data["context"] == {"attributes": ["name"]}


class TestSensitiveDataFilter:
    """Test suite for redaction."""

    def test_redacts_bearer_token(self):
        """Test bearer tokens are redacted."""
        record = _record("Authorization: Bearer eyJhbGciOi.abc")

        SensitiveDataFilter().filter(record)

        assert "eyJhbGciOi" not in record.msg
        assert "***REDACTED***" in record.msg

    def test_redacts_client_secret(self):
        """Test client secrets are redacted."""
        record = _record('config {"client_secret": "hunter2", "tenant": "t"}')

        SensitiveDataFilter().filter(record)

        assert "hunter2" not in record.msg
        assert '"tenant": "t"' in record.msg

    def test_redacts_account_key(self):
        """Test account keys in connection strings are redacted."""
        record = _record("AccountEndpoint=https://x;AccountKey=abc123==;")

        SensitiveDataFilter().filter(record)

        assert "abc123" not in record.msg

    def test_leaves_plain_messages(self):
        """Test ordinary messages pass unchanged."""
        record = _record("Creating cosmosdb_mongo_database appdb")

        assert SensitiveDataFilter().filter(record) is True
        assert record.msg == "Creating cosmosdb_mongo_database appdb"


class TestHelpers:
    """Test suite for helpers."""

    def test_parse_size(self):
        """Test size parsing."""
        assert _parse_size("10MB") == 10 * 1024 * 1024
        assert _parse_size("1GB") == 1024 ** 3
        assert _parse_size("512KB") == 512 * 1024
        assert _parse_size("100") == 100

    def test_log_with_context(self, caplog):
        """Test logging with context attaches it to the record."""
        logger = get_logger("test.context")
        with caplog.at_level(logging.INFO, logger="test.context"):
            log_with_context(logger, logging.INFO, "replacing", attributes=["name"])

        assert caplog.records[-1].context == {"attributes": ["name"]}
