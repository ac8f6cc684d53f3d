"""
Test suite for logging configuration and structured log helpers.

System role: Verification of observability utilities
"""

import logging
from unittest.mock import patch

import pytest

from docchat.configs import Settings
from docchat.observability import (
    CorrelationIdFilter,
    clear_correlation_id,
    configure_logging,
    get_correlation_id,
    log_exception_with_context,
    log_with_context,
    safe_log_value,
    set_correlation_id,
)


@pytest.fixture
def restore_root_logger():
    """Restore root logger handlers and level after configure_logging."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


class TestCorrelationId:
    """Test suite for correlation id helpers."""

    def test_set_correlation_id_should_generate_when_missing(self) -> None:
        """Test a fresh id is generated and readable."""
        # Act
        value = set_correlation_id()

        # Assert
        assert len(value) == 32
        assert get_correlation_id() == value
        clear_correlation_id()
        assert get_correlation_id() == ""

    def test_filter_should_attach_correlation_id(self) -> None:
        """Test records carry the current id, or '-' when unset."""
        # Arrange
        record = logging.LogRecord("test", logging.INFO, __file__, 1, "msg", None, None)
        log_filter = CorrelationIdFilter()

        # Act & Assert
        set_correlation_id("turn-42")
        assert log_filter.filter(record) is True
        assert record.correlation_id == "turn-42"
        clear_correlation_id()
        log_filter.filter(record)
        assert record.correlation_id == "-"


class TestConfigureLogging:
    """Test suite for configure_logging()."""

    def test_configure_logging_should_install_single_handler(self, restore_root_logger) -> None:
        """Test repeated configuration does not duplicate handlers."""
        # Act
        configure_logging("debug")
        configure_logging("warning")

        # Assert
        assert len(restore_root_logger.handlers) == 1
        assert restore_root_logger.level == logging.WARNING
        assert any(
            isinstance(f, CorrelationIdFilter) for f in restore_root_logger.handlers[0].filters
        )
        assert logging.getLogger("botocore").level == logging.WARNING

    def test_configure_logging_should_default_to_configured_level(
        self, restore_root_logger
    ) -> None:
        """Test the root level comes from settings when none is passed."""
        # Arrange
        with patch(
            "docchat.observability.logger.get_settings",
            return_value=Settings(log_level="error"),
        ):
            # Act
            configure_logging()

        # Assert
        assert restore_root_logger.level == logging.ERROR


class TestSafeLogValue:
    """Test suite for safe_log_value()."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (None, "None"),
            (b"abc", "bytes(3 bytes)"),
            ([1, 2], "list(2 items)"),
            ({"a": 1}, "dict(1 keys)"),
            (7, "7"),
        ],
    )
    def test_safe_log_value_should_summarize_values(self, value, expected: str) -> None:
        """Test containers and payloads are summarized, not dumped."""
        assert safe_log_value(value) == expected

    def test_safe_log_value_should_truncate_long_strings(self) -> None:
        """Test long strings are cut with a marker."""
        # Act
        result = safe_log_value("x" * 20, max_length=5)

        # Assert
        assert result == "xxxxx... (truncated, 20 total)"


class TestStructuredLogging:
    """Test suite for log_with_context() and log_exception_with_context()."""

    def test_log_with_context_should_attach_extras(self, caplog) -> None:
        """Test context values are attached to the record as strings."""
        # Arrange
        logger = logging.getLogger("docchat.test")

        # Act
        with caplog.at_level(logging.INFO, logger="docchat.test"):
            log_with_context(logger, logging.INFO, "stored", session_id="s-1", parts=[1, 2])

        # Assert
        record = caplog.records[-1]
        assert record.session_id == "s-1"
        assert record.parts == "list(2 items)"

    def test_log_exception_with_context_should_record_error(self, caplog) -> None:
        """Test exceptions are logged with type and message."""
        # Arrange
        logger = logging.getLogger("docchat.test")

        # Act
        with caplog.at_level(logging.ERROR, logger="docchat.test"):
            log_exception_with_context(
                logger, "failed", ValueError("bad part"), session_id="s-1"
            )

        # Assert
        record = caplog.records[-1]
        assert record.error_type == "ValueError"
        assert record.error_msg == "bad part"
        assert record.exc_info is not None
