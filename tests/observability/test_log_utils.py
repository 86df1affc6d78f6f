"""Tests for logging helpers and logger configuration."""

import io
import logging

import pytest

from reconciler.models import Operation
from reconciler.observability.log_utils import (
    log_exception_with_context,
    log_with_context,
    safe_log_value,
)
from reconciler.observability.logger import configure_logging


class TestSafeLogValue:
    """Tests for safe_log_value()."""

    def test_none(self) -> None:
        assert safe_log_value(None) == "None"

    def test_collections_are_summarized(self) -> None:
        assert safe_log_value(["a", "b"]) == "list(2 items)"
        assert safe_log_value({"cidr_block": "10.0.0.0/16"}) == "dict(1 keys)"

    def test_enum_uses_value(self) -> None:
        assert safe_log_value(Operation.REPLACE) == "replace"

    def test_long_strings_are_truncated(self) -> None:
        result = safe_log_value("x" * 20, max_length=5)

        assert result.startswith("xxxxx... (truncated")
        assert "20 total" in result

    def test_unprintable_value(self) -> None:
        class Broken:
            def __str__(self) -> str:
                raise RuntimeError("nope")

        assert safe_log_value(Broken()) == "<unable to log: RuntimeError>"


class TestLogWithContext:
    """Tests for the structured logging helpers."""

    def test_context_is_attached_to_record(self, caplog: pytest.LogCaptureFixture) -> None:
        logger = logging.getLogger("tests.log_utils")

        with caplog.at_level(logging.INFO, logger="tests.log_utils"):
            log_with_context(logger, logging.INFO, "starting", entry_id="A:create", operation=Operation.CREATE)

        record = caplog.records[-1]
        assert record.message == "starting"
        assert record.entry_id == "A:create"
        assert record.operation == "create"

    def test_reserved_keys_are_prefixed(self, caplog: pytest.LogCaptureFixture) -> None:
        """Context named like a LogRecord attribute must not break the call."""
        logger = logging.getLogger("tests.log_utils")

        with caplog.at_level(logging.INFO, logger="tests.log_utils"):
            log_with_context(logger, logging.INFO, "declared", name="techhealth-dev-vpc")

        record = caplog.records[-1]
        assert record.name == "tests.log_utils"
        assert record.ctx_name == "techhealth-dev-vpc"

    def test_exception_context(self, caplog: pytest.LogCaptureFixture) -> None:
        logger = logging.getLogger("tests.log_utils")
        error = ValueError("bad value")

        with caplog.at_level(logging.ERROR, logger="tests.log_utils"):
            log_exception_with_context(logger, "failed", error, attempts=3)

        record = caplog.records[-1]
        assert record.levelno == logging.ERROR
        assert record.error_type == "ValueError"
        assert record.error_msg == "bad value"
        assert record.attempts == "3"
        assert record.exc_info[1] is error


class TestConfigureLogging:
    """Tests for configure_logging()."""

    def test_sets_root_level_and_single_handler(self) -> None:
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        try:
            configure_logging("debug")
            configure_logging("WARNING")

            ours = [handler for handler in root.handlers if handler.get_name() == "reconciler"]
            assert root.level == logging.WARNING
            assert len(ours) == 1
            assert all(handler in root.handlers for handler in saved_handlers)
            assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
        finally:
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)

    def test_writes_formatted_records_to_stream(self) -> None:
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        stream = io.StringIO()
        try:
            configure_logging("INFO", stream=stream)

            logging.getLogger("reconciler.core.executor").info("applied 3 entries")

            assert " - reconciler.core.executor - INFO - applied 3 entries" in stream.getvalue()
        finally:
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)
