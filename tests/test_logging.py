"""
LedgerGate - Logging Tests
============================
Tests for structured logging setup.
"""

import json
import logging
import sys
import time

import pytest

from ledger_gate.logging_setup import (
    ROOT_LOGGER_NAME,
    JSONFormatter,
    PerformanceLogger,
    get_logger,
    setup_logging,
)


@pytest.fixture
def reset_logging():
    yield
    setup_logging(log_to_file=False, enable_console=False)


class TestLogging:
    """Test setup and formatters"""

    def test_json_file_output(self, tmp_path, reset_logging):
        setup_logging(log_level="DEBUG", log_dir=tmp_path, enable_console=False)

        get_logger("codec").info("Transaction encoded", extra_data={"size": 12})
        for handler in logging.getLogger(ROOT_LOGGER_NAME).handlers:
            handler.flush()

        lines = (tmp_path / "ledgergate.log").read_text(encoding="utf-8").splitlines()
        record = json.loads(lines[-1])

        assert record["logger"] == "ledgergate.codec"
        assert record["message"] == "Transaction encoded"
        assert record["extra_data"] == {"size": 12}

    def test_errors_go_to_error_file(self, tmp_path, reset_logging):
        setup_logging(log_dir=tmp_path, enable_console=False)

        get_logger("utxo").info("not an error")
        get_logger("utxo").error("boom")
        for handler in logging.getLogger(ROOT_LOGGER_NAME).handlers:
            handler.flush()

        errors = (tmp_path / "ledgergate_errors.log").read_text(encoding="utf-8").splitlines()
        assert [json.loads(line)["message"] for line in errors] == ["boom"]

    def test_context_merged(self, caplog):
        logger = get_logger("test_context")
        logger.set_context(node="gate-1")

        with caplog.at_level(logging.INFO, logger="ledgergate.test_context"):
            logger.info("hello", extra_data={"a": 1})

        assert caplog.records[-1].extra_data == {"node": "gate-1", "a": 1}

    def test_json_formatter_exception(self):
        try:
            raise ValueError("bad")
        except ValueError:
            record = logging.LogRecord("x", logging.ERROR, __file__, 1, "msg", None, sys.exc_info())

        data = json.loads(JSONFormatter().format(record))

        assert data["exception"]["type"] == "ValueError"


class TestPerformanceLogger:
    """Test duration tracking"""

    def test_elapsed_recorded(self):
        with PerformanceLogger(get_logger("perf"), "op") as perf:
            pass

        assert perf.elapsed_ms is not None
        assert perf.elapsed_ms >= 0

    def test_slow_operation_warns(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="ledgergate.perf"):
            with PerformanceLogger(get_logger("perf"), "op", threshold_ms=1):
                time.sleep(0.01)

        assert caplog.records[-1].levelno == logging.WARNING
