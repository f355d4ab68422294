"""Tests for relayer_api logging helpers."""

import io
import json
import logging

import pytest

from relayer_api.common.exceptions import CostValidationError, TypeMismatchError
from relayer_api.common.logging import (
    ConsoleFormatter,
    JSONFormatter,
    get_logger,
    log_exception,
    log_with_context,
    setup_logging,
    setup_logging_from_config,
)
from relayer_api.config import RelayerApiConfig
from relayer_api.schemas.tasks import GatewayTransactionTask, Task


def _record(msg="hello", level=logging.INFO, **extra):
    record = logging.LogRecord(
        name="relayer_api.test",
        level=level,
        pathname="test_logging.py",
        lineno=10,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:
    def test_basic_fields(self):
        entry = json.loads(JSONFormatter().format(_record()))

        assert entry["level"] == "INFO"
        assert entry["logger"] == "relayer_api.test"
        assert entry["msg"] == "hello"
        assert entry["ts"].endswith("Z")
        assert "file" not in entry

    def test_extra_fields(self):
        entry = json.loads(
            JSONFormatter().format(_record(discriminator="GATEWAY_TX", merged_keys=2))
        )

        assert entry["discriminator"] == "GATEWAY_TX"
        assert entry["merged_keys"] == 2

    def test_debug_has_location(self):
        entry = json.loads(JSONFormatter().format(_record(level=logging.DEBUG)))

        assert entry["file"] == "test_logging.py:10"


class TestConsoleFormatter:
    def test_discriminator_prefix(self):
        line = ConsoleFormatter().format(_record(discriminator="CALL"))

        assert line.endswith(" - INFO - relayer_api.test - [CALL] hello")

    def test_plain(self):
        line = ConsoleFormatter().format(_record())

        assert line.endswith(" - INFO - relayer_api.test - hello")


class TestSetupLogging:
    def test_json_output(self):
        stream = io.StringIO()
        logger = setup_logging(level="DEBUG", json_format=True, stream=stream)

        log_with_context(
            get_logger("relayer_api.schemas"), logging.INFO, "ready", event_id="e-1"
        )

        lines = [json.loads(line) for line in stream.getvalue().splitlines()]
        assert logger.level == logging.DEBUG
        assert lines[0]["msg"] == "Logging initialized: json=True"
        assert lines[-1]["msg"] == "ready"
        assert lines[-1]["event_id"] == "e-1"

    def test_reinit_replaces_handler(self):
        setup_logging(stream=io.StringIO())
        logger = setup_logging(stream=io.StringIO())

        assert len(logger.handlers) == 1

    def test_unknown_level(self):
        with pytest.raises(ValueError, match="unknown log level: loud"):
            setup_logging(level="loud")

    def test_from_config(self):
        stream = io.StringIO()
        config = RelayerApiConfig(log_level="WARNING", log_json=False)

        logger = setup_logging_from_config(config, stream=stream)
        get_logger("relayer_api.schemas").info("hidden")
        get_logger("relayer_api.schemas").warning("shown")

        assert logger.level == logging.WARNING
        assert isinstance(logger.handlers[0].formatter, ConsoleFormatter)
        assert stream.getvalue().strip().endswith("- WARNING - relayer_api.schemas - shown")
        assert "hidden" not in stream.getvalue()

    def test_merge_logs_at_debug(self):
        stream = io.StringIO()
        setup_logging(level=logging.DEBUG, json_format=True, stream=stream)

        Task().merge_variant(GatewayTransactionTask(execute_data=b"A"))

        entry = json.loads(stream.getvalue().splitlines()[-1])
        assert entry["msg"] == "Merged variant into union"
        assert entry["discriminator"] == "GATEWAY_TX"
        assert entry["merged_keys"] == 2


class TestLogException:
    def test_category_and_message(self, caplog):
        logger = get_logger("relayer_api.test")
        error = TypeMismatchError(expected="EXECUTE", actual="VERIFY")

        with caplog.at_level(logging.WARNING, logger="relayer_api"):
            log_exception(
                logger, error, "lookup failed", level=logging.WARNING,
                include_traceback=False,
            )

        record = caplog.records[-1]
        assert record.error_category == "type"
        assert record.error_message == (
            "discriminator mismatch: expected 'EXECUTE', got 'VERIFY'"
        )
        assert record.exc_info is None

    def test_long_message_truncated(self, caplog):
        logger = get_logger("relayer_api.test")

        with caplog.at_level(logging.ERROR, logger="relayer_api"):
            log_exception(logger, CostValidationError("x" * 600), "bad cost")

        record = caplog.records[-1]
        assert len(record.error_message) == 503
        assert record.error_message.endswith("...")
        assert record.exc_info is not None

    def test_plain_exception(self, caplog):
        logger = get_logger("relayer_api.test")

        with caplog.at_level(logging.ERROR, logger="relayer_api"):
            log_exception(logger, RuntimeError("boom"), "failed")

        record = caplog.records[-1]
        assert record.error_message == "boom"
        assert not hasattr(record, "error_category")
