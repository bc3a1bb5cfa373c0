"""Tests for the structured log formatter."""

import json
import logging

from src.utils.logging import StructuredFormatter, log


class _Capture(logging.Handler):
    def __init__(self):
        super().__init__()
        self.records = []

    def emit(self, record):
        self.records.append(record)


def _emit(**fields) -> logging.LogRecord:
    logger = logging.getLogger("pitchcraft.test")
    logger.setLevel(logging.DEBUG)
    handler = _Capture()
    logger.addHandler(handler)
    try:
        log.warning(logger, "llm.invoker", "attempt_failed", "Attempt failed", **fields)
    finally:
        logger.removeHandler(handler)
    return handler.records[0]


def test_json_format_carries_context():
    record = _emit(attempt=1, outcome="server_error", status_code=None)
    data = json.loads(StructuredFormatter().format(record))
    assert data["level"] == "WARNING"
    assert data["module"] == "llm.invoker"
    assert data["action"] == "attempt_failed"
    assert data["attempt"] == 1
    assert "status_code" not in data


def test_pretty_format():
    record = _emit(attempt=2)
    line = StructuredFormatter(pretty=True).format(record)
    assert "attempt_failed: Attempt failed" in line
    assert "attempt=2" in line


def test_plain_records_are_wrapped():
    record = logging.LogRecord("httpx", logging.INFO, __file__, 1, "plain message", None, None)
    data = json.loads(StructuredFormatter().format(record))
    assert data["module"] == "legacy"
    assert data["msg"] == "plain message"
