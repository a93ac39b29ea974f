"""Tests for logging setup."""

from __future__ import annotations

import json
import logging
import sys
from typing import TYPE_CHECKING

import pytest

from promdash._internal.logging import _JsonFormatter, get_logger, setup_logging

if TYPE_CHECKING:
    from collections.abc import Iterator


@pytest.fixture
def fresh_logger() -> Iterator[logging.Logger]:
    """Strip handlers from the ``promdash`` logger before and after a test."""
    logger = logging.getLogger("promdash")
    saved = (list(logger.handlers), logger.level, logger.propagate)
    logger.handlers.clear()
    yield logger
    logger.handlers[:] = saved[0]
    logger.setLevel(saved[1])
    logger.propagate = saved[2]


def _record(message: str, *, exc_info: object = None) -> logging.LogRecord:
    return logging.LogRecord(
        name="promdash.storage.snapshots",
        level=logging.WARNING,
        pathname=__file__,
        lineno=1,
        msg=message,
        args=(),
        exc_info=exc_info,  # type: ignore[arg-type]
    )


class TestJsonFormatter:
    def test_single_line_json(self):
        line = _JsonFormatter().format(_record("Evicting snapshot metrics_1"))
        assert "\n" not in line
        entry = json.loads(line)
        assert entry["level"] == "WARNING"
        assert entry["logger"] == "promdash.storage.snapshots"
        assert entry["message"] == "Evicting snapshot metrics_1"
        assert entry["timestamp"].endswith("+00:00")
        assert "exception" not in entry

    def test_exception_included(self):
        try:
            msg = "disk full"
            raise OSError(msg)
        except OSError:
            record = _record("write failed", exc_info=sys.exc_info())
        entry = json.loads(_JsonFormatter().format(record))
        assert "OSError: disk full" in entry["exception"]


class TestSetupLogging:
    def test_installs_one_stderr_handler(self, fresh_logger: logging.Logger):
        logger = setup_logging(logging.DEBUG)
        assert logger is fresh_logger
        assert len(logger.handlers) == 1
        assert logger.level == logging.DEBUG
        assert logger.propagate is False
        assert not isinstance(logger.handlers[0].formatter, _JsonFormatter)

    def test_json_format(self, fresh_logger: logging.Logger):
        setup_logging(json_format=True)
        assert isinstance(fresh_logger.handlers[0].formatter, _JsonFormatter)

    def test_repeated_calls_only_update_level(self, fresh_logger: logging.Logger):
        setup_logging(logging.INFO)
        setup_logging(logging.WARNING, json_format=True)
        assert len(fresh_logger.handlers) == 1
        assert fresh_logger.level == logging.WARNING
        assert fresh_logger.handlers[0].level == logging.WARNING
        assert not isinstance(fresh_logger.handlers[0].formatter, _JsonFormatter)


def test_get_logger_namespace():
    assert get_logger("server.handler").name == "promdash.server.handler"
