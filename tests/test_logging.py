"""
Tests for logging helpers — configure_logging() and log_dump()
"""

import logging

import pytest

import dumpwalk.logging as dump_logging
from dumpwalk.logging import configure_logging, log_dump


@pytest.fixture
def clean_logger():
    """Restore the dumpwalk logger after a test configures it."""
    logger = logging.getLogger("dumpwalk")
    handlers, level = list(logger.handlers), logger.level
    yield logger
    logger.handlers[:] = handlers
    logger.setLevel(level)


class TestLogDump:

    def test_writes_dump_at_debug(self, caplog):
        logger = logging.getLogger("app.orders")
        caplog.set_level(logging.DEBUG, logger="app.orders")
        log_dump("order state", {"id": 7}, logger)
        assert caplog.records[0].levelno == logging.DEBUG
        assert caplog.records[0].getMessage() == "order state\nRoot array(1)\n    ['id'] => (integer) 7\n"

    def test_indent_forwarded(self, caplog):
        logger = logging.getLogger("app.indent")
        caplog.set_level(logging.DEBUG, logger="app.indent")
        log_dump("x", [1], logger, indent_string="  ")
        assert "\n  [0] => (integer) 1" in caplog.records[0].getMessage()

    def test_skips_rendering_when_debug_disabled(self, caplog, monkeypatch):
        def fail(*args, **kwargs):
            raise AssertionError("dump rendered while DEBUG disabled")

        monkeypatch.setattr(dump_logging, "dump_walk", fail)
        logger = logging.getLogger("app.quiet")
        caplog.set_level(logging.INFO, logger="app.quiet")
        log_dump("state", [1], logger)
        assert caplog.records == []


class TestConfigureLogging:

    def test_sets_level_and_handler(self, clean_logger):
        clean_logger.handlers[:] = []
        configure_logging(logging.DEBUG)
        assert clean_logger.level == logging.DEBUG
        assert len(clean_logger.handlers) == 1
        assert clean_logger.handlers[0].formatter._fmt == dump_logging.LOG_FORMAT

    def test_idempotent(self, clean_logger):
        clean_logger.handlers[:] = []
        configure_logging()
        configure_logging()
        assert len(clean_logger.handlers) == 1
