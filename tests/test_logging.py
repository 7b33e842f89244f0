"""Tests for structured logging setup."""

from __future__ import annotations

import json
import logging

import structlog

from trading_signals.logging import get_logger, setup_logging


class TestSetupLogging:
    def test_json_format(self, capsys):
        setup_logging(level="INFO", log_format="json")
        logger = get_logger("test_json")
        logger.info("signal created", instrument="EURUSD")

        captured = capsys.readouterr()
        line = json.loads(captured.err.strip())
        assert line["event"] == "signal created"
        assert line["instrument"] == "EURUSD"
        assert line["level"] == "info"
        assert line["service"] == "trading-signals"
        assert "timestamp" in line

    def test_console_format(self, capsys):
        setup_logging(level="INFO", log_format="console")
        logger = get_logger("test_console")
        logger.info("hello console", side="SELL_LIMIT")

        captured = capsys.readouterr()
        assert "hello console" in captured.err
        assert "SELL_LIMIT" in captured.err

    def test_log_level_filtering(self, capsys):
        setup_logging(level="WARNING", log_format="json")
        logger = get_logger("test_level")
        logger.info("should be hidden")
        logger.warning("should appear")

        captured = capsys.readouterr()
        assert "should be hidden" not in captured.err
        assert "should appear" in captured.err

    def test_get_logger_with_context(self, capsys):
        setup_logging(level="INFO", log_format="json")
        logger = get_logger("test_ctx", signal_id=7, side="BUY")
        logger.info("context test")

        captured = capsys.readouterr()
        line = json.loads(captured.err.strip())
        assert line["signal_id"] == 7
        assert line["side"] == "BUY"

    def test_contextvars_binding(self, capsys):
        setup_logging(level="INFO", log_format="json")
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(whop_user_id="user_abc")

        logger = get_logger("test_ctxvars")
        logger.info("with context var")

        captured = capsys.readouterr()
        line = json.loads(captured.err.strip())
        assert line["whop_user_id"] == "user_abc"

        structlog.contextvars.clear_contextvars()

    def test_stdlib_records_rendered(self, capsys):
        setup_logging(level="INFO", log_format="json")
        logging.getLogger("uvicorn.error").warning("plain stdlib")

        captured = capsys.readouterr()
        line = json.loads(captured.err.strip())
        assert line["event"] == "plain stdlib"
        assert line["level"] == "warning"

    def test_noisy_loggers_quieted(self):
        setup_logging(level="DEBUG", log_format="json")
        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger("uvicorn.access").level == logging.WARNING
