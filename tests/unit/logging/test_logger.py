# tests/unit/logging/test_logger.py — v2
"""Tests for logging/logger.py — formatters and logger setup."""

from __future__ import annotations

import json
import logging
import sys

from avidiag.logging.context import clear_context, set_model_context, set_request_context
from avidiag.logging.logger import JsonFormatter, TextFormatter, setup_logging


def _record(msg: str, level: int = logging.INFO, **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="test", level=level, pathname="", lineno=0,
        msg=msg, args=(), exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJsonFormatter:
    def setup_method(self):
        clear_context()

    def teardown_method(self):
        clear_context()

    def test_format_basic(self):
        parsed = json.loads(JsonFormatter().format(_record("Hello")))
        assert parsed["level"] == "INFO"
        assert parsed["message"] == "Hello"
        assert "timestamp" in parsed
        assert "context" not in parsed

    def test_format_with_context(self):
        set_request_context("req-1", "U1")
        set_model_context("gemini", "gemini-1.5-pro")
        parsed = json.loads(JsonFormatter().format(_record("attempt")))
        assert parsed["context"] == {
            "request_id": "req-1",
            "requester_id": "U1",
            "provider": "gemini",
            "model": "gemini-1.5-pro",
        }

    def test_extra_data(self):
        output = JsonFormatter().format(_record("hit", data={"cache_key": "::toux::"}))
        assert json.loads(output)["data"] == {"cache_key": "::toux::"}

    def test_non_ascii_kept(self):
        output = JsonFormatter().format(_record("diarrhée"))
        assert "diarrhée" in output

    def test_exception_included(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = _record("failed", level=logging.ERROR)
            record.exc_info = sys.exc_info()
        parsed = json.loads(JsonFormatter().format(record))
        assert "RuntimeError: boom" in parsed["exception"]


class TestTextFormatter:
    def teardown_method(self):
        clear_context()

    def test_format_basic(self):
        output = TextFormatter().format(_record("Hello text"))
        assert "Hello text" in output
        assert "INFO" in output

    def test_provider_and_model_shown(self):
        set_model_context("openai", "gpt-4o-mini")
        output = TextFormatter().format(_record("attempt"))
        assert "[openai]" in output
        assert "(gpt-4o-mini)" in output

    def test_request_id_shown(self):
        set_request_context("req-9", "U1")
        assert "<req-9>" in TextFormatter().format(_record("hit"))

    def test_exception_appended(self):
        try:
            raise OSError("disk full")
        except OSError:
            record = _record("persist failed", level=logging.ERROR)
            record.exc_info = sys.exc_info()
        output = TextFormatter().format(record)
        assert output.splitlines()[0].endswith("— persist failed")
        assert "OSError: disk full" in output


class TestSetupLogging:
    def teardown_method(self):
        root = logging.getLogger("avidiag")
        for handler in root.handlers:
            handler.close()
        root.handlers.clear()

    def test_setup_json(self):
        setup_logging(level="DEBUG", log_format="json")
        root = logging.getLogger("avidiag")
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JsonFormatter)

    def test_setup_text(self):
        setup_logging(level="INFO", log_format="text")
        root = logging.getLogger("avidiag")
        assert root.level == logging.INFO
        assert isinstance(root.handlers[0].formatter, TextFormatter)

    def test_reinit_does_not_duplicate(self):
        setup_logging()
        setup_logging()
        assert len(logging.getLogger("avidiag").handlers) == 1

    def test_with_file(self, tmp_path):
        setup_logging(log_file=str(tmp_path / "logs" / "avidiag.log"))
        root = logging.getLogger("avidiag")
        try:
            assert len(root.handlers) == 2
        finally:
            for handler in root.handlers:
                handler.close()
            root.handlers.clear()
