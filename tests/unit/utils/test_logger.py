"""
Tests for the logging collaborator.
"""

import io
import logging
import re

from ssr_runtime.utils.logger import CLEAR_SCREEN_SEQUENCE, SSRLogger


class TtyStream(io.StringIO):
    def isatty(self):
        return True


class TestSSRLogger:
    """Test SSRLogger formatting and metadata."""

    def test_error_with_timestamp_and_metadata(self, caplog):
        error = ValueError("boom")
        ssr_logger = SSRLogger(name="ssr_runtime.test", stream=io.StringIO())

        with caplog.at_level(logging.ERROR, logger="ssr_runtime.test"):
            ssr_logger.error("evaluation failed", timestamp=True, error=error)

        record = caplog.records[-1]
        assert re.match(r"^\d{2}:\d{2}:\d{2} \[ssr\] evaluation failed$", record.getMessage())
        assert record.ssr_error is error
        assert record.levelno == logging.ERROR

    def test_message_without_timestamp(self, caplog):
        ssr_logger = SSRLogger(name="ssr_runtime.test", stream=io.StringIO())

        with caplog.at_level(logging.INFO, logger="ssr_runtime.test"):
            ssr_logger.info("ready")
            ssr_logger.warn("careful")

        messages = [r.getMessage() for r in caplog.records]
        assert "ready" in messages
        assert "careful" in messages

    def test_clear_only_on_tty(self):
        tty = TtyStream()
        plain = io.StringIO()

        SSRLogger(name="ssr_runtime.test", stream=tty).error("x", clear=True)
        SSRLogger(name="ssr_runtime.test", stream=plain).error("x", clear=True)

        assert tty.getvalue() == CLEAR_SCREEN_SEQUENCE
        assert plain.getvalue() == ""

    def test_no_clear_by_default(self):
        tty = TtyStream()

        SSRLogger(name="ssr_runtime.test", stream=tty).error("x")

        assert tty.getvalue() == ""
