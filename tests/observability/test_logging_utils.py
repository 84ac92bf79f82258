"""Tests for logging helpers and correlation IDs."""

import logging

from deckrag.observability.correlation import (
    CorrelationIdFilter,
    clear_correlation_id,
    get_correlation_id,
    set_correlation_id,
)
from deckrag.observability.log_utils import (
    log_exception_with_context,
    log_with_context,
    safe_log_value,
)


class TestSafeLogValue:
    def test_summarizes_vectors(self):
        assert safe_log_value([0.1] * 768) == "list(768 items)"

    def test_summarizes_metadata(self):
        assert safe_log_value({"documentId": "d", "text": "t"}) == "dict(2 keys)"

    def test_truncates_long_text(self):
        value = safe_log_value("x" * 300, max_length=10)

        assert value.startswith("xxxxxxxxxx... (truncated")
        assert value.endswith("300 total)")

    def test_none(self):
        assert safe_log_value(None) == "None"


class TestContextLogging:
    def test_log_with_context(self, caplog):
        logger = logging.getLogger("deckrag.tests.context")

        with caplog.at_level(logging.INFO, logger="deckrag.tests.context"):
            log_with_context(logger, logging.INFO, "searching", query="q" * 500, top_k=5)

        record = caplog.records[-1]
        assert record.getMessage() == "searching"
        assert record.top_k == "5"
        assert "truncated" in record.query

    def test_log_exception_with_context(self, caplog):
        logger = logging.getLogger("deckrag.tests.exception")

        with caplog.at_level(logging.ERROR, logger="deckrag.tests.exception"):
            log_exception_with_context(logger, "failed", ValueError("bad input"), document_id="doc-1")

        record = caplog.records[-1]
        assert record.error_type == "ValueError"
        assert record.error_msg == "bad input"
        assert record.document_id == "doc-1"


class TestCorrelationId:
    def test_generated_when_missing(self):
        value = set_correlation_id()
        try:
            assert value
            assert get_correlation_id() == value
        finally:
            clear_correlation_id()

        assert get_correlation_id() == ""

    def test_filter_injects_id(self):
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)

        set_correlation_id("req-42")
        try:
            CorrelationIdFilter().filter(record)
        finally:
            clear_correlation_id()

        assert record.correlation_id == "req-42"

    def test_filter_placeholder_outside_request(self):
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)

        CorrelationIdFilter().filter(record)

        assert record.correlation_id == "-"
