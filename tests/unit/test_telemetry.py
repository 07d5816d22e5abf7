"""Unit tests for telemetry helpers: sanitization, tracing and logging.

Requirements: NFR-001 (no credentials in telemetry), NFR-002 (structured logging)
"""

from __future__ import annotations

import json

import pytest
import structlog
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from opentelemetry.trace import StatusCode, Tracer

from dingtalk_alert.telemetry.logging import add_trace_context, configure_logging
from dingtalk_alert.telemetry.sanitization import sanitize_error_message
from dingtalk_alert.telemetry.tracing import (
    ATTR_CHANNEL,
    ATTR_DELIVERY_STATUS,
    ATTR_HTTP_STATUS,
    alert_span,
)


class TestSanitizeErrorMessage:
    """Tests for sanitize_error_message."""

    @pytest.mark.requirement("NFR-001")
    def test_redacts_access_token_query(self) -> None:
        """Test the DingTalk token query parameter is redacted."""
        msg = "POST https://oapi.dingtalk.com/robot/send?access_token=abc123 failed"

        assert sanitize_error_message(msg) == (
            "POST https://oapi.dingtalk.com/robot/send?access_token=<REDACTED> failed"
        )

    @pytest.mark.requirement("NFR-001")
    def test_redacts_url_credentials(self) -> None:
        """Test user:pass@ credentials in URLs are redacted."""
        result = sanitize_error_message("cannot reach https://user:pw@proxy.local:3128")

        assert "pw" not in result
        assert "://<REDACTED>@proxy.local" in result

    @pytest.mark.requirement("NFR-001")
    def test_redacts_colon_form(self) -> None:
        """Test key: value patterns are redacted."""
        assert sanitize_error_message("token: abc") == "token: <REDACTED>"

    @pytest.mark.requirement("NFR-001")
    def test_truncates(self) -> None:
        """Test messages are truncated to max_length."""
        assert len(sanitize_error_message("x" * 1000)) == 500
        assert sanitize_error_message("abcdef", max_length=3) == "abc"

    @pytest.mark.requirement("NFR-001")
    def test_plain_message_unchanged(self) -> None:
        """Test messages without secrets pass through."""
        assert sanitize_error_message("Connection refused") == "Connection refused"


class TestAlertSpan:
    """Tests for alert_span context manager."""

    @pytest.mark.requirement("NFR-001")
    def test_success_span(self, sdk_tracer: Tracer, span_exporter: InMemorySpanExporter) -> None:
        """Test span name, channel and HTTP status attributes on success."""
        with alert_span(sdk_tracer, "send", channel="dingtalk") as delivery:
            delivery.record_response(200)

        spans = span_exporter.get_finished_spans()
        assert len(spans) == 1
        assert spans[0].name == "alert.send"
        attributes = dict(spans[0].attributes or {})
        assert attributes[ATTR_CHANNEL] == "dingtalk"
        assert attributes[ATTR_HTTP_STATUS] == 200
        assert attributes[ATTR_DELIVERY_STATUS] == "success"
        assert spans[0].status.status_code == StatusCode.OK

    @pytest.mark.requirement("NFR-001")
    def test_error_span_is_sanitized(
        self, sdk_tracer: Tracer, span_exporter: InMemorySpanExporter
    ) -> None:
        """Test exceptions mark the span failed with a sanitized message."""
        with pytest.raises(ValueError, match="access_token=secret"):
            with alert_span(sdk_tracer, "send", channel="dingtalk"):
                raise ValueError("bad url ?access_token=secret")

        span = span_exporter.get_finished_spans()[0]
        attributes = dict(span.attributes or {})
        assert span.status.status_code == StatusCode.ERROR
        assert attributes[ATTR_DELIVERY_STATUS] == "failed"
        assert attributes["exception.type"] == "ValueError"
        assert "secret" not in attributes["exception.message"]
        assert ATTR_HTTP_STATUS not in attributes


class TestLogging:
    """Tests for structlog configuration."""

    @pytest.fixture(autouse=True)
    def _restore_structlog(self):
        """Restore structlog defaults after each test."""
        yield
        structlog.reset_defaults()

    @pytest.mark.requirement("NFR-002")
    def test_add_trace_context_inside_span(self, sdk_tracer: Tracer) -> None:
        """Test trace_id and span_id are injected inside an active span."""
        with sdk_tracer.start_as_current_span("op") as span:
            event_dict = add_trace_context(None, "info", {"event": "x"})
            ctx = span.get_span_context()

        assert event_dict["trace_id"] == format(ctx.trace_id, "032x")
        assert event_dict["span_id"] == format(ctx.span_id, "016x")

    @pytest.mark.requirement("NFR-002")
    def test_add_trace_context_without_span(self) -> None:
        """Test no trace fields are added outside a span."""
        assert add_trace_context(None, "info", {"event": "x"}) == {"event": "x"}

    @pytest.mark.requirement("NFR-002")
    def test_configure_logging_json(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Test JSON output with level filtering."""
        configure_logging(log_level="WARNING", json_output=True)
        log = structlog.get_logger("dingtalk_alert.test")

        log.info("dropped")
        log.warning("dingtalk_transport_error", error_type="ConnectError")

        lines = [line for line in capsys.readouterr().out.splitlines() if line.strip()]
        assert len(lines) == 1
        record = json.loads(lines[0])
        assert record["event"] == "dingtalk_transport_error"
        assert record["level"] == "warning"
        assert record["error_type"] == "ConnectError"
        assert "timestamp" in record

    @pytest.mark.requirement("NFR-002")
    def test_configure_logging_rejects_unknown_level(self) -> None:
        """Test unknown level names are rejected."""
        with pytest.raises(ValueError, match="Unknown log level"):
            configure_logging(log_level="LOUD")
