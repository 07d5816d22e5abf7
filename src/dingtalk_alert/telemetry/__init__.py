"""Telemetry helpers: structured logging, tracing and error sanitization."""

from __future__ import annotations

from dingtalk_alert.telemetry.logging import add_trace_context, configure_logging
from dingtalk_alert.telemetry.sanitization import sanitize_error_message
from dingtalk_alert.telemetry.tracing import alert_span, tracer

__all__ = [
    "add_trace_context",
    "alert_span",
    "configure_logging",
    "sanitize_error_message",
    "tracer",
]
