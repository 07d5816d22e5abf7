"""structlog setup for the DingTalk channel.

Log records written while a delivery span is active carry its trace_id and
span_id, so a ``dingtalk_transport_error`` line can be joined to the
``alert.send`` span that failed.
"""

from __future__ import annotations

import logging
from collections.abc import MutableMapping
from typing import Any

import structlog
from opentelemetry import trace

EventDict = MutableMapping[str, Any]

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def add_trace_context(_logger: Any, _method_name: str, event_dict: EventDict) -> EventDict:
    """structlog processor copying the current span's ids into the event."""
    ctx = trace.get_current_span().get_span_context()
    if ctx.is_valid:
        event_dict.setdefault("trace_id", trace.format_trace_id(ctx.trace_id))
        event_dict.setdefault("span_id", trace.format_span_id(ctx.span_id))
    return event_dict


def _processors(json_output: bool) -> list[Any]:
    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        add_trace_context,
        structlog.processors.format_exc_info,
        renderer,
    ]


def configure_logging(log_level: str = "INFO", json_output: bool = True) -> None:
    """Configure structlog for the channel and its CLI.

    Args:
        log_level: Minimum level, one of LOG_LEVELS (case-insensitive).
        json_output: Render JSON lines instead of console output.

    Raises:
        ValueError: If log_level is not one of LOG_LEVELS.
    """
    name = log_level.upper()
    if name not in LOG_LEVELS:
        raise ValueError(f"Unknown log level: {log_level}")

    structlog.configure(
        processors=_processors(json_output),
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, name)),
        cache_logger_on_first_use=False,
    )


__all__ = ["LOG_LEVELS", "add_trace_context", "configure_logging"]
