"""OpenTelemetry spans for DingTalk deliveries.

Every webhook POST runs inside one ``alert.send`` span carrying the channel
name, the HTTP status of the response and the delivery outcome. The webhook
URL embeds the access token, so it is never recorded.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

from dingtalk_alert.telemetry.sanitization import sanitize_error_message

if TYPE_CHECKING:
    from collections.abc import Iterator

TRACER_NAME = "dingtalk_alert"

ATTR_CHANNEL = "alert.channel"
ATTR_DELIVERY_STATUS = "alert.delivery_status"
ATTR_HTTP_STATUS = "http.response.status_code"

# Proxy tracer: resolves against whatever provider is installed globally.
tracer = trace.get_tracer(TRACER_NAME)


@contextmanager
def alert_span(
    span_tracer: trace.Tracer,
    operation: str,
    *,
    channel: str,
) -> Iterator[DeliverySpan]:
    """Wrap one delivery attempt in an ``alert.<operation>`` span.

    The span ends OK/``success`` on normal exit. An exception marks it
    ERROR/``failed`` with its sanitized message and is re-raised.
    """
    with span_tracer.start_as_current_span(
        f"alert.{operation}",
        attributes={ATTR_CHANNEL: channel},
        record_exception=False,
        set_status_on_exception=False,
    ) as span:
        delivery = DeliverySpan(span)
        try:
            yield delivery
        except Exception as e:
            span.set_status(Status(StatusCode.ERROR, type(e).__name__))
            span.set_attributes(
                {
                    "exception.type": type(e).__name__,
                    "exception.message": sanitize_error_message(str(e)),
                    ATTR_DELIVERY_STATUS: "failed",
                }
            )
            raise
        span.set_status(Status(StatusCode.OK))
        span.set_attribute(ATTR_DELIVERY_STATUS, "success")


class DeliverySpan:
    """Handle on the active delivery span."""

    def __init__(self, span: trace.Span) -> None:
        self.span = span

    def record_response(self, status_code: int) -> None:
        """Record the HTTP status DingTalk answered with."""
        self.span.set_attribute(ATTR_HTTP_STATUS, status_code)


__all__ = [
    "ATTR_CHANNEL",
    "ATTR_DELIVERY_STATUS",
    "ATTR_HTTP_STATUS",
    "TRACER_NAME",
    "DeliverySpan",
    "alert_span",
    "tracer",
]
