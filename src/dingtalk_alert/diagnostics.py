"""Diagnostics collaborator for reporting handler failures.

Alert handlers have no return channel to the pipeline, so delivery failures
are reported through a Diagnostic bound to per-alert context (topic, alert
id, handler name, ...). StructlogDiagnostic is the default implementation.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

import structlog

from dingtalk_alert.errors import (
    DingtalkProtocolError,
    DingtalkRemoteError,
    DingtalkTransportError,
)
from dingtalk_alert.telemetry.sanitization import sanitize_error_message


@runtime_checkable
class Diagnostic(Protocol):
    """Sink for handler diagnostics."""

    def with_context(self, **context: Any) -> Diagnostic:
        """Return a diagnostic bound to additional key/value context."""
        ...

    def error(self, msg: str, err: Exception) -> None:
        """Report a failure together with the error that caused it."""
        ...


class StructlogDiagnostic:
    """Diagnostic backed by a structlog bound logger.

    Example:
        >>> diag = StructlogDiagnostic().with_context(topic="main:cpu")
        >>> diag.error("failed to send event to Dingtalk", err)
    """

    def __init__(self, log: Any | None = None) -> None:
        self._log = log if log is not None else structlog.get_logger("dingtalk_alert").bind(
            service="dingtalk"
        )

    def with_context(self, **context: Any) -> StructlogDiagnostic:
        return StructlogDiagnostic(self._log.bind(**context))

    def error(self, msg: str, err: Exception) -> None:
        self._log.error(
            msg,
            error=sanitize_error_message(str(err)),
            error_type=type(err).__name__,
            **_error_fields(err),
        )


def _error_fields(err: Exception) -> dict[str, Any]:
    """Structured fields for the known DingTalk send failures."""
    if isinstance(err, DingtalkRemoteError):
        return {"errcode": err.error_code, "errmsg": err.error_message}
    if isinstance(err, DingtalkProtocolError):
        return {"status_code": err.status_code}
    if isinstance(err, DingtalkTransportError) and err.original_error is not None:
        return {"cause": type(err.original_error).__name__}
    return {}


__all__ = ["Diagnostic", "StructlogDiagnostic"]
