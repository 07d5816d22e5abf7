"""Alert event models consumed from the alerting pipeline.

This module defines the interface between the pipeline and alert handlers:
- AlertLevel: severity level of an alert state
- EventState: the current state of an alert, including its rendered message
- AlertEvent: frozen Pydantic model handed to AlertHandler.handle()

Handlers receive only AlertEvent and must not depend on pipeline internals.
The DingTalk handler reads ``event.state.message`` and nothing else.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class AlertLevel(str, Enum):
    """Severity levels of an alert state.

    - OK: the alert has recovered
    - INFO: informational state change
    - WARNING: approaching a threshold
    - CRITICAL: threshold breached
    """

    OK = "OK"
    INFO = "INFO"
    WARNING = "WARNING"
    CRITICAL = "CRITICAL"


class EventState(BaseModel):
    """Current state of an alert.

    Attributes:
        id: Alert identifier, stable across state changes.
        message: Human-readable message rendered by the pipeline.
        details: Optional longer description (e.g. rendered HTML).
        time: When the state was entered.
        duration: How long the alert has been in a non-OK state.
        level: Severity level of the state.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str
    message: str
    details: str = ""
    time: datetime = Field(default_factory=lambda: datetime.now(tz=timezone.utc))
    duration: timedelta = timedelta(0)
    level: AlertLevel = AlertLevel.INFO


class AlertEvent(BaseModel):
    """Frozen Pydantic model representing one alert event.

    Attributes:
        topic: Name of the topic the alert was published to.
        state: Current alert state.

    Example:
        >>> event = AlertEvent(
        ...     topic="main:cpu",
        ...     state=EventState(id="cpu:host-1", message="cpu usage above 90%"),
        ... )
        >>> event.state.message
        'cpu usage above 90%'
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    topic: str = ""
    state: EventState


__all__ = ["AlertEvent", "AlertLevel", "EventState"]
