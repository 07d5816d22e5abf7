"""Alert handler interface and the DingTalk handler adapter.

The pipeline invokes ``handle(event)`` once per alert event and expects no
return value. Delivery failures must never interrupt the pipeline, so the
DingTalk handler reports them through its diagnostics collaborator.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from dingtalk_alert.errors import DingtalkError

if TYPE_CHECKING:
    from dingtalk_alert.config import HandlerConfig
    from dingtalk_alert.diagnostics import Diagnostic
    from dingtalk_alert.events import AlertEvent
    from dingtalk_alert.service import DingtalkService


class AlertHandler(ABC):
    """Generic alert handler capability expected by the pipeline."""

    @abstractmethod
    def handle(self, event: AlertEvent) -> None:
        """Handle a single alert event.

        Args:
            event: The alert event to deliver.
        """
        ...


class DingtalkHandler(AlertHandler):
    """Delivers alert events to DingTalk.

    Built by DingtalkService.handler(); not usually constructed directly.
    """

    def __init__(
        self,
        service: DingtalkService,
        config: HandlerConfig,
        diag: Diagnostic,
    ) -> None:
        self._service = service
        self._config = config
        self._diag = diag

    @property
    def config(self) -> HandlerConfig:
        """Per-handler options."""
        return self._config

    def handle(self, event: AlertEvent) -> None:
        try:
            self._service.send(event.state.message, access_token=self._config.access_token)
        except DingtalkError as e:
            self._diag.error("failed to send event to Dingtalk", e)


__all__ = ["AlertHandler", "DingtalkHandler"]
