"""DingTalk robot alert channel.

Sends alert messages as DingTalk text messages via the robot webhook
``https://oapi.dingtalk.com/robot/send``, authenticated by an access token
carried as a query parameter.

Delivery is a single best-effort POST: no retry, no batching. Failures are
raised to the direct caller of send(); handlers built by handler() report
them through diagnostics instead.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any
from urllib.parse import urlencode

import httpx
import structlog
from pydantic import ValidationError

from dingtalk_alert.config import ConfigStore, DingtalkConfig, HandlerConfig
from dingtalk_alert.errors import (
    DingtalkConfigError,
    DingtalkProtocolError,
    DingtalkRemoteError,
    DingtalkTransportError,
    DingtalkTypeMismatchError,
)
from dingtalk_alert.handler import DingtalkHandler
from dingtalk_alert.models import (
    TEST_MESSAGE,
    OutboundMessage,
    SelfTestPayload,
    WebhookResponse,
)
from dingtalk_alert.plugin_metadata import HealthState, HealthStatus, PluginMetadata
from dingtalk_alert.telemetry.sanitization import sanitize_error_message
from dingtalk_alert.telemetry import tracing
from dingtalk_alert.telemetry.tracing import alert_span

if TYPE_CHECKING:
    from opentelemetry.trace import Tracer
    from pydantic import BaseModel

    from dingtalk_alert.diagnostics import Diagnostic

logger = structlog.get_logger(__name__)

DINGTALK_SEND_URL = "https://oapi.dingtalk.com/robot/send"
DINGTALK_CONTENT_TYPE = "application/json;charset=utf-8"


def build_send_url(access_token: str) -> str:
    """Return the robot send URL carrying the access token.

    Example:
        >>> build_send_url("abc")
        'https://oapi.dingtalk.com/robot/send?access_token=abc'
    """
    return f"{DINGTALK_SEND_URL}?{urlencode({'access_token': access_token})}"


class DingtalkService(PluginMetadata):
    """DingTalk robot alert channel.

    Holds a hot-swappable configuration and delivers messages to the robot
    webhook. Safe to call from many pipeline threads at once.

    Configuration:
        config: Initial DingtalkConfig (enabled defaults to True)
        diag: Diagnostic used by handlers to report delivery failures
        timeout_seconds: HTTP request timeout (default 10)
    """

    def __init__(
        self,
        config: DingtalkConfig,
        diag: Diagnostic,
        *,
        timeout_seconds: float = 10.0,
        transport: httpx.BaseTransport | None = None,
        tracer: Tracer | None = None,
    ) -> None:
        """Initialize the DingTalk channel.

        Args:
            config: Initial configuration.
            diag: Diagnostics collaborator for handler failures.
            timeout_seconds: HTTP request timeout in seconds (default 10).
            transport: Optional httpx transport (e.g. httpx.MockTransport).
            tracer: Tracer for delivery spans (default: the package tracer).
        """
        self._store = ConfigStore(config)
        self._diag = diag
        self._timeout_seconds = timeout_seconds
        self._transport = transport
        self._tracer = tracer if tracer is not None else tracing.tracer
        self._log = logger.bind(component="dingtalk_alert")

    @property
    def name(self) -> str:
        """Return plugin name."""
        return "dingtalk"

    @property
    def version(self) -> str:
        """Return plugin version (semver)."""
        return "1.0.0"

    @property
    def api_version(self) -> str:
        """Return pipeline API version this plugin implements."""
        return "1.0"

    @property
    def description(self) -> str:
        """Return plugin description."""
        return "DingTalk robot webhook alert channel"

    def get_config_schema(self) -> type[BaseModel]:
        """Return the configuration model."""
        return DingtalkConfig

    def config(self) -> DingtalkConfig:
        """Return the current configuration snapshot."""
        return self._store.current()

    def update(self, new_config: Sequence[Any]) -> None:
        """Apply a reconfiguration batch.

        Args:
            new_config: Batch holding exactly one configuration object.

        Raises:
            DingtalkUpdateError: If the batch is malformed.
        """
        self._store.update(new_config)

    def validate_config(self) -> list[str]:
        """Validate the active configuration.

        Returns:
            List of validation error messages. Empty list means valid.
        """
        try:
            ConfigStore.validate(self._store.current())
        except DingtalkConfigError as e:
            return [str(e)]
        return []

    def health_check(self) -> HealthStatus:
        """Report configuration health without contacting DingTalk.

        Returns:
            UNHEALTHY when misconfigured, DEGRADED when disabled, else HEALTHY.
        """
        errors = self.validate_config()
        if errors:
            return HealthStatus(state=HealthState.UNHEALTHY, message=errors[0])
        if not self._store.current().enabled:
            return HealthStatus(state=HealthState.DEGRADED, message="dingtalk is disabled")
        return HealthStatus(state=HealthState.HEALTHY)

    def send(self, message: str, *, access_token: str | None = None) -> None:
        """Send a text message to the DingTalk robot.

        Args:
            message: Message content.
            access_token: Token overriding the configured one when non-empty.

        Raises:
            DingtalkTransportError: If the request or response failed in transit.
            DingtalkProtocolError: If a non-200 body is not a decodable error document.
            DingtalkRemoteError: If DingTalk returned an error document.
        """
        config = self._store.current()
        token = access_token or config.access_token.get_secret_value()
        body = OutboundMessage.text_message(message).model_dump_json().encode("utf-8")

        with alert_span(self._tracer, "send", channel=self.name) as delivery:
            try:
                with httpx.Client(
                    timeout=self._timeout_seconds,
                    transport=self._transport,
                ) as client, client.stream(
                    "POST",
                    build_send_url(token),
                    content=body,
                    headers={"Content-Type": DINGTALK_CONTENT_TYPE},
                ) as response:
                    delivery.record_response(response.status_code)
                    content = self._read_body(response)
            except httpx.RequestError as e:
                self._log.warning(
                    "dingtalk_transport_error",
                    error=sanitize_error_message(str(e)),
                    error_type=type(e).__name__,
                )
                raise DingtalkTransportError("failed to POST alert data", original_error=e) from e

            if response.status_code != httpx.codes.OK:
                raise _classify_failure(response.status_code, content)

    def _read_body(self, response: httpx.Response) -> str | None:
        """Read the response body once; None when it cannot be decoded."""
        try:
            response.read()
        except httpx.DecodingError as e:
            self._log.warning(
                "dingtalk_undecodable_response",
                status_code=response.status_code,
                error=sanitize_error_message(str(e)),
            )
            return None
        content = response.text
        self._log.debug(
            "dingtalk_response",
            status_code=response.status_code,
            body=sanitize_error_message(content),
        )
        return content

    def test_options(self) -> SelfTestPayload:
        """Return default options for a self-test send."""
        return SelfTestPayload(
            message=TEST_MESSAGE,
            access_token=self._store.current().access_token.get_secret_value(),
        )

    def run_test(self, options: Any) -> None:
        """Send a self-test message through the regular send path.

        Args:
            options: SelfTestPayload, usually obtained from test_options(). The
                message is sent with the token configured at call time.

        Raises:
            DingtalkTypeMismatchError: If options is not a SelfTestPayload.
            DingtalkSendError: If delivery fails.
        """
        if not isinstance(options, SelfTestPayload):
            raise DingtalkTypeMismatchError(type(options).__name__)
        self.send(options.message)

    def handler(self, config: HandlerConfig | None = None, **context: Any) -> DingtalkHandler:
        """Build an alert handler bound to per-alert diagnostic context.

        Args:
            config: Optional per-handler options.
            **context: Key/value pairs attached to every diagnostic.

        Returns:
            Handler delivering events through this service.
        """
        return DingtalkHandler(
            self,
            config if config is not None else HandlerConfig(),
            self._diag.with_context(**context),
        )


def _classify_failure(
    status_code: int, content: str | None
) -> DingtalkProtocolError | DingtalkRemoteError:
    """Turn a non-200 response into the matching send error."""
    if content is None:
        return DingtalkProtocolError(status_code, "", details="undecodable response body")
    try:
        res = WebhookResponse.model_validate_json(content)
    except ValidationError as e:
        return DingtalkProtocolError(
            status_code, content, details=f"{e.error_count()} parse error(s)"
        )
    return DingtalkRemoteError(res.errcode, res.errmsg)


__all__ = [
    "DINGTALK_CONTENT_TYPE",
    "DINGTALK_SEND_URL",
    "DingtalkService",
    "build_send_url",
]
