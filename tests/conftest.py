"""Pytest configuration for dingtalk-alert tests.

Provides shared fixtures: a recording diagnostic, a webhook transport
factory and service builders that never touch the real DingTalk endpoint.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any

import httpx
import pytest
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from opentelemetry.trace import Tracer

from dingtalk_alert.config import DingtalkConfig
from dingtalk_alert.service import DingtalkService
from dingtalk_alert.telemetry.tracing import TRACER_NAME

DEFAULT_ACCESS_TOKEN = "test-token-0123456789"  # noqa: S105


class RecordingDiagnostic:
    """Diagnostic double recording every reported error with its context."""

    def __init__(self, context: dict[str, Any] | None = None, sink: list[Any] | None = None) -> None:
        self.context: dict[str, Any] = dict(context or {})
        self.errors: list[tuple[str, Exception, dict[str, Any]]] = sink if sink is not None else []

    def with_context(self, **context: Any) -> RecordingDiagnostic:
        return RecordingDiagnostic({**self.context, **context}, self.errors)

    def error(self, msg: str, err: Exception) -> None:
        self.errors.append((msg, err, dict(self.context)))


class WebhookRecorder:
    """Mock DingTalk endpoint answering every request with a fixed response."""

    def __init__(self, status_code: int = 200, content: bytes | str = b'{"errcode":0,"errmsg":"ok"}') -> None:
        self.status_code = status_code
        self.content = content.encode("utf-8") if isinstance(content, str) else content
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, content=self.content)

    @property
    def last_json(self) -> dict[str, Any]:
        return json.loads(self.requests[-1].content)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def access_token() -> str:
    """Access token configured on services built by make_service."""
    return DEFAULT_ACCESS_TOKEN


@pytest.fixture
def webhook() -> type[WebhookRecorder]:
    """Factory for mock DingTalk endpoints: webhook(status_code, content)."""
    return WebhookRecorder


@pytest.fixture
def diag() -> RecordingDiagnostic:
    """Recording diagnostic."""
    return RecordingDiagnostic()


@pytest.fixture
def span_exporter() -> InMemorySpanExporter:
    """In-memory exporter collecting spans from sdk_tracer."""
    return InMemorySpanExporter()


@pytest.fixture
def sdk_tracer(span_exporter: InMemorySpanExporter) -> Tracer:
    """SDK tracer exporting synchronously to span_exporter."""
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(span_exporter))
    return provider.get_tracer(TRACER_NAME)


@pytest.fixture
def make_service(
    diag: RecordingDiagnostic,
) -> Callable[..., DingtalkService]:
    """Factory building a DingtalkService wired to a mock transport."""

    def _make(
        transport: httpx.BaseTransport,
        config: DingtalkConfig | None = None,
        tracer: Tracer | None = None,
    ) -> DingtalkService:
        return DingtalkService(
            config if config is not None else DingtalkConfig(access_token=DEFAULT_ACCESS_TOKEN),
            diag,
            transport=transport,
            tracer=tracer,
        )

    return _make


# Register custom markers
def pytest_configure(config: pytest.Config) -> None:
    """Register custom pytest markers."""
    config.addinivalue_line(
        "markers",
        "requirement(req_id): Mark test as covering a specific requirement",
    )
