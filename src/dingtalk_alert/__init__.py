"""dingtalk-alert: DingTalk robot webhook alert channel.

This package delivers alert messages to the DingTalk robot webhook as one
pluggable handler of an alerting pipeline.

Example:
    >>> from dingtalk_alert import DingtalkConfig, DingtalkService, StructlogDiagnostic
    >>> service = DingtalkService(DingtalkConfig(access_token="..."), StructlogDiagnostic())
    >>> handler = service.handler(topic="main:cpu")
    >>> handler.handle(event)
"""

from __future__ import annotations

from typing import Any

__version__ = "1.0.0"
__all__ = [
    # Service and config
    "DingtalkService",
    "DingtalkConfig",
    "HandlerConfig",
    "ConfigStore",
    "load_config",
    # Pipeline interfaces
    "AlertEvent",
    "AlertHandler",
    "Diagnostic",
    "StructlogDiagnostic",
    # Exceptions
    "DingtalkError",
    "DingtalkConfigError",
    "DingtalkUpdateError",
    "DingtalkSendError",
    "DingtalkTransportError",
    "DingtalkProtocolError",
    "DingtalkRemoteError",
    "DingtalkTypeMismatchError",
]

_LAZY_MODULES: dict[str, str] = {
    "DingtalkService": "dingtalk_alert.service",
    "DingtalkConfig": "dingtalk_alert.config",
    "HandlerConfig": "dingtalk_alert.config",
    "ConfigStore": "dingtalk_alert.config",
    "load_config": "dingtalk_alert.config",
    "AlertEvent": "dingtalk_alert.events",
    "AlertHandler": "dingtalk_alert.handler",
    "Diagnostic": "dingtalk_alert.diagnostics",
    "StructlogDiagnostic": "dingtalk_alert.diagnostics",
}


# Lazy imports to keep `import dingtalk_alert` cheap for the handler registry
def __getattr__(name: str) -> Any:
    """Lazy import of package components."""
    if name in _LAZY_MODULES:
        from importlib import import_module

        return getattr(import_module(_LAZY_MODULES[name]), name)
    if name.startswith("Dingtalk") and name.endswith("Error"):
        from dingtalk_alert import errors

        return getattr(errors, name)
    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
