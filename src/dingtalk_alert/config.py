"""Configuration models and the hot-swappable configuration holder.

This module provides:
- DingtalkConfig: frozen Pydantic model for the channel configuration
- HandlerConfig: per-handler options supplied by the alert pipeline
- DingtalkSettings / load_config: environment-backed configuration loading
- ConfigStore: atomically swappable holder for the active configuration

The active configuration is an immutable snapshot behind a single reference.
Readers load the reference without locking; writers replace it wholesale.

Security:
    - access_token is a SecretStr and is never rendered by repr() or logs
    - redacted() provides a display-safe view for diagnostics
"""

from __future__ import annotations

import threading
from collections.abc import Mapping, Sequence
from typing import Annotated, Any

import structlog
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SecretStr,
    ValidationError,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

from dingtalk_alert.errors import DingtalkConfigError, DingtalkUpdateError

logger = structlog.get_logger(__name__)

REDACTED = "<REDACTED>"


class DingtalkConfig(BaseModel):
    """Configuration for the DingTalk alert channel.

    Construction never fails on an enabled config without a token; that
    invariant is checked by ConfigStore.validate() before activation.

    Attributes:
        enabled: Whether the channel is active. Defaults to True.
        access_token: DingTalk robot access token.

    Examples:
        >>> config = DingtalkConfig(access_token="abc123")
        >>> config.enabled
        True
        >>> config.redacted()
        {'enabled': True, 'access_token': '<REDACTED>'}
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        str_strip_whitespace=True,
    )

    enabled: Annotated[
        bool,
        Field(default=True, description="Whether the DingTalk channel is enabled"),
    ]
    access_token: Annotated[
        SecretStr,
        Field(default=SecretStr(""), description="DingTalk robot access token"),
    ]

    def redacted(self) -> dict[str, Any]:
        """Return a display-safe view of the configuration.

        Returns:
            Dict with the access token masked when set.
        """
        token = self.access_token.get_secret_value()
        return {
            "enabled": self.enabled,
            "access_token": REDACTED if token else "",
        }


class HandlerConfig(BaseModel):
    """Per-handler options supplied when the pipeline binds a handler.

    Attributes:
        access_token: Optional token overriding the service token for
            messages sent through this handler.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    access_token: str | None = Field(default=None, alias="access-token")


class DingtalkSettings(BaseSettings):
    """Environment-backed DingTalk settings.

    Environment Variables:
        DINGTALK_ENABLED: Whether the channel is enabled (default true)
        DINGTALK_ACCESS_TOKEN: DingTalk robot access token
    """

    model_config = SettingsConfigDict(
        env_prefix="DINGTALK_",
        env_file=".env",
        extra="ignore",
    )

    enabled: bool = Field(default=True, description="Whether the channel is enabled")
    access_token: SecretStr = Field(
        default=SecretStr(""),
        description="DingTalk robot access token (from DINGTALK_ACCESS_TOKEN)",
    )

    def to_config(self) -> DingtalkConfig:
        """Convert the settings into a DingtalkConfig snapshot."""
        return DingtalkConfig(enabled=self.enabled, access_token=self.access_token)


def load_config() -> DingtalkConfig:
    """Load a DingtalkConfig from the environment and ``.env``.

    Returns:
        DingtalkConfig built from DINGTALK_* variables.
    """
    return DingtalkSettings().to_config()


class ConfigStore:
    """Holds the active DingtalkConfig and swaps it atomically.

    Reads are a single attribute load of an immutable snapshot, so readers
    never block and never observe a mix of old and new fields. Writers are
    serialized by a lock that readers never touch.

    Example:
        >>> store = ConfigStore(DingtalkConfig(access_token="old"))
        >>> store.update([DingtalkConfig(access_token="new")])
        >>> store.current().access_token.get_secret_value()
        'new'
    """

    def __init__(self, config: DingtalkConfig | None = None) -> None:
        """Initialize the store with an initial configuration.

        Args:
            config: Initial configuration. Defaults to DingtalkConfig().
        """
        self._value: DingtalkConfig = config if config is not None else DingtalkConfig()
        self._write_lock = threading.Lock()
        self._log = logger.bind(component="dingtalk_config")

    def current(self) -> DingtalkConfig:
        """Return the most recently stored snapshot."""
        return self._value

    def store(self, config: DingtalkConfig) -> None:
        """Replace the active configuration.

        The caller is responsible for validating the configuration first.

        Args:
            config: The new configuration snapshot.
        """
        with self._write_lock:
            self._value = config

    @staticmethod
    def validate(config: DingtalkConfig) -> None:
        """Validate a candidate configuration.

        Args:
            config: Configuration to validate.

        Raises:
            DingtalkConfigError: If enabled without an access token.
        """
        if config.enabled and not config.access_token.get_secret_value():
            raise DingtalkConfigError("must specify token")

    def update(self, batch: Sequence[Any]) -> None:
        """Apply a reconfiguration batch from the configuration loader.

        The batch must contain exactly one element, either a DingtalkConfig
        or a mapping of the same shape.

        Args:
            batch: Candidate configuration objects.

        Raises:
            DingtalkUpdateError: If the batch size is not one or the element
                is not of the configuration shape.
        """
        if len(batch) != 1:
            raise DingtalkUpdateError(
                f"expected only one new config object, got {len(batch)}"
            )
        config = _coerce_config(batch[0])
        self.store(config)
        self._log.info("dingtalk_config_updated", **config.redacted())


def _coerce_config(candidate: Any) -> DingtalkConfig:
    """Convert an untyped update element into a DingtalkConfig.

    Args:
        candidate: Element of an update batch.

    Returns:
        The candidate as a DingtalkConfig.

    Raises:
        DingtalkUpdateError: If the candidate has the wrong shape.
    """
    if isinstance(candidate, DingtalkConfig):
        return candidate
    if isinstance(candidate, Mapping):
        try:
            return DingtalkConfig.model_validate(dict(candidate))
        except ValidationError as e:
            raise DingtalkUpdateError(
                "expected config object to be of type DingtalkConfig, got invalid mapping",
                details=f"{e.error_count()} validation error(s)",
            ) from e
    raise DingtalkUpdateError(
        f"expected config object to be of type DingtalkConfig, got {type(candidate).__name__}"
    )


__all__ = [
    "ConfigStore",
    "DingtalkConfig",
    "DingtalkSettings",
    "HandlerConfig",
    "load_config",
]
