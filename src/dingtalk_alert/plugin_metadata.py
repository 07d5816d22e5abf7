"""Plugin metadata definitions shared with the alerting pipeline.

This module defines the base abstractions the pipeline's handler registry
expects from an alert channel:
- HealthState: Enum for plugin health states
- HealthStatus: Dataclass for health check results
- PluginMetadata: Abstract base class every channel plugin inherits from
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pydantic import BaseModel


class HealthState(Enum):
    """Health states for plugin health checks.

    - HEALTHY: Plugin is fully operational
    - DEGRADED: Plugin is loaded but not delivering (e.g. disabled)
    - UNHEALTHY: Plugin is misconfigured
    """

    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


@dataclass
class HealthStatus:
    """Health check result from a plugin.

    Attributes:
        state: The health state (HEALTHY, DEGRADED, or UNHEALTHY).
        message: Optional human-readable message about the health status.
    """

    state: HealthState
    message: str = ""


class PluginMetadata(ABC):
    """Abstract base class for alert channel plugins.

    Abstract Properties:
        name: Plugin identifier (e.g., "dingtalk")
        version: Plugin version in semver format (X.Y.Z)
        api_version: Required pipeline API version (X.Y format)

    Lifecycle Methods:
        startup(): Called when plugin is activated
        shutdown(): Called when the pipeline shuts down
        health_check(): Returns current health status

    Configuration:
        get_config_schema(): Returns Pydantic model for config validation
        validate_config(): Returns validation error messages
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Plugin name, unique within the handler registry."""
        ...

    @property
    @abstractmethod
    def version(self) -> str:
        """Plugin version in semver format (X.Y.Z)."""
        ...

    @property
    @abstractmethod
    def api_version(self) -> str:
        """Required pipeline API version (X.Y format)."""
        ...

    @property
    def description(self) -> str:
        """Human-readable description of the plugin."""
        return ""

    def get_config_schema(self) -> type[BaseModel] | None:
        """Return the Pydantic model for configuration validation.

        Returns:
            A Pydantic BaseModel subclass, or None if no configuration.
        """
        return None

    @abstractmethod
    def validate_config(self) -> list[str]:
        """Validate the plugin's active configuration.

        Returns:
            List of validation error messages. Empty list means valid.
        """
        ...

    def health_check(self) -> HealthStatus:
        """Check the health of this plugin.

        Returns:
            HealthStatus indicating current health state.
        """
        return HealthStatus(state=HealthState.HEALTHY)

    def startup(self) -> None:  # noqa: B027
        """Lifecycle hook called when the plugin is activated.

        Note: Empty default implementation is intentional - subclasses override.
        """

    def shutdown(self) -> None:  # noqa: B027
        """Lifecycle hook called when the pipeline shuts down.

        Note: Empty default implementation is intentional - subclasses override.
        """


__all__ = ["HealthState", "HealthStatus", "PluginMetadata"]
