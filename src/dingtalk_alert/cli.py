"""Command line entry point for operating the DingTalk channel.

Commands:
    dingtalk-alert validate: Validate the configuration from the environment
    dingtalk-alert test: Send a live self-test message

Configuration is read from DINGTALK_ENABLED / DINGTALK_ACCESS_TOKEN.

Example:
    $ DINGTALK_ACCESS_TOKEN=... dingtalk-alert test --message "hello"
"""

from __future__ import annotations

import sys
from enum import IntEnum
from importlib.metadata import version as get_version
from typing import TYPE_CHECKING

import click
from pydantic import ValidationError

from dingtalk_alert.config import ConfigStore, DingtalkConfig, load_config
from dingtalk_alert.diagnostics import StructlogDiagnostic
from dingtalk_alert.errors import (
    DingtalkConfigError,
    DingtalkError,
    DingtalkTransportError,
)
from dingtalk_alert.service import DingtalkService
from dingtalk_alert.telemetry.logging import configure_logging
from dingtalk_alert.telemetry.sanitization import sanitize_error_message

if TYPE_CHECKING:
    from typing import NoReturn


class ExitCode(IntEnum):
    """Exit codes for CLI commands."""

    SUCCESS = 0
    """Command completed successfully."""

    GENERAL_ERROR = 1
    """General error (catch-all for failures)."""

    VALIDATION_ERROR = 5
    """Configuration validation failed."""

    NETWORK_ERROR = 8
    """Network or remote service error."""


def _get_version() -> str:
    """Get the installed package version, or 'unknown'."""
    try:
        return get_version("dingtalk-alert")
    except Exception:
        return "unknown"


def error_exit(message: str, exit_code: ExitCode = ExitCode.GENERAL_ERROR) -> NoReturn:
    """Print an error message to stderr and exit with a code.

    Raises:
        SystemExit: Always exits with the specified code.
    """
    click.echo(f"Error: {message}", err=True)
    sys.exit(exit_code)


def _load_valid_config() -> DingtalkConfig:
    try:
        config = load_config()
    except ValidationError as e:
        error_exit(
            f"invalid DINGTALK_* environment: {e.error_count()} error(s)",
            ExitCode.VALIDATION_ERROR,
        )
    try:
        ConfigStore.validate(config)
    except DingtalkConfigError as e:
        error_exit(str(e), ExitCode.VALIDATION_ERROR)
    return config


@click.group(
    name="dingtalk-alert",
    help="dingtalk-alert - DingTalk robot alert channel.",
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.version_option(version=_get_version(), prog_name="dingtalk-alert")
@click.option(
    "--log-level",
    default="WARNING",
    show_default=True,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Minimum log level.",
)
@click.option("--json-logs/--console-logs", default=False, help="Log output format.")
def cli(log_level: str, json_logs: bool) -> None:
    """DingTalk alert channel command group."""
    configure_logging(log_level=log_level, json_output=json_logs)


@cli.command("validate")
def validate_command() -> None:
    """Validate the DingTalk configuration from the environment."""
    config = _load_valid_config()
    click.echo(f"Configuration valid (enabled={config.enabled})")


@cli.command("test")
@click.option("--message", default=None, help="Message to send instead of the canned test message.")
@click.option(
    "--access-token", default=None, help="Token to test instead of DINGTALK_ACCESS_TOKEN."
)
@click.option(
    "--timeout", default=10.0, show_default=True, type=float, help="HTTP timeout in seconds."
)
def test_command(message: str | None, access_token: str | None, timeout: float) -> None:
    """Send a live self-test message to DingTalk."""
    if access_token:
        config = DingtalkConfig(access_token=access_token)
    else:
        config = _load_valid_config()

    service = DingtalkService(config, StructlogDiagnostic(), timeout_seconds=timeout)
    options = service.test_options()
    if message:
        options = options.model_copy(update={"message": message})

    try:
        service.run_test(options)
    except DingtalkTransportError as e:
        error_exit(sanitize_error_message(str(e)), ExitCode.NETWORK_ERROR)
    except DingtalkError as e:
        error_exit(sanitize_error_message(str(e)))

    click.echo("Test message sent")


def main() -> None:
    """Console script entry point."""
    cli()


__all__ = ["ExitCode", "cli", "main"]
