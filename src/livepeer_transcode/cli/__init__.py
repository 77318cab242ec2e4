"""CLI module for livepeer-transcode."""

import logging
import sys
from pathlib import Path

import click

from livepeer_transcode.cli.exit_codes import ExitCode

logger = logging.getLogger(__name__)

_logging_configured: bool = False


def _configure_logging(
    config_path: Path | None,
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
) -> None:
    """Configure logging from CLI options, once per process.

    Args:
        config_path: Config file override.
        log_level: Override log level (debug, info, warning, error).
        log_file: Override log file path.
        log_json: Use JSON log format.
    """
    global _logging_configured
    if _logging_configured:
        return

    from livepeer_transcode.config.logging_factory import (
        configure_logging_from_cli,
    )

    try:
        configure_logging_from_cli(
            config_path=config_path,
            level=log_level,
            file=log_file,
            format="json" if log_json else None,
        )
    except ValueError as e:
        click.echo(f"Error: Invalid configuration: {e}", err=True)
        sys.exit(ExitCode.CONFIG_ERROR)
    _logging_configured = True


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="livepeer-transcode")
@click.option(
    "--api-key",
    "-k",
    default=None,
    help="Livepeer API key (or LIVEPEER_API_KEY).",
)
@click.option(
    "--api-host",
    "-a",
    default=None,
    help="Livepeer API host (default: livepeer.com).",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Path to config file (default: ~/.livepeer-transcode/config.toml).",
)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default=None,
    help="Override log level (default: info).",
)
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    default=None,
    help="Override log file path.",
)
@click.option(
    "--log-json",
    is_flag=True,
    default=False,
    help="Use JSON log format.",
)
@click.pass_context
def main(
    ctx: click.Context,
    api_key: str | None,
    api_host: str | None,
    config_path: Path | None,
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
) -> None:
    """Transcode video files using the Livepeer API."""
    ctx.ensure_object(dict)
    ctx.obj["api_key"] = api_key
    ctx.obj["api_host"] = api_host
    ctx.obj["config_path"] = config_path

    _configure_logging(config_path, log_level, log_file, log_json)


# Defer import to avoid circular dependency
def _register_commands():
    from livepeer_transcode.cli.presets import list_presets_command
    from livepeer_transcode.cli.transcode import transcode_command

    main.add_command(transcode_command)
    main.add_command(list_presets_command)


_register_commands()
