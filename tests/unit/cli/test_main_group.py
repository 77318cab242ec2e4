"""Tests for the top-level CLI group."""

from unittest.mock import patch

from click.testing import CliRunner

from livepeer_transcode.cli import main
from livepeer_transcode.cli.exit_codes import ExitCode


def test_help_lists_commands() -> None:
    result = CliRunner().invoke(main, ["--help"])
    assert result.exit_code == 0
    assert "transcode" in result.output
    assert "list-presets" in result.output


def test_invalid_logging_config_exits() -> None:
    """A logging configuration error should exit with CONFIG_ERROR."""
    with (
        patch("livepeer_transcode.cli._logging_configured", False),
        patch(
            "livepeer_transcode.config.logging_factory.configure_logging_from_cli",
            side_effect=ValueError("level must be one of"),
        ),
    ):
        result = CliRunner().invoke(main, ["list-presets"])

    assert result.exit_code == ExitCode.CONFIG_ERROR
    assert "Invalid configuration" in result.output


def test_logging_configured_from_options(temp_dir) -> None:
    log_file = temp_dir / "transcode.log"
    with (
        patch("livepeer_transcode.cli._logging_configured", False),
        patch(
            "livepeer_transcode.config.logging_factory.configure_logging_from_cli"
        ) as configure,
    ):
        result = CliRunner().invoke(
            main,
            ["--log-level", "debug", "--log-file", str(log_file), "--log-json", "list-presets"],
        )

    assert result.exit_code == 0
    configure.assert_called_once_with(
        config_path=None, level="debug", file=log_file, format="json"
    )
