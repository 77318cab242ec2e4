"""CLI transcode command."""

import logging
import sys
from pathlib import Path

import click

from livepeer_transcode.api.client import LivepeerClient
from livepeer_transcode.cli.exit_codes import ExitCode
from livepeer_transcode.config import get_config
from livepeer_transcode.core.durations import parse_duration
from livepeer_transcode.core.formatting import format_file_size
from livepeer_transcode.exceptions import (
    ConfigurationError,
    ProfileError,
    TranscodeError,
)
from livepeer_transcode.pipeline.job import TranscodeJob, run_transcode
from livepeer_transcode.pipeline.models import INPUT_EXTENSIONS, OUTPUT_EXTENSIONS
from livepeer_transcode.profiles.resolver import resolve_renditions

logger = logging.getLogger(__name__)


class DurationParamType(click.ParamType):
    """Click parameter accepting durations such as "2s" or "500ms"."""

    name = "duration"

    def convert(self, value, param, ctx):
        if isinstance(value, (int, float)):
            return float(value)
        try:
            return parse_duration(value)
        except ValueError as e:
            self.fail(str(e), param, ctx)


DURATION = DurationParamType()


def _check_extension(path: Path, allowed: frozenset[str]) -> None:
    """Exit with CONFIG_ERROR if the file extension is not supported."""
    ext = path.suffix.lower()
    if ext not in allowed:
        click.echo(f"Error: Unsupported extension {ext!r} for file {str(path)!r}", err=True)
        sys.exit(ExitCode.CONFIG_ERROR)


def _check_input_file(path: Path) -> None:
    """Exit with TARGET_NOT_FOUND unless the input is an existing regular file."""
    try:
        is_dir = path.is_dir()
        exists = path.exists()
    except OSError as e:
        click.echo(f"Error: For file {str(path)!r}: {e}", err=True)
        sys.exit(ExitCode.TARGET_NOT_FOUND)
    if not exists:
        click.echo(f"Error: File {str(path)!r} does not exist", err=True)
        sys.exit(ExitCode.TARGET_NOT_FOUND)
    if is_dir:
        click.echo(f"Error: Not a file: {str(path)!r}", err=True)
        sys.exit(ExitCode.TARGET_NOT_FOUND)


def _report_written_files(files: list[Path]) -> None:
    click.echo("Written files:")
    for path in files:
        try:
            size = format_file_size(path.stat().st_size)
        except OSError:
            size = "?"
        click.echo(f"    {path} ({size})")


@click.command("transcode")
@click.argument("input_path", metavar="INPUT", type=click.Path(path_type=Path))
@click.argument("output_path", metavar="OUTPUT", type=click.Path(path_type=Path))
@click.option(
    "--presets",
    "-p",
    default="",
    help="List of transcoding presets, comma separated (P720p30fps16x9, etc).",
)
@click.option(
    "--resolution",
    "-r",
    default="",
    help="Resolution (1280x720).",
)
@click.option(
    "--bitrate",
    "-b",
    "bitrate_kbps",
    type=click.IntRange(min=0),
    default=0,
    help="Bitrate (in Kbit).",
)
@click.option(
    "--framerate",
    "-f",
    "frame_rate",
    default="",
    help="Frame rate (30 or 30000/1001).",
)
@click.option(
    "--profile",
    "-o",
    "h264_profile",
    default="",
    help="H.264 profile (baseline, main, high).",
)
@click.option(
    "--gop",
    "-g",
    type=DURATION,
    default=None,
    help="Gop, time between keyframes (2s, 500ms).",
)
@click.option(
    "--profiles",
    "profiles_file",
    type=click.Path(path_type=Path),
    default=None,
    help="Name of the JSON file with transcoding configuration.",
)
@click.option(
    "--segment-length",
    type=DURATION,
    default=None,
    help="Length of the segments sent for transcoding (default: 18s).",
)
@click.pass_context
def transcode_command(
    ctx: click.Context,
    input_path: Path,
    output_path: Path,
    presets: str,
    resolution: str,
    bitrate_kbps: int,
    frame_rate: str,
    h264_profile: str,
    gop: float | None,
    profiles_file: Path | None,
    segment_length: float | None,
) -> None:
    """Transcode a video file using the Livepeer API.

    INPUT is a .ts, .mp4 or .flv file. OUTPUT is a .ts, .mp4 or .flv file
    (one file per rendition) or an .m3u8 file (HLS master playlist with
    media playlists and segments next to it).

    Examples:

        # One 720p rendition at 2000 Kbit/s with a keyframe every 2s
        livepeer-transcode -k KEY transcode in.mp4 out.mp4 -r 1280x720 -b 2000 -g 2s

        # HLS package with two presets
        livepeer-transcode -k KEY transcode in.mp4 out.m3u8 \\
            -p P720p30fps16x9,P360p30fps16x9
    """
    obj = ctx.obj or {}

    _check_extension(input_path, INPUT_EXTENSIONS)
    _check_extension(output_path, OUTPUT_EXTENSIONS)

    try:
        config = get_config(
            config_path=obj.get("config_path"),
            api_key=obj.get("api_key"),
            api_host=obj.get("api_host"),
            segment_length=segment_length,
        )
    except ValueError as e:
        click.echo(f"Error: Invalid configuration: {e}", err=True)
        sys.exit(ExitCode.CONFIG_ERROR)

    if not config.api.api_key:
        click.echo("Error: Should provide --api-key flag", err=True)
        sys.exit(ExitCode.CONFIG_ERROR)

    _check_input_file(input_path)
    logger.info("Transcode from %s to %s", input_path, output_path)

    try:
        renditions = resolve_renditions(
            presets=presets,
            resolution=resolution,
            bitrate_kbps=bitrate_kbps,
            frame_rate=frame_rate,
            h264_profile=h264_profile,
            gop=gop or 0.0,
            profiles_file=profiles_file,
        )
    except ConfigurationError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(ExitCode.CONFIG_ERROR)
    except ProfileError as e:
        click.echo(f"Error parsing arguments: {e}", err=True)
        sys.exit(ExitCode.PROFILE_ERROR)

    job = TranscodeJob(
        source=input_path,
        destination=output_path,
        renditions=renditions,
        segment_length=config.segmenting.segment_length,
        queue_size=config.segmenting.queue_size,
    )

    try:
        with LivepeerClient(config.api) as client:
            logger.info("Chosen API server: %s", client.server)
            result = run_transcode(job, client)
    except TranscodeError as e:
        click.echo(f"Error while transcoding: {e}", err=True)
        sys.exit(ExitCode.TRANSCODE_FAILED)

    _report_written_files(result.written_files)
