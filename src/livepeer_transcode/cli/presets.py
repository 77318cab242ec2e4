"""CLI command listing the known transcoding presets."""

import json

import click

from livepeer_transcode.profiles.presets import PRESETS, preset_names


@click.command("list-presets")
@click.option(
    "--json",
    "json_output",
    is_flag=True,
    help="Output in JSON format.",
)
def list_presets_command(json_output: bool) -> None:
    """List available transcoding presets.

    Preset names are passed to `transcode --presets`, comma separated.
    """
    names = preset_names()

    if json_output:
        data = [
            {
                "name": name,
                "width": PRESETS[name].width,
                "height": PRESETS[name].height,
                "bitrate": PRESETS[name].bitrate,
                "fps": PRESETS[name].fps,
            }
            for name in names
        ]
        click.echo(json.dumps(data, indent=2))
        return

    click.echo("Available transcoding presets:")
    for name in names:
        click.echo(f"  {name}")
