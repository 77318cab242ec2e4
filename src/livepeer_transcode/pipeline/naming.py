"""Output file naming rules.

All generated files live in the destination's directory and are derived
from the destination's stem (`<base>`).
"""

from __future__ import annotations

from pathlib import Path


def get_base(destination: Path) -> str:
    """The destination file stem, e.g. "/out/movie.m3u8" -> "movie"."""
    return destination.stem


def make_dst_name(destination: Path, index: int, count: int) -> Path:
    """Container output path for rendition `index` of `count`.

    A single rendition writes to the destination unchanged; with more than
    one, "_<index>" is inserted before the extension.
    """
    if count == 1:
        return destination
    return destination.with_name(f"{destination.stem}_{index}{destination.suffix}")


def make_segment_file_name(destination: Path, rendition: str, seq_no: int) -> str:
    """File name (and playlist URI) of one HLS media segment."""
    return f"{get_base(destination)}_{rendition}_{seq_no}.ts"


def make_media_playlist_name(destination: Path, rendition: str) -> str:
    """Name of a media playlist without extension, as listed in the master."""
    return f"{get_base(destination)}_{rendition}"


def make_media_playlist_dst_name(destination: Path, rendition: str) -> Path:
    """Path a media playlist is written to."""
    return destination.with_name(
        f"{make_media_playlist_name(destination, rendition)}{destination.suffix}"
    )


def add_path_from(destination: Path, file_name: str) -> Path:
    """Place `file_name` in the destination's directory."""
    return destination.parent / file_name
