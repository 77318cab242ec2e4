"""HLS playlist building and encoding."""

from livepeer_transcode.hls.playlist import (
    MasterPlaylist,
    MediaPlaylist,
    MediaSegment,
    Variant,
)

__all__ = [
    "MasterPlaylist",
    "MediaPlaylist",
    "MediaSegment",
    "Variant",
]
