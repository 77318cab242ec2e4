"""Core utilities shared across livepeer-transcode modules."""

from livepeer_transcode.core.durations import format_duration, parse_duration
from livepeer_transcode.core.formatting import format_bitrate, format_file_size

__all__ = [
    "format_bitrate",
    "format_duration",
    "format_file_size",
    "parse_duration",
]
