"""Livepeer Transcode - segment-based remote transcoding of media files."""

__version__ = "0.1.0"
