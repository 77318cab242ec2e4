"""Structured logging module for livepeer-transcode.

Provides configurable logging with JSON format support and file rotation.
Includes segment context support so every record emitted while a segment
is processed carries its sequence number.
"""

from livepeer_transcode.logging.config import configure_logging
from livepeer_transcode.logging.context import (
    SegmentContextFilter,
    get_segment_context,
    segment_context,
)
from livepeer_transcode.logging.handlers import JSONFormatter

__all__ = [
    "JSONFormatter",
    "SegmentContextFilter",
    "configure_logging",
    "get_segment_context",
    "segment_context",
]
