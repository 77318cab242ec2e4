"""Install root logging handlers from a LoggingConfig."""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING

from livepeer_transcode.logging.context import SegmentContextFilter
from livepeer_transcode.logging.handlers import JSONFormatter

if TYPE_CHECKING:
    from livepeer_transcode.config.models import LoggingConfig

# segment_tag is "[S0003] " while a segment is in flight and empty otherwise
TEXT_FORMAT = "%(asctime)s - %(segment_tag)s%(name)s - %(levelname)s - %(message)s"
TEXT_DATEFMT = "%Y-%m-%dT%H:%M:%S%z"


def _make_formatter(fmt: str) -> logging.Formatter:
    if fmt.lower() == "json":
        return JSONFormatter()
    return logging.Formatter(TEXT_FORMAT, datefmt=TEXT_DATEFMT)


def _open_log_file(config: LoggingConfig) -> logging.Handler | None:
    """Rotating handler for config.file, or None if it cannot be opened."""
    path = Path(config.file).expanduser()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        return RotatingFileHandler(
            path,
            maxBytes=config.max_bytes,
            backupCount=config.backup_count,
            encoding="utf-8",
        )
    except OSError as e:
        print(f"Warning: Could not open log file {path}: {e}", file=sys.stderr)
        return None


def configure_logging(config: LoggingConfig) -> None:
    """Replace the root logger's handlers according to `config`.

    Logs go to the rotating file when one is configured and can be opened.
    Stderr is used as well when include_stderr is set, and always when
    there is no file handler.
    """
    level = logging.getLevelName(config.level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    handlers: list[logging.Handler] = []
    if config.file:
        file_handler = _open_log_file(config)
        if file_handler is not None:
            handlers.append(file_handler)
    if config.include_stderr or not handlers:
        handlers.append(logging.StreamHandler(sys.stderr))

    formatter = _make_formatter(config.format)
    segment_filter = SegmentContextFilter()

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        handler.addFilter(segment_filter)
        root.addHandler(handler)

    # httpx reports every request at INFO
    if level > logging.DEBUG:
        logging.getLogger("httpx").setLevel(logging.WARNING)
