"""Apply CLI logging flags on top of the configured LoggingConfig."""

from __future__ import annotations

import dataclasses
from pathlib import Path

from livepeer_transcode.config.models import LoggingConfig


def build_logging_config(
    base: LoggingConfig,
    *,
    level: str | None = None,
    file: Path | None = None,
    format: str | None = None,
    include_stderr: bool | None = None,
) -> LoggingConfig:
    """Return a copy of `base` with every non-None override applied.

    The copy is validated again, so a bad override raises ValueError.
    """
    overrides = {
        name: value
        for name, value in (
            ("level", level),
            ("file", file),
            ("format", format),
            ("include_stderr", include_stderr),
        )
        if value is not None
    }
    return dataclasses.replace(base, **overrides)


def configure_logging_from_cli(
    *,
    config_path: Path | None = None,
    level: str | None = None,
    file: Path | None = None,
    format: str | None = None,
    include_stderr: bool | None = None,
) -> None:
    """Load the logging section, apply CLI flags and install handlers.

    Raises:
        ValueError: If the merged configuration is invalid.
    """
    from livepeer_transcode.config import get_config
    from livepeer_transcode.logging import configure_logging

    logging_config = build_logging_config(
        get_config(config_path=config_path).logging,
        level=level,
        file=file,
        format=format,
        include_stderr=include_stderr,
    )
    configure_logging(logging_config)
