"""Configuration loader with precedence handling.

Configuration is loaded with the following precedence (highest to lowest):
1. CLI arguments (passed directly to get_config)
2. Environment variables
3. Config file (~/.livepeer-transcode/config.toml)
4. Default values

Environment variables:
- LIVEPEER_API_KEY: API key
- LIVEPEER_API_HOST: API host (default livepeer.com)
- LIVEPEER_API_TIMEOUT: Request timeout in seconds (default 120)
- LIVEPEER_TRANSCODE_SEGMENT_LENGTH: Segment length, seconds or duration ("18s")
- LIVEPEER_TRANSCODE_QUEUE_SIZE: Segments buffered ahead of the pipeline
- LIVEPEER_TRANSCODE_CONFIG_PATH: Path to config file (overrides default location)
- LIVEPEER_TRANSCODE_LOG_LEVEL / LIVEPEER_TRANSCODE_LOG_FILE: Logging overrides

Example config.toml:

    [api]
    api_key = "..."
    api_host = "livepeer.com"
    timeout_seconds = 120

    [segmenting]
    segment_length = "18s"

    [logging]
    level = "info"
    format = "text"
"""

from __future__ import annotations

import logging
import threading
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from livepeer_transcode.config.env import EnvReader
from livepeer_transcode.config.models import (
    ApiConfig,
    LoggingConfig,
    SegmentingConfig,
    TranscodeConfig,
)
from livepeer_transcode.core.durations import parse_duration

logger = logging.getLogger(__name__)

# Default config location
DEFAULT_CONFIG_DIR = Path.home() / ".livepeer-transcode"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.toml"

# Cache for loaded config files (path -> (parsed dict, mtime))
_config_cache: dict[Path, tuple[dict, float]] = {}
_config_cache_lock = threading.Lock()


def get_default_config_path(env: Mapping[str, str] | None = None) -> Path:
    """Get the default config file path.

    Can be overridden by LIVEPEER_TRANSCODE_CONFIG_PATH environment variable.
    """
    reader = EnvReader(env)
    return reader.get_path("LIVEPEER_TRANSCODE_CONFIG_PATH") or DEFAULT_CONFIG_FILE


def clear_config_cache() -> None:
    """Drop cached config file contents (used by tests)."""
    with _config_cache_lock:
        _config_cache.clear()


def load_config_file(path: Path | None = None) -> dict[str, Any]:
    """Load configuration from TOML file.

    Args:
        path: Path to config file. If None, uses default location.

    Returns:
        Parsed configuration dict. Empty dict if the file doesn't exist or
        cannot be parsed.
    """
    if path is None:
        path = get_default_config_path()

    try:
        mtime = path.stat().st_mtime
    except FileNotFoundError:
        logger.debug("Config file not found: %s", path)
        return {}
    except OSError as e:
        logger.warning("Cannot stat config file %s: %s", path, e)
        return {}

    with _config_cache_lock:
        cached = _config_cache.get(path)
        if cached is not None and cached[1] == mtime:
            return cached[0]

    try:
        with path.open("rb") as f:
            config = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning("Failed to load config file %s: %s", path, e)
        return {}

    logger.debug("Loaded config from %s", path)
    with _config_cache_lock:
        _config_cache[path] = (config, mtime)
    return config


def _coerce_seconds(value: Any, name: str) -> float | None:
    """Turn a number or duration string into seconds."""
    if value is None:
        return None
    if isinstance(value, (int, float)):
        return float(value)
    try:
        return float(value)
    except ValueError:
        pass
    try:
        return parse_duration(str(value))
    except ValueError:
        logger.warning("Invalid duration for %s: %s", name, value)
        return None


def _first(*values: Any) -> Any:
    """Return the first value that is not None."""
    for value in values:
        if value is not None:
            return value
    return None


def get_config(
    config_path: Path | None = None,
    env: Mapping[str, str] | None = None,
    # CLI overrides (highest precedence)
    api_key: str | None = None,
    api_host: str | None = None,
    segment_length: float | None = None,
) -> TranscodeConfig:
    """Get configuration with full precedence handling.

    Args:
        config_path: Path to config file (overrides LIVEPEER_TRANSCODE_CONFIG_PATH).
        env: Environment mapping (defaults to os.environ).
        api_key: CLI override for the API key.
        api_host: CLI override for the API host.
        segment_length: CLI override for segment length in seconds.

    Returns:
        TranscodeConfig with merged configuration.

    Raises:
        ValueError: If a merged value fails model validation.
    """
    reader = EnvReader(env)
    file_config = load_config_file(config_path or get_default_config_path(env))

    api_file = file_config.get("api", {})
    api = ApiConfig(
        api_key=_first(
            api_key,
            reader.get_str("LIVEPEER_API_KEY"),
            api_file.get("api_key"),
        ),
        api_host=_first(
            api_host,
            reader.get_str("LIVEPEER_API_HOST"),
            api_file.get("api_host"),
            "livepeer.com",
        ),
        timeout_seconds=_first(
            reader.get_float("LIVEPEER_API_TIMEOUT"),
            _coerce_seconds(api_file.get("timeout_seconds"), "api.timeout_seconds"),
            120.0,
        ),
    )

    seg_file = file_config.get("segmenting", {})
    segmenting = SegmentingConfig(
        segment_length=_first(
            segment_length,
            _coerce_seconds(
                reader.get_str("LIVEPEER_TRANSCODE_SEGMENT_LENGTH"),
                "LIVEPEER_TRANSCODE_SEGMENT_LENGTH",
            ),
            _coerce_seconds(
                seg_file.get("segment_length"), "segmenting.segment_length"
            ),
            18.0,
        ),
        queue_size=_first(
            reader.get_int("LIVEPEER_TRANSCODE_QUEUE_SIZE"),
            seg_file.get("queue_size"),
            2,
        ),
    )

    log_file = file_config.get("logging", {})
    file_path = _first(
        reader.get_path("LIVEPEER_TRANSCODE_LOG_FILE"),
        Path(log_file["file"]).expanduser() if log_file.get("file") else None,
    )
    logging_config = LoggingConfig(
        level=_first(
            reader.get_str("LIVEPEER_TRANSCODE_LOG_LEVEL"),
            log_file.get("level"),
            "info",
        ),
        file=file_path,
        format=log_file.get("format", "text"),
        include_stderr=log_file.get("include_stderr", False),
        max_bytes=log_file.get("max_bytes", 10_485_760),
        backup_count=log_file.get("backup_count", 5),
    )

    return TranscodeConfig(api=api, segmenting=segmenting, logging=logging_config)
