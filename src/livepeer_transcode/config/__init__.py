"""Configuration management for livepeer-transcode.

Configuration is loaded with precedence handling:
1. CLI flags (highest priority)
2. Environment variables (LIVEPEER_*)
3. Config file (~/.livepeer-transcode/config.toml)
4. Default values (lowest priority)
"""

from livepeer_transcode.config.env import EnvReader
from livepeer_transcode.config.loader import (
    clear_config_cache,
    get_config,
    get_default_config_path,
    load_config_file,
)
from livepeer_transcode.config.logging_factory import (
    build_logging_config,
    configure_logging_from_cli,
)
from livepeer_transcode.config.models import (
    ApiConfig,
    LoggingConfig,
    SegmentingConfig,
    TranscodeConfig,
)

__all__ = [
    # Models
    "ApiConfig",
    "LoggingConfig",
    "SegmentingConfig",
    "TranscodeConfig",
    # Loader
    "EnvReader",
    "clear_config_cache",
    "get_config",
    "get_default_config_path",
    "load_config_file",
    # Logging
    "build_logging_config",
    "configure_logging_from_cli",
]
