"""Configuration data models.

This module defines dataclasses for livepeer-transcode configuration options.
"""

from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class ApiConfig:
    """Configuration for the Livepeer API connection."""

    api_key: str | None = None
    """API key sent as a bearer token. Required for transcoding."""

    api_host: str = "livepeer.com"
    """API host name, optionally with scheme (https is assumed)."""

    timeout_seconds: float = 120.0
    """Client-side timeout for every API and segment push request."""

    def __post_init__(self) -> None:
        """Validate configuration."""
        if not self.api_host or not self.api_host.strip():
            raise ValueError("api_host must not be empty")
        if self.api_key is not None and " " in self.api_key:
            raise ValueError("API key must not contain whitespace")
        if self.timeout_seconds <= 0:
            raise ValueError(
                f"timeout_seconds must be positive, got {self.timeout_seconds}"
            )

    @property
    def base_url(self) -> str:
        """API base URL with scheme."""
        host = self.api_host.strip().rstrip("/")
        if host.startswith(("http://", "https://")):
            return host
        return f"https://{host}"


@dataclass
class SegmentingConfig:
    """Configuration for input segmentation."""

    # Target segment length in seconds
    segment_length: float = 18.0

    # Number of segments buffered between the segmenter thread and the pipeline
    queue_size: int = 2

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.segment_length <= 0:
            raise ValueError(
                f"segment_length must be positive, got {self.segment_length}"
            )
        if self.queue_size < 1:
            raise ValueError(f"queue_size must be at least 1, got {self.queue_size}")


LOG_LEVELS = ("debug", "info", "warning", "error")
LOG_FORMATS = ("text", "json")


@dataclass
class LoggingConfig:
    """Where and how log records are written.

    With no ``file`` set, records go to stderr. ``max_bytes`` and
    ``backup_count`` control rotation of the log file.
    """

    level: str = "info"
    file: Path | None = None
    format: str = "text"
    include_stderr: bool = False
    max_bytes: int = 10 * 1024 * 1024
    backup_count: int = 5

    def __post_init__(self) -> None:
        for name, allowed in (("level", LOG_LEVELS), ("format", LOG_FORMATS)):
            value = getattr(self, name)
            if value.lower() not in allowed:
                raise ValueError(
                    f"logging {name} {value!r} is not one of {', '.join(allowed)}"
                )


@dataclass
class TranscodeConfig:
    """Main configuration container for livepeer-transcode."""

    api: ApiConfig = field(default_factory=ApiConfig)
    segmenting: SegmentingConfig = field(default_factory=SegmentingConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
