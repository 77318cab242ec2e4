"""Known transcoding presets and encoder profile names.

Both tables are read-only mappings built at import time.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType


@dataclass(frozen=True)
class PresetInfo:
    """Nominal parameters of a server-side preset."""

    width: int
    height: int
    bitrate: int  # bits per second
    fps: int


PRESETS: MappingProxyType[str, PresetInfo] = MappingProxyType(
    {
        "P720p60fps16x9": PresetInfo(1280, 720, 6_000_000, 60),
        "P720p30fps16x9": PresetInfo(1280, 720, 4_000_000, 30),
        "P720p25fps16x9": PresetInfo(1280, 720, 3_500_000, 25),
        "P720p30fps4x3": PresetInfo(960, 720, 3_500_000, 30),
        "P576p30fps16x9": PresetInfo(1024, 576, 1_500_000, 30),
        "P576p25fps16x9": PresetInfo(1024, 576, 1_500_000, 25),
        "P360p30fps16x9": PresetInfo(640, 360, 1_200_000, 30),
        "P360p25fps16x9": PresetInfo(640, 360, 1_000_000, 25),
        "P360p30fps4x3": PresetInfo(480, 360, 1_000_000, 30),
        "P240p30fps16x9": PresetInfo(426, 240, 600_000, 30),
        "P240p25fps16x9": PresetInfo(426, 240, 600_000, 25),
        "P240p30fps4x3": PresetInfo(320, 240, 600_000, 30),
        "P144p30fps16x9": PresetInfo(256, 144, 400_000, 30),
        "P144p25fps16x9": PresetInfo(256, 144, 400_000, 25),
    }
)

# CLI token -> encoder profile tag understood by the API
H264_PROFILES: MappingProxyType[str, str] = MappingProxyType(
    {
        "baseline": "H264Baseline",
        "main": "H264Main",
        "high": "H264High",
    }
)


def is_known_preset(name: str) -> bool:
    """Check whether a preset name is in the preset table."""
    return name in PRESETS


def preset_names() -> list[str]:
    """Return all preset names, sorted."""
    return sorted(PRESETS)
