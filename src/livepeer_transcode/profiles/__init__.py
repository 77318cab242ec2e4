"""Rendition profiles: models, known presets and argument resolution."""

from livepeer_transcode.profiles.models import RenditionProfile, RenditionSet
from livepeer_transcode.profiles.presets import (
    H264_PROFILES,
    PRESETS,
    PresetInfo,
    preset_names,
)
from livepeer_transcode.profiles.resolver import (
    load_profiles_file,
    params_to_profile,
    parse_fps,
    parse_presets,
    parse_resolution,
    resolve_renditions,
)

__all__ = [
    "H264_PROFILES",
    "PRESETS",
    "PresetInfo",
    "RenditionProfile",
    "RenditionSet",
    "load_profiles_file",
    "params_to_profile",
    "parse_fps",
    "parse_presets",
    "parse_resolution",
    "preset_names",
    "resolve_renditions",
]
