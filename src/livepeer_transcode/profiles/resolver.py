"""Resolve user-supplied rendition parameters into a RenditionSet.

Renditions come from exactly one of three sources:
- a comma-separated list of preset names
- a resolution/bitrate/frame-rate/h264-profile/gop tuple
- a JSON file holding a list of profile objects
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from livepeer_transcode.exceptions import (
    ConfigurationError,
    InvalidFrameRate,
    InvalidH264Profile,
    InvalidResolution,
    MissingBitrate,
    ProfileParseError,
    UnknownPreset,
)
from livepeer_transcode.profiles.models import (
    RenditionProfile,
    RenditionSet,
    format_gop,
)
from livepeer_transcode.profiles.presets import H264_PROFILES, is_known_preset

logger = logging.getLogger(__name__)

CUSTOM_PROFILE_NAME = "custom"

_UINT_RE = re.compile(r"^\d+$")
_UINT32_MAX = 2**32 - 1

_profile_list_adapter = TypeAdapter(list[RenditionProfile])


def parse_resolution(resolution: str) -> tuple[int, int]:
    """Parse a "<width>x<height>" string.

    Components after the second are ignored ("1280x720x1" -> (1280, 720)).

    Raises:
        InvalidResolution: If the separator is missing or a component is
            not a non-negative integer.
    """
    parts = resolution.split("x")
    if len(parts) < 2:
        raise InvalidResolution(resolution)
    width, height = parts[0].strip(), parts[1].strip()
    if not _UINT_RE.match(width) or not _UINT_RE.match(height):
        raise InvalidResolution(resolution)
    return int(width), int(height)


def _parse_uint32(value: str, original: str) -> int:
    value = value.strip()
    if not _UINT_RE.match(value) or int(value) > _UINT32_MAX:
        raise InvalidFrameRate(original)
    return int(value)


def parse_fps(fps: str) -> tuple[int, int]:
    """Parse a frame rate given as "<num>" or "<num>/<den>".

    An empty string means "unspecified" and yields (0, 0), letting the
    transcoder keep the source frame rate.

    Raises:
        InvalidFrameRate: If a component is not an unsigned 32-bit integer.
    """
    if not fps:
        return 0, 0
    parts = fps.split("/")
    num = _parse_uint32(parts[0], fps)
    den = _parse_uint32(parts[1], fps) if len(parts) > 1 else 0
    return num, den


def parse_presets(presets: str) -> tuple[str, ...]:
    """Split and validate a comma-separated list of preset names.

    Raises:
        UnknownPreset: For the first name not in the preset table.
    """
    names = tuple(name.strip() for name in presets.split(","))
    for name in names:
        if not is_known_preset(name):
            raise UnknownPreset(name)
    return names


def params_to_profile(
    resolution: str,
    h264_profile: str = "",
    frame_rate: str = "",
    bitrate_kbps: int = 0,
    gop: float = 0.0,
) -> RenditionProfile:
    """Build the single "custom" profile from discrete parameters.

    Args:
        resolution: "<width>x<height>".
        h264_profile: One of baseline, main, high, or empty.
        frame_rate: "<num>" or "<num>/<den>", or empty.
        bitrate_kbps: Target bitrate in Kbit/s. Required.
        gop: Keyframe interval in seconds; 0 leaves it to the transcoder.

    Raises:
        MissingBitrate: If bitrate is zero.
        InvalidResolution, InvalidFrameRate, InvalidH264Profile: On bad input.
    """
    if not bitrate_kbps:
        raise MissingBitrate()
    width, height = parse_resolution(resolution)
    fps, fps_den = parse_fps(frame_rate)

    encoder_profile = None
    if h264_profile:
        encoder_profile = H264_PROFILES.get(h264_profile)
        if encoder_profile is None:
            raise InvalidH264Profile(h264_profile)

    return RenditionProfile(
        name=CUSTOM_PROFILE_NAME,
        width=width,
        height=height,
        bitrate=bitrate_kbps * 1000,
        fps=fps,
        fps_den=fps_den,
        gop=format_gop(gop) if gop > 0 else None,
        profile=encoder_profile,
    )


def load_profiles_file(path: Path) -> tuple[RenditionProfile, ...]:
    """Load a JSON list of profile objects.

    Raises:
        ProfileParseError: If the file cannot be read, is not valid JSON,
            is not a non-empty list, or holds invalid profile objects.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ProfileParseError(path, f"cannot read file: {e}") from e

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise ProfileParseError(path, str(e)) from e

    if not isinstance(data, list):
        raise ProfileParseError(path, "expected a JSON list of profiles")
    if not data:
        raise ProfileParseError(path, "profile list is empty")

    try:
        profiles = _profile_list_adapter.validate_python(data)
    except ValidationError as e:
        raise ProfileParseError(path, str(e)) from e

    logger.debug("Loaded %d profile(s) from %s", len(profiles), path)
    return tuple(profiles)


def resolve_renditions(
    *,
    presets: str = "",
    resolution: str = "",
    bitrate_kbps: int = 0,
    frame_rate: str = "",
    h264_profile: str = "",
    gop: float = 0.0,
    profiles_file: Path | None = None,
) -> RenditionSet:
    """Resolve the rendition selection for a job.

    Exactly one of `presets`, `resolution` (with its companion parameters)
    or `profiles_file` must be supplied.

    Raises:
        ConfigurationError: If none or more than one source is supplied.
        ProfileError: If the chosen source is invalid.
    """
    sources = [
        name
        for name, given in (
            ("presets", bool(presets)),
            ("resolution", bool(resolution)),
            ("profiles", profiles_file is not None),
        )
        if given
    ]
    if not sources:
        raise ConfigurationError(
            "Should specify preset or resolution or profiles file name"
        )
    if len(sources) > 1:
        if "presets" in sources:
            raise ConfigurationError(
                "Should not specify preset if profiles or resolution specified"
            )
        raise ConfigurationError(
            "Should not specify both a profiles file and a resolution"
        )

    if not resolution and (bitrate_kbps or frame_rate or h264_profile or gop):
        logger.warning(
            "Bitrate, frame rate, profile and gop are only used with --resolution"
        )

    if presets:
        names = parse_presets(presets)
        logger.info("Using presets %s", ", ".join(names))
        return RenditionSet(presets=names)

    if profiles_file is not None:
        return RenditionSet(profiles=load_profiles_file(profiles_file))

    profile = params_to_profile(
        resolution, h264_profile, frame_rate, bitrate_kbps, gop
    )
    return RenditionSet(profiles=(profile,))
