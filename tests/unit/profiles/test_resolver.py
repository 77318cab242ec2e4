"""Tests for rendition resolution from user input."""

import json
import logging
from pathlib import Path

import pytest

from livepeer_transcode.exceptions import (
    ConfigurationError,
    InvalidFrameRate,
    InvalidH264Profile,
    InvalidResolution,
    MissingBitrate,
    ProfileParseError,
    UnknownPreset,
)
from livepeer_transcode.profiles.presets import (
    H264_PROFILES,
    PRESETS,
    is_known_preset,
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


class TestPresetTable:
    """Tests for the preset and encoder profile tables."""

    def test_known_preset(self) -> None:
        assert is_known_preset("P720p30fps16x9")
        assert not is_known_preset("P4Kp60fps")

    def test_preset_names_sorted(self) -> None:
        names = preset_names()
        assert names == sorted(PRESETS)
        assert len(names) == 14

    def test_h264_profiles(self) -> None:
        assert dict(H264_PROFILES) == {
            "baseline": "H264Baseline",
            "main": "H264Main",
            "high": "H264High",
        }


class TestParseResolution:
    """Tests for parse_resolution()."""

    def test_valid(self) -> None:
        assert parse_resolution("1280x720") == (1280, 720)

    def test_extra_components_ignored(self) -> None:
        assert parse_resolution("1280x720x3") == (1280, 720)

    @pytest.mark.parametrize("value", ["1280", "1280:720", "axb", "1280x", "-1x720"])
    def test_invalid(self, value: str) -> None:
        with pytest.raises(InvalidResolution):
            parse_resolution(value)


class TestParseFps:
    """Tests for parse_fps()."""

    def test_empty_is_unspecified(self) -> None:
        assert parse_fps("") == (0, 0)

    def test_integer(self) -> None:
        assert parse_fps("30") == (30, 0)

    def test_fraction(self) -> None:
        assert parse_fps("30000/1001") == (30000, 1001)

    @pytest.mark.parametrize("value", ["abc", "30/x", "-30", "4294967296"])
    def test_invalid(self, value: str) -> None:
        with pytest.raises(InvalidFrameRate):
            parse_fps(value)


class TestParsePresets:
    """Tests for parse_presets()."""

    def test_splits_and_strips(self) -> None:
        assert parse_presets("P720p30fps16x9, P360p30fps16x9") == (
            "P720p30fps16x9",
            "P360p30fps16x9",
        )

    def test_unknown_preset(self) -> None:
        with pytest.raises(UnknownPreset, match="P999p"):
            parse_presets("P720p30fps16x9,P999p")

    @pytest.mark.parametrize(
        "value",
        ["P720p30fps16x9,", ",P720p30fps16x9", "P720p30fps16x9,,P360p30fps16x9"],
    )
    def test_empty_entry_is_unknown(self, value: str) -> None:
        with pytest.raises(UnknownPreset) as exc_info:
            parse_presets(value)
        assert exc_info.value.name == ""


class TestParamsToProfile:
    """Tests for params_to_profile()."""

    def test_full_profile(self) -> None:
        profile = params_to_profile("1280x720", "main", "30000/1001", 2000, 2.0)
        assert profile.name == "custom"
        assert (profile.width, profile.height) == (1280, 720)
        assert profile.bitrate == 2_000_000
        assert (profile.fps, profile.fps_den) == (30000, 1001)
        assert profile.gop == "2.0000"
        assert profile.profile == "H264Main"

    def test_minimal_profile(self) -> None:
        profile = params_to_profile("640x360", bitrate_kbps=800)
        assert profile.gop is None
        assert profile.profile is None
        assert (profile.fps, profile.fps_den) == (0, 0)

    def test_missing_bitrate_checked_first(self) -> None:
        with pytest.raises(MissingBitrate):
            params_to_profile("garbage")

    def test_invalid_h264_profile(self) -> None:
        with pytest.raises(InvalidH264Profile):
            params_to_profile("640x360", "extended", bitrate_kbps=800)


class TestLoadProfilesFile:
    """Tests for load_profiles_file()."""

    def test_valid_file(self, temp_dir: Path) -> None:
        path = temp_dir / "profiles.json"
        path.write_text(
            json.dumps(
                [
                    {"name": "hd", "width": 1280, "height": 720, "bitrate": 3000000},
                    {"name": "sd", "width": 640, "height": 360, "bitrate": 1000000,
                     "fps": 30000, "fpsDen": 1001, "gop": 2},
                ]
            )
        )
        profiles = load_profiles_file(path)
        assert [p.name for p in profiles] == ["hd", "sd"]
        assert profiles[1].fps_den == 1001
        assert profiles[1].gop == "2.0000"

    def test_missing_file(self, temp_dir: Path) -> None:
        with pytest.raises(ProfileParseError, match="cannot read file"):
            load_profiles_file(temp_dir / "missing.json")

    def test_invalid_json(self, temp_dir: Path) -> None:
        path = temp_dir / "profiles.json"
        path.write_text("[{")
        with pytest.raises(ProfileParseError):
            load_profiles_file(path)

    def test_not_a_list(self, temp_dir: Path) -> None:
        path = temp_dir / "profiles.json"
        path.write_text('{"name": "hd"}')
        with pytest.raises(ProfileParseError, match="JSON list"):
            load_profiles_file(path)

    def test_empty_list(self, temp_dir: Path) -> None:
        path = temp_dir / "profiles.json"
        path.write_text("[]")
        with pytest.raises(ProfileParseError, match="empty"):
            load_profiles_file(path)

    def test_invalid_profile(self, temp_dir: Path) -> None:
        path = temp_dir / "profiles.json"
        path.write_text('[{"name": "hd", "width": "wide"}]')
        with pytest.raises(ProfileParseError):
            load_profiles_file(path)


class TestResolveRenditions:
    """Tests for resolve_renditions()."""

    def test_nothing_specified(self) -> None:
        with pytest.raises(ConfigurationError, match="Should specify preset"):
            resolve_renditions()

    def test_presets_with_resolution(self) -> None:
        with pytest.raises(ConfigurationError, match="Should not specify preset"):
            resolve_renditions(presets="P720p30fps16x9", resolution="1280x720")

    def test_presets_with_profiles_file(self, temp_dir: Path) -> None:
        with pytest.raises(ConfigurationError, match="Should not specify preset"):
            resolve_renditions(
                presets="P720p30fps16x9", profiles_file=temp_dir / "p.json"
            )

    def test_profiles_file_with_resolution(self, temp_dir: Path) -> None:
        with pytest.raises(ConfigurationError):
            resolve_renditions(resolution="1280x720", profiles_file=temp_dir / "p.json")

    def test_presets(self) -> None:
        renditions = resolve_renditions(presets="P720p30fps16x9,P360p30fps16x9")
        assert renditions.presets == ("P720p30fps16x9", "P360p30fps16x9")
        assert renditions.profiles == ()

    def test_only_commas(self) -> None:
        with pytest.raises(UnknownPreset):
            resolve_renditions(presets=",,")

    def test_resolution(self) -> None:
        renditions = resolve_renditions(resolution="1280x720", bitrate_kbps=2000)
        assert renditions.names == ("custom",)
        assert renditions.profiles[0].bitrate == 2_000_000

    def test_profiles_file(self, temp_dir: Path) -> None:
        path = temp_dir / "profiles.json"
        path.write_text('[{"name": "a", "bitrate": 1000}, {"bitrate": 2000}]')
        renditions = resolve_renditions(profiles_file=path)
        assert renditions.names == ("a", "profile_1")

    def test_warns_about_unused_parameters(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.WARNING):
            resolve_renditions(presets="P720p30fps16x9", bitrate_kbps=2000)
        assert "only used with --resolution" in caplog.text
