"""Tests for pipeline data types."""

from pathlib import Path

import pytest

from livepeer_transcode.pipeline.models import OutputMode, TranscodedSegmentSet


class TestOutputMode:
    """Tests for OutputMode.from_destination()."""

    @pytest.mark.parametrize("name", ["out.ts", "out.mp4", "out.flv", "OUT.MP4"])
    def test_container_extensions(self, name: str) -> None:
        assert OutputMode.from_destination(Path(name)) is OutputMode.CONTAINER

    def test_playlist_extension(self) -> None:
        assert OutputMode.from_destination(Path("out.m3u8")) is OutputMode.PLAYLIST

    @pytest.mark.parametrize("name", ["out.mkv", "out"])
    def test_unsupported(self, name: str) -> None:
        with pytest.raises(ValueError, match="Unsupported extension"):
            OutputMode.from_destination(Path(name))


class TestTranscodedSegmentSet:
    """Tests for TranscodedSegmentSet."""

    def test_len(self) -> None:
        segment_set = TranscodedSegmentSet(seq_no=0, duration=2.0, renditions=(b"a", b"b"))
        assert len(segment_set) == 2

    def test_rejects_non_bytes(self) -> None:
        with pytest.raises(TypeError):
            TranscodedSegmentSet(seq_no=0, duration=2.0, renditions=("a",))
