"""Tests for core/formatting.py module."""

from livepeer_transcode.core.formatting import format_bitrate, format_file_size


class TestFormatFileSize:
    """Tests for format_file_size()."""

    def test_bytes(self) -> None:
        assert format_file_size(512) == "512 B"

    def test_kilobytes(self) -> None:
        assert format_file_size(1536) == "1.5 KB"

    def test_megabytes(self) -> None:
        assert format_file_size(128 * 1024**2) == "128.0 MB"

    def test_gigabytes(self) -> None:
        assert format_file_size(int(4.2 * 1024**3)) == "4.2 GB"

    def test_terabytes(self) -> None:
        assert format_file_size(3 * 1024**4) == "3.0 TB"


def test_format_bitrate() -> None:
    assert format_bitrate(2_000_000) == "2000 Kbit/s"
