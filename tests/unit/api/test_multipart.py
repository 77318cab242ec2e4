"""Tests for multipart/mixed response decoding."""

import pytest

from livepeer_transcode.api.multipart import split_multipart


def build_multipart(parts: list[bytes], boundary: str = "b0und4ry") -> bytes:
    """Build a multipart/mixed body the way a broadcaster answers a push."""
    body = b""
    for i, data in enumerate(parts):
        body += (
            f"--{boundary}\r\n"
            "Content-Type: video/mp2t\r\n"
            f"Content-Length: {len(data)}\r\n"
            f'Content-Disposition: attachment; filename="{i}.ts"\r\n'
            "\r\n"
        ).encode() + data + b"\r\n"
    body += f"--{boundary}--\r\n".encode()
    return body


class TestSplitMultipart:
    """Tests for split_multipart()."""

    def test_parts_in_order(self) -> None:
        body = build_multipart([b"first", b"second", b"third"])
        parts = split_multipart('multipart/mixed; boundary="b0und4ry"', body)
        assert parts == [b"first", b"second", b"third"]

    def test_binary_payload(self) -> None:
        data = bytes(range(256)) * 4
        body = build_multipart([data])
        assert split_multipart("multipart/mixed; boundary=b0und4ry", body) == [data]

    def test_not_multipart(self) -> None:
        with pytest.raises(ValueError, match="multipart"):
            split_multipart("video/mp2t", b"\x47" * 188)
