"""Container demuxing and muxing with PyAV.

Transcoded segments arrive as MPEG-TS buffers. In container mode each one
is demuxed and its packets are copied, timestamps untouched, into a
long-lived output container per rendition.
"""

from __future__ import annotations

import io
import logging
from collections.abc import Iterator, Sequence
from pathlib import Path
from typing import Any

import av
from av.error import FFmpegError

from livepeer_transcode.exceptions import MultiplexError

logger = logging.getLogger(__name__)

# Stream types carried from transcoded segments into output containers
MEDIA_STREAM_TYPES = ("video", "audio")


class SegmentDemuxer:
    """Demuxer over one in-memory MPEG-TS segment.

    Packets are only valid while the demuxer is open.
    """

    def __init__(self, data: bytes) -> None:
        try:
            self._container = av.open(io.BytesIO(data), format="mpegts")
        except FFmpegError as e:
            raise MultiplexError(f"Cannot demux segment: {e}") from e
        self._streams = [
            s for s in self._container.streams if s.type in MEDIA_STREAM_TYPES
        ]
        self._positions = {s.index: pos for pos, s in enumerate(self._streams)}

    @property
    def streams(self) -> list[Any]:
        """Audio and video stream descriptors, in container order."""
        return list(self._streams)

    def packets(self) -> Iterator[tuple[int, Any]]:
        """Yield (stream position, packet) in demux order until end of stream.

        Raises:
            MultiplexError: If demuxing stops on anything but end of stream.
        """
        if not self._streams:
            return
        try:
            for packet in self._container.demux(self._streams):
                # Flush packets carry no data and mark end of stream
                if packet.dts is None and packet.size == 0:
                    continue
                yield self._positions[packet.stream.index], packet
        except FFmpegError as e:
            raise MultiplexError(f"Error while demuxing segment: {e}") from e

    def close(self) -> None:
        self._container.close()

    def __enter__(self) -> SegmentDemuxer:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class ContainerWriter:
    """Output container for one rendition; format follows the file extension."""

    def __init__(self, path: Path) -> None:
        self.path = path
        try:
            self._container = av.open(str(path), mode="w")
        except (FFmpegError, OSError) as e:
            raise MultiplexError(f"Can't create out file {path}: {e}") from e
        self._streams: list[Any] = []
        self._closed = False

    @property
    def header_written(self) -> bool:
        return bool(self._streams)

    def write_header(self, streams: Sequence[Any]) -> None:
        """Create output streams from the first segment's stream descriptors.

        Raises:
            MultiplexError: If called twice or a stream cannot be created.
        """
        if self.header_written:
            raise MultiplexError(f"Header already written for {self.path}")
        if not streams:
            raise MultiplexError(f"No audio or video streams for {self.path}")
        try:
            for stream in streams:
                self._streams.append(self._container.add_stream_from_template(stream))
        except (FFmpegError, ValueError) as e:
            raise MultiplexError(f"Write header for {self.path}: {e}") from e

    def write_packet(self, position: int, packet: Any) -> None:
        """Mux a packet into the output stream at `position`.

        Raises:
            MultiplexError: If the header is missing, the stream is unknown
                or muxing fails.
        """
        if not self.header_written:
            raise MultiplexError(f"Packet before header for {self.path}")
        if position >= len(self._streams):
            raise MultiplexError(
                f"Packet for stream {position} but {self.path} has "
                f"{len(self._streams)} streams"
            )
        packet.stream = self._streams[position]
        try:
            self._container.mux(packet)
        except FFmpegError as e:
            raise MultiplexError(f"Mux packet into {self.path}: {e}") from e

    def close(self) -> None:
        """Write the trailer and close the file.

        Raises:
            MultiplexError: If closing fails.
        """
        if self._closed:
            return
        self._closed = True
        try:
            self._container.close()
        except (FFmpegError, OSError) as e:
            raise MultiplexError(f"Close {self.path}: {e}") from e
