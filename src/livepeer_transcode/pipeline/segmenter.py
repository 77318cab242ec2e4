"""Segment source: split an input file into MPEG-TS segments.

A producer thread demuxes the input with PyAV, cuts it at the first video
keyframe at or after each segment boundary, remuxes every slice into an
in-memory MPEG-TS buffer and hands the segments to the pipeline through a
bounded queue. The queue is single-producer/single-consumer and ends with
either a SegmentEnd or a SegmentFailure marker.
"""

from __future__ import annotations

import io
import logging
import queue
import threading
from collections.abc import Iterator, Sequence
from pathlib import Path
from typing import Any

import av
from av.error import FFmpegError

from livepeer_transcode.exceptions import SegmenterError
from livepeer_transcode.pipeline.container import MEDIA_STREAM_TYPES
from livepeer_transcode.pipeline.models import InputSegment, SegmentEnd, SegmentFailure

logger = logging.getLogger(__name__)

# How often a blocked producer re-checks for cancellation
_PUT_POLL_SECONDS = 0.2

SegmentItem = InputSegment | SegmentEnd | SegmentFailure


def _packet_time(packet: Any) -> float:
    ts = packet.pts if packet.pts is not None else packet.dts
    return float(ts * packet.time_base)


def _packet_end_time(packet: Any) -> float:
    return _packet_time(packet) + float((packet.duration or 0) * packet.time_base)


def remux_packets(streams: Sequence[Any], packets: Sequence[Any]) -> bytes:
    """Mux packets of the given input streams into an MPEG-TS buffer."""
    buffer = io.BytesIO()
    with av.open(buffer, mode="w", format="mpegts") as output:
        mapping = {
            stream.index: output.add_stream_from_template(stream) for stream in streams
        }
        for packet in packets:
            packet.stream = mapping[packet.stream.index]
            output.mux(packet)
    return buffer.getvalue()


def split_segments(path: Path, segment_length: float) -> Iterator[InputSegment]:
    """Split a media file into segments of roughly `segment_length` seconds.

    Cuts happen on video keyframes, so segments can be longer than the
    target when keyframes are sparse. Audio-only inputs are cut on any
    packet.

    Raises:
        SegmenterError: If the file cannot be opened or demuxed.
    """
    try:
        container = av.open(str(path))
    except (FFmpegError, OSError) as e:
        raise SegmenterError(f"Cannot open {path}: {e}") from e

    with container:
        streams = [s for s in container.streams if s.type in MEDIA_STREAM_TYPES]
        if not streams:
            raise SegmenterError(f"No audio or video streams in {path}")
        video = next((s for s in streams if s.type == "video"), None)

        seq_no = 0
        start: float | None = None
        pending: list[Any] = []
        try:
            for packet in container.demux(streams):
                if packet.dts is None:
                    continue
                ts = _packet_time(packet)
                if start is None:
                    start = ts
                is_cut_point = video is None or (
                    packet.stream.index == video.index and packet.is_keyframe
                )
                if pending and is_cut_point and ts - start >= segment_length:
                    yield InputSegment(
                        seq_no=seq_no,
                        pts=start,
                        duration=ts - start,
                        data=remux_packets(streams, pending),
                    )
                    seq_no += 1
                    start = ts
                    pending = []
                pending.append(packet)

            if pending and start is not None:
                end = max(_packet_end_time(p) for p in pending)
                yield InputSegment(
                    seq_no=seq_no,
                    pts=start,
                    duration=end - start,
                    data=remux_packets(streams, pending),
                )
        except FFmpegError as e:
            raise SegmenterError(f"Error while segmenting {path}: {e}") from e


class SegmentSource:
    """Produces the segments of one input file on a background thread.

    Iterate to receive InputSegments in sequence order. Iteration stops at
    end of input and raises SegmenterError if the producer failed.

    Example:
        with SegmentSource(path, 18.0) as source:
            for segment in source:
                ...
    """

    def __init__(
        self,
        path: Path,
        segment_length: float,
        queue_size: int = 2,
        cancel_event: threading.Event | None = None,
    ) -> None:
        self.path = path
        self.segment_length = segment_length
        self._queue: queue.Queue[SegmentItem] = queue.Queue(maxsize=queue_size)
        self._cancel = cancel_event or threading.Event()
        self._thread: threading.Thread | None = None

    def start(self) -> None:
        """Start the producer thread."""
        if self._thread is not None:
            raise RuntimeError("SegmentSource already started")
        self._thread = threading.Thread(
            target=self._produce, name="segmenter", daemon=True
        )
        self._thread.start()

    def stop(self, timeout: float = 5.0) -> None:
        """Signal cancellation and wait for the producer to exit."""
        self._cancel.set()
        if self._thread is not None:
            self._thread.join(timeout=timeout)
            if self._thread.is_alive():
                logger.warning("Segmenter thread did not stop within %.1fs", timeout)

    def _segments(self) -> Iterator[InputSegment]:
        return split_segments(self.path, self.segment_length)

    def _put(self, item: SegmentItem) -> bool:
        """Block until the item is queued; False if cancelled meanwhile."""
        while not self._cancel.is_set():
            try:
                self._queue.put(item, timeout=_PUT_POLL_SECONDS)
                return True
            except queue.Full:
                continue
        return False

    def _produce(self) -> None:
        try:
            for segment in self._segments():
                if not self._put(segment):
                    logger.debug("Segmenter cancelled before segment %d", segment.seq_no)
                    return
            self._put(SegmentEnd())
        except Exception as e:
            # Handed to the consumer, which raises it on its own thread
            self._put(SegmentFailure(e))

    def __iter__(self) -> Iterator[InputSegment]:
        while True:
            item = self._queue.get()
            if isinstance(item, SegmentEnd):
                return
            if isinstance(item, SegmentFailure):
                if isinstance(item.error, SegmenterError):
                    raise item.error
                raise SegmenterError(
                    f"Error while segmenting {self.path}: {item.error}"
                ) from item.error
            yield item

    def __enter__(self) -> SegmentSource:
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()
