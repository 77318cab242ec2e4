"""Transcode session: one remote stream scoped to a job.

The session creates the remote stream for the job's renditions, pushes
segments strictly in order, and deletes the stream when the job ends,
whether it succeeded or not.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from datetime import datetime
from typing import Protocol

from livepeer_transcode.api.models import Stream
from livepeer_transcode.core.durations import format_duration
from livepeer_transcode.exceptions import PushError, SessionError
from livepeer_transcode.pipeline.models import InputSegment, TranscodedSegmentSet
from livepeer_transcode.profiles.models import RenditionProfile, RenditionSet

logger = logging.getLogger(__name__)


class TranscodeClient(Protocol):
    """The remote operations a session needs."""

    def create_stream(
        self,
        name: str,
        presets: Sequence[str] = (),
        profiles: Sequence[RenditionProfile] = (),
        record: bool = False,
    ) -> Stream: ...

    def push_segment(
        self, stream_id: str, seq_no: int, duration: float, data: bytes
    ) -> list[bytes]: ...

    def delete_stream(self, stream_id: str) -> None: ...


def make_stream_name(now: datetime | None = None) -> str:
    """Name for a transcode-on-demand stream, e.g. tod_2024-05-01T10:20:30+02:00."""
    now = now or datetime.now().astimezone()
    return f"tod_{now.isoformat(timespec='seconds')}"


class TranscodeSession:
    """Wraps a remote stream for the lifetime of one job.

    Use as a context manager; the stream is deleted on exit even when the
    body raised.
    """

    def __init__(
        self,
        client: TranscodeClient,
        renditions: RenditionSet,
        name: str | None = None,
    ) -> None:
        self._client = client
        self._renditions = renditions
        self._name = name or make_stream_name()
        self._stream: Stream | None = None
        self._last_seq_no: int | None = None

    @property
    def stream(self) -> Stream | None:
        """The open remote stream, if any."""
        return self._stream

    def open(self) -> Stream:
        """Create the remote stream.

        Raises:
            SessionError: If the stream cannot be created.
        """
        if self._stream is not None:
            raise SessionError(f"Session already open (stream {self._stream.id})")
        self._stream = self._client.create_stream(
            self._name,
            presets=self._renditions.presets,
            profiles=self._renditions.profiles,
        )
        logger.info(
            "Created stream id=%s name=%s", self._stream.id, self._stream.name
        )
        return self._stream

    def push(self, segment: InputSegment) -> TranscodedSegmentSet:
        """Push one segment and wait for its renditions.

        Segments must be pushed in increasing sequence order, each only after
        the previous push returned.

        Raises:
            PushError: If the push fails or the number of returned renditions
                does not match the number requested.
        """
        if self._stream is None:
            raise PushError("Session is not open", segment.seq_no)
        if self._last_seq_no is not None and segment.seq_no <= self._last_seq_no:
            raise PushError(
                f"Segment {segment.seq_no} pushed out of order "
                f"(after {self._last_seq_no})",
                segment.seq_no,
            )

        started = time.monotonic()
        transcoded = self._client.push_segment(
            self._stream.id, segment.seq_no, segment.duration, segment.data
        )
        self._last_seq_no = segment.seq_no

        expected = len(self._renditions)
        if len(transcoded) != expected:
            raise PushError(
                f"Segment {segment.seq_no}: got {len(transcoded)} renditions, "
                f"expected {expected}",
                segment.seq_no,
            )
        logger.info(
            "Transcoded %d renditions took %s",
            len(transcoded),
            format_duration(time.monotonic() - started),
        )
        return TranscodedSegmentSet(
            seq_no=segment.seq_no,
            duration=segment.duration,
            renditions=tuple(transcoded),
        )

    def close(self) -> None:
        """Delete the remote stream. Failures are logged, never raised."""
        if self._stream is None:
            return
        stream, self._stream = self._stream, None
        try:
            self._client.delete_stream(stream.id)
            logger.debug("Deleted stream id=%s", stream.id)
        except Exception as e:
            logger.warning("Failed to delete stream id=%s: %s", stream.id, e)

    def __enter__(self) -> TranscodeSession:
        self.open()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
