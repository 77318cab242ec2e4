"""Output multiplexers: turn transcoded segment sets into output files.

Two strategies, chosen once per job from the OutputMode:

- ContainerMultiplexer demuxes every transcoded segment and appends its
  packets to one output container per rendition.
- PlaylistMultiplexer writes every transcoded segment verbatim as a .ts
  file and, on finalize, writes HLS media playlists and a master playlist.

Both consume segment sets in sequence order and are driven by a single
thread; no locking is done.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from livepeer_transcode.core.formatting import format_bitrate
from livepeer_transcode.exceptions import MultiplexError, PlaylistError
from livepeer_transcode.hls.playlist import (
    MasterPlaylist,
    MediaPlaylist,
    MediaSegment,
    Variant,
)
from livepeer_transcode.pipeline.container import ContainerWriter, SegmentDemuxer
from livepeer_transcode.pipeline.models import OutputMode, TranscodedSegmentSet
from livepeer_transcode.pipeline.naming import (
    add_path_from,
    make_dst_name,
    make_media_playlist_dst_name,
    make_media_playlist_name,
    make_segment_file_name,
)
from livepeer_transcode.profiles.models import RenditionSet

logger = logging.getLogger(__name__)


class MultiplexerState(Enum):
    IDLE = "idle"
    STREAMING = "streaming"
    FINALIZED = "finalized"
    ABORTED = "aborted"


def estimate_bandwidth(size_bytes: int, duration: float) -> int:
    """Advertised bandwidth from one segment, rounded down to 1000 bit/s.

    Duration is truncated to whole seconds; a segment shorter than one
    second yields 0.
    """
    seconds = int(duration)
    if seconds <= 0:
        return 0
    bw = size_bytes * 8 // seconds
    return bw - bw % 1000


class OutputMultiplexer(ABC):
    """Common state handling for both output strategies."""

    def __init__(self, destination: Path, renditions: RenditionSet) -> None:
        self.destination = destination
        self.renditions = renditions
        self.names = renditions.names
        self.state = MultiplexerState.IDLE
        self.written_files: list[Path] = []

    def start(self) -> None:
        """Prepare outputs; must be called once before consume()."""
        self._require(MultiplexerState.IDLE)
        self._start()
        self.state = MultiplexerState.STREAMING

    def consume(self, segment_set: TranscodedSegmentSet) -> None:
        """Write the renditions of one transcoded segment.

        Raises:
            MultiplexError: If the set does not hold one buffer per rendition,
                or writing fails.
        """
        self._require(MultiplexerState.STREAMING)
        if len(segment_set) != len(self.names):
            raise MultiplexError(
                f"Segment {segment_set.seq_no} has {len(segment_set)} renditions, "
                f"expected {len(self.names)}"
            )
        for index, data in enumerate(segment_set.renditions):
            self._consume_rendition(index, segment_set, data)

    def finalize(self) -> list[Path]:
        """Complete all outputs after the last segment.

        Returns:
            All files written by this multiplexer.
        """
        self._require(MultiplexerState.STREAMING)
        try:
            self._finalize()
        except Exception:
            self.state = MultiplexerState.ABORTED
            raise
        self.state = MultiplexerState.FINALIZED
        return list(self.written_files)

    def abort(self) -> None:
        """Release outputs after a failure. Never raises; files are kept."""
        if self.state in (MultiplexerState.FINALIZED, MultiplexerState.ABORTED):
            return
        self.state = MultiplexerState.ABORTED
        self._abort()

    def _require(self, state: MultiplexerState) -> None:
        if self.state is not state:
            raise MultiplexError(
                f"Multiplexer is {self.state.value}, expected {state.value}"
            )

    def _start(self) -> None:
        pass

    @abstractmethod
    def _consume_rendition(
        self, index: int, segment_set: TranscodedSegmentSet, data: bytes
    ) -> None: ...

    @abstractmethod
    def _finalize(self) -> None: ...

    def _abort(self) -> None:
        pass


class ContainerMultiplexer(OutputMultiplexer):
    """Concatenates each rendition's packets into one container file."""

    def __init__(
        self,
        destination: Path,
        renditions: RenditionSet,
        writer_factory: Callable[[Path], ContainerWriter] = ContainerWriter,
        demuxer_factory: Callable[[bytes], SegmentDemuxer] = SegmentDemuxer,
    ) -> None:
        super().__init__(destination, renditions)
        self._writer_factory = writer_factory
        self._demuxer_factory = demuxer_factory
        self.writers: list[ContainerWriter] = []
        self.dst_names = [
            make_dst_name(destination, i, len(self.names))
            for i in range(len(self.names))
        ]

    def _start(self) -> None:
        for dst_name in self.dst_names:
            self.writers.append(self._writer_factory(dst_name))

    def _consume_rendition(
        self, index: int, segment_set: TranscodedSegmentSet, data: bytes
    ) -> None:
        writer = self.writers[index]
        with self._demuxer_factory(data) as demuxer:
            if not writer.header_written:
                try:
                    writer.write_header(demuxer.streams)
                except MultiplexError as e:
                    logger.warning("Write header err=%s", e)
                    raise
            try:
                for position, packet in demuxer.packets():
                    writer.write_packet(position, packet)
            except MultiplexError as e:
                logger.warning("Copy packets media %d err=%s", index, e)
                raise

    def _finalize(self) -> None:
        # Close every writer even if one fails; report the first failure
        first_error: MultiplexError | None = None
        for writer in self.writers:
            try:
                writer.close()
            except MultiplexError as e:
                logger.warning("Failed to close %s: %s", writer.path, e)
                first_error = first_error or e
                continue
            self.written_files.append(writer.path)
        if first_error is not None:
            raise first_error

    def _abort(self) -> None:
        for writer in self.writers:
            try:
                writer.close()
            except MultiplexError as e:
                logger.warning("Failed to close %s: %s", writer.path, e)


@dataclass
class PlaylistRenditionState:
    """Accumulated HLS state for one rendition."""

    bandwidth: int | None = None
    """Frozen after the first segment."""
    segments: list[MediaSegment] = field(default_factory=list)
    files: list[Path] = field(default_factory=list)


class PlaylistMultiplexer(OutputMultiplexer):
    """Builds an HLS package from the raw transcoded segments."""

    def __init__(
        self,
        destination: Path,
        renditions: RenditionSet,
        target_duration: float,
    ) -> None:
        super().__init__(destination, renditions)
        self.target_duration = target_duration
        self.states = [PlaylistRenditionState() for _ in self.names]

    def _consume_rendition(
        self, index: int, segment_set: TranscodedSegmentSet, data: bytes
    ) -> None:
        state = self.states[index]
        file_name = make_segment_file_name(
            self.destination, self.names[index], segment_set.seq_no
        )
        path = add_path_from(self.destination, file_name)
        try:
            path.write_bytes(data)
        except OSError as e:
            raise MultiplexError(f"Write segment file {path}: {e}") from e
        state.files.append(path)
        self.written_files.append(path)

        if state.bandwidth is None:
            state.bandwidth = estimate_bandwidth(len(data), segment_set.duration)
            logger.debug(
                "Rendition %s bandwidth=%s",
                self.names[index],
                format_bitrate(state.bandwidth),
            )
        state.segments.append(
            MediaSegment(
                seq_id=segment_set.seq_no,
                duration=segment_set.duration,
                uri=file_name,
            )
        )

    def build_playlists(self) -> tuple[MasterPlaylist, list[MediaPlaylist]]:
        """Build the master playlist and one media playlist per rendition."""
        master = MasterPlaylist()
        media_playlists: list[MediaPlaylist] = []
        for index, name in enumerate(self.names):
            state = self.states[index]
            playlist_name = make_media_playlist_name(self.destination, name)
            master.append(
                Variant(
                    uri=f"{playlist_name}{self.destination.suffix}",
                    bandwidth=state.bandwidth or 0,
                    name=playlist_name,
                    resolution=self.renditions.resolution(index),
                )
            )
            media = MediaPlaylist(target_duration=self.target_duration)
            for segment in state.segments:
                media.append(segment)
            media_playlists.append(media)
        return master, media_playlists

    def _finalize(self) -> None:
        try:
            master, media_playlists = self.build_playlists()
            self._write_playlist(self.destination, master.encode())
            for name, media in zip(self.names, media_playlists, strict=True):
                self._write_playlist(
                    make_media_playlist_dst_name(self.destination, name),
                    media.encode(),
                )
        except ValueError as e:
            raise PlaylistError(f"Cannot encode playlist: {e}") from e

    def _write_playlist(self, path: Path, text: str) -> None:
        try:
            path.write_text(text, encoding="utf-8")
        except OSError as e:
            raise PlaylistError(f"Write playlist {path}: {e}") from e
        self.written_files.append(path)


def create_multiplexer(
    mode: OutputMode,
    destination: Path,
    renditions: RenditionSet,
    target_duration: float,
) -> OutputMultiplexer:
    """Create the multiplexer for an output mode."""
    if mode is OutputMode.PLAYLIST:
        return PlaylistMultiplexer(destination, renditions, target_duration)
    return ContainerMultiplexer(destination, renditions)
