"""Data types flowing through the transcode pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class OutputMode(Enum):
    """How transcoded renditions are written out."""

    CONTAINER = "container"
    """One container file per rendition (.ts, .mp4, .flv)."""

    PLAYLIST = "playlist"
    """HLS package: master playlist, media playlists and .ts segments."""

    @classmethod
    def from_destination(cls, destination: Path) -> OutputMode:
        """Pick the mode from the destination file extension.

        Raises:
            ValueError: If the extension is not a supported output type.
        """
        ext = destination.suffix.lower()
        if ext == PLAYLIST_EXTENSION:
            return cls.PLAYLIST
        if ext in CONTAINER_EXTENSIONS:
            return cls.CONTAINER
        raise ValueError(f"Unsupported extension {ext!r} for file {destination}")


CONTAINER_EXTENSIONS = frozenset({".ts", ".mp4", ".flv"})
PLAYLIST_EXTENSION = ".m3u8"
INPUT_EXTENSIONS = CONTAINER_EXTENSIONS
OUTPUT_EXTENSIONS = CONTAINER_EXTENSIONS | {PLAYLIST_EXTENSION}


@dataclass(frozen=True)
class InputSegment:
    """One time slice of the input, remuxed as MPEG-TS."""

    seq_no: int
    pts: float
    """Presentation timestamp of the first packet, in seconds."""
    duration: float
    """Segment duration in seconds."""
    data: bytes = field(repr=False)


@dataclass(frozen=True)
class SegmentEnd:
    """Marks normal end of the segment stream."""


@dataclass(frozen=True)
class SegmentFailure:
    """Marks that the segment source stopped on an error."""

    error: BaseException


@dataclass(frozen=True)
class TranscodedSegmentSet:
    """The renditions returned for one input segment.

    `renditions[i]` belongs to rendition `i` of the job's RenditionSet.
    """

    seq_no: int
    duration: float
    renditions: tuple[bytes, ...] = field(repr=False)

    def __post_init__(self) -> None:
        if any(not isinstance(data, bytes) for data in self.renditions):
            raise TypeError("renditions must be bytes")

    def __len__(self) -> int:
        return len(self.renditions)


@dataclass
class JobResult:
    """Outcome of a successful transcode job."""

    written_files: list[Path] = field(default_factory=list)
    segments_processed: int = 0
