"""HLS master and media playlists.

Only the subset of the format this tool produces is modelled: version 3
video-on-demand media playlists and master playlists of stream variants.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

HLS_VERSION = 3


def _quote(value: str) -> str:
    """Quoted-string attribute value; double quotes are not allowed inside."""
    if '"' in value or "\n" in value or "\r" in value:
        raise ValueError(f"Invalid quoted-string attribute value: {value!r}")
    return f'"{value}"'


@dataclass(frozen=True)
class MediaSegment:
    """One entry of a media playlist."""

    seq_id: int
    duration: float
    """Segment duration in seconds."""
    uri: str


@dataclass
class MediaPlaylist:
    """A video-on-demand media playlist for one rendition."""

    target_duration: float
    segments: list[MediaSegment] = field(default_factory=list)

    def append(self, segment: MediaSegment) -> None:
        """Append a segment; sequence ids must increase by one."""
        if self.segments and segment.seq_id != self.segments[-1].seq_id + 1:
            raise ValueError(
                f"Segment {segment.seq_id} does not follow "
                f"{self.segments[-1].seq_id}"
            )
        self.segments.append(segment)

    @property
    def media_sequence(self) -> int:
        return self.segments[0].seq_id if self.segments else 0

    def encode(self) -> str:
        """Render the playlist text."""
        lines = [
            "#EXTM3U",
            f"#EXT-X-VERSION:{HLS_VERSION}",
            f"#EXT-X-MEDIA-SEQUENCE:{self.media_sequence}",
            "#EXT-X-PLAYLIST-TYPE:VOD",
            f"#EXT-X-TARGETDURATION:{math.ceil(self.target_duration)}",
        ]
        for segment in self.segments:
            lines.append(f"#EXTINF:{segment.duration:.3f},")
            lines.append(segment.uri)
        lines.append("#EXT-X-ENDLIST")
        return "\n".join(lines) + "\n"


@dataclass(frozen=True)
class Variant:
    """A stream variant entry of a master playlist."""

    uri: str
    bandwidth: int
    name: str | None = None
    resolution: str | None = None

    def encode(self) -> list[str]:
        attrs = ["PROGRAM-ID=0", f"BANDWIDTH={self.bandwidth}"]
        if self.resolution:
            attrs.append(f"RESOLUTION={self.resolution}")
        if self.name:
            attrs.append(f"NAME={_quote(self.name)}")
        return [f"#EXT-X-STREAM-INF:{','.join(attrs)}", self.uri]


@dataclass
class MasterPlaylist:
    """A master playlist listing one variant per rendition."""

    variants: list[Variant] = field(default_factory=list)

    def append(self, variant: Variant) -> None:
        self.variants.append(variant)

    def encode(self) -> str:
        """Render the playlist text."""
        lines = ["#EXTM3U", f"#EXT-X-VERSION:{HLS_VERSION}"]
        for variant in self.variants:
            lines.extend(variant.encode())
        return "\n".join(lines) + "\n"
