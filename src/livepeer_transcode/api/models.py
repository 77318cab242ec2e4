"""Livepeer API response models."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Stream:
    """Stream object returned by the API (subset of fields)."""

    id: str
    name: str
    stream_key: str | None = None
    playback_id: str | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Stream:
        """Build from the JSON object returned by POST /api/stream."""
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            stream_key=data.get("streamKey") or None,
            playback_id=data.get("playbackId") or None,
        )
