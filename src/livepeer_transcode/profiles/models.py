"""Rendition profile models.

RenditionProfile mirrors the profile object accepted by the Livepeer API,
so a JSON profile file can be validated directly into it and serialized
back for stream creation.
"""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field, field_validator


def format_gop(seconds: float) -> str:
    """Format a keyframe interval in seconds with 4-decimal precision."""
    return f"{seconds:.4f}"


class RenditionProfile(BaseModel):
    """One output rendition: resolution, bitrate, frame rate and encoder tags."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    name: str = ""
    width: int = Field(default=0, ge=0)
    height: int = Field(default=0, ge=0)
    bitrate: int = Field(default=0, ge=0)
    """Target bitrate in bits per second."""
    fps: int = Field(default=0, ge=0)
    fps_den: int = Field(default=0, ge=0, alias="fpsDen")
    gop: str | None = None
    """Keyframe interval in seconds, as a decimal string ("2.0000")."""
    profile: str | None = None
    """Encoder profile tag, e.g. "H264Baseline"."""

    @field_validator("gop", mode="before")
    @classmethod
    def validate_gop(cls, v: object) -> object:
        """Accept numeric keyframe intervals and normalize them."""
        if isinstance(v, bool):
            raise ValueError("gop must be a number of seconds")
        if isinstance(v, (int, float)):
            return format_gop(float(v))
        return v

    @property
    def resolution(self) -> str | None:
        """Resolution as "WxH", or None when the size is not set."""
        if not self.width and not self.height:
            return None
        return f"{self.width}x{self.height}"

    def to_api(self) -> dict[str, object]:
        """Serialize to the JSON object sent on stream creation."""
        data = self.model_dump(by_alias=True, exclude_none=True)
        if not self.fps_den:
            data.pop("fpsDen", None)
        return data


@dataclass(frozen=True)
class RenditionSet:
    """The renditions requested for a job.

    Either preset names (resolved server-side, sizes unknown locally) or
    explicit profiles. The order is the order the API returns renditions in.
    """

    presets: tuple[str, ...] = ()
    profiles: tuple[RenditionProfile, ...] = ()

    def __post_init__(self) -> None:
        if not self.presets and not self.profiles:
            raise ValueError("RenditionSet requires at least one preset or profile")

    def __len__(self) -> int:
        return len(self.names)

    @property
    def names(self) -> tuple[str, ...]:
        """Rendition names in output order.

        Preset names when presets were requested, otherwise the profile
        names, with "profile_<i>" for unnamed profiles.
        """
        if self.presets:
            return self.presets
        return tuple(
            profile.name or f"profile_{i}" for i, profile in enumerate(self.profiles)
        )

    def resolution(self, index: int) -> str | None:
        """Resolution of rendition `index`, known only for explicit profiles."""
        if self.presets or index >= len(self.profiles):
            return None
        return self.profiles[index].resolution
