"""Exception hierarchy for livepeer-transcode.

Errors fall in two groups. Configuration and profile errors are raised
while arguments are resolved, before any remote call or file write.
Session, push, multiplex and playlist errors are raised once a job is
streaming; they abort the remaining segments but never skip teardown.
"""


class TranscodeError(Exception):
    """Base class for all livepeer-transcode errors."""


class ConfigurationError(TranscodeError):
    """Invalid or conflicting command-line input."""


class ProfileError(TranscodeError):
    """A rendition profile could not be built from user input."""


class UnknownPreset(ProfileError):
    """Preset name is not in the known preset table."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown preset name: {name!r}")


class InvalidResolution(ProfileError):
    """Resolution is not of the form <width>x<height>."""

    def __init__(self, value: str) -> None:
        self.value = value
        super().__init__(f"InvalidResolution: {value!r} (expected e.g. 1280x720)")


class MissingBitrate(ProfileError):
    """Bitrate was not supplied for a profile built from parameters."""

    def __init__(self) -> None:
        super().__init__("Should also specify bitrate")


class InvalidFrameRate(ProfileError):
    """Frame rate is not <num> or <num>/<den> with unsigned integers."""

    def __init__(self, value: str) -> None:
        self.value = value
        super().__init__(f"Error parsing fps {value!r}")


class InvalidH264Profile(ProfileError):
    """H.264 profile token is not one of the supported names."""

    def __init__(self, value: str) -> None:
        self.value = value
        super().__init__(f"InvalidH264Profile: {value!r} (use baseline, main or high)")


class ProfileParseError(ProfileError):
    """JSON profile file could not be read or parsed."""

    def __init__(self, path: object, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Error parsing file {path}: {reason}")


class SessionError(TranscodeError):
    """Remote stream could not be created or deleted."""


class PushError(TranscodeError):
    """A segment could not be submitted or its renditions were not returned."""

    def __init__(self, message: str, seq_no: int | None = None) -> None:
        self.seq_no = seq_no
        super().__init__(message)


class SegmenterError(TranscodeError):
    """The input file could not be split into segments."""


class MultiplexError(TranscodeError):
    """Transcoded output could not be demuxed, muxed or written."""


class PlaylistError(TranscodeError):
    """HLS playlists could not be encoded or written."""
