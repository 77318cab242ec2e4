"""Segment dispatch and output multiplexing pipeline."""

from livepeer_transcode.pipeline.job import TranscodeJob, run_transcode
from livepeer_transcode.pipeline.models import (
    InputSegment,
    JobResult,
    OutputMode,
    SegmentEnd,
    SegmentFailure,
    TranscodedSegmentSet,
)
from livepeer_transcode.pipeline.multiplexer import (
    ContainerMultiplexer,
    OutputMultiplexer,
    PlaylistMultiplexer,
    create_multiplexer,
    estimate_bandwidth,
)
from livepeer_transcode.pipeline.segmenter import SegmentSource
from livepeer_transcode.pipeline.session import TranscodeSession

__all__ = [
    "ContainerMultiplexer",
    "InputSegment",
    "JobResult",
    "OutputMode",
    "OutputMultiplexer",
    "PlaylistMultiplexer",
    "SegmentEnd",
    "SegmentFailure",
    "SegmentSource",
    "TranscodeJob",
    "TranscodeSession",
    "TranscodedSegmentSet",
    "create_multiplexer",
    "estimate_bandwidth",
    "run_transcode",
]
