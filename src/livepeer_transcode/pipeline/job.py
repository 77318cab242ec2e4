"""Transcode job driver.

Runs one input file through the pipeline:

    open session -> [next segment -> push -> consume]* -> finalize -> close

The loop stops at the end of input or on the first error. Teardown (stop
the segmenter, release output writers, delete the remote stream) runs on
every path; teardown problems are logged and never replace the error that
ended the job. Files already written are left in place.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from livepeer_transcode.core.durations import format_duration
from livepeer_transcode.exceptions import TranscodeError
from livepeer_transcode.logging.context import segment_context
from livepeer_transcode.pipeline.models import JobResult, OutputMode
from livepeer_transcode.pipeline.multiplexer import create_multiplexer
from livepeer_transcode.pipeline.segmenter import SegmentSource
from livepeer_transcode.pipeline.session import TranscodeClient, TranscodeSession
from livepeer_transcode.profiles.models import RenditionSet

logger = logging.getLogger(__name__)

SourceFactory = Callable[[Path, float, int, threading.Event], SegmentSource]


@dataclass
class TranscodeJob:
    """Everything needed to transcode one input to one destination."""

    source: Path
    destination: Path
    renditions: RenditionSet
    segment_length: float = 18.0
    queue_size: int = 2
    mode: OutputMode = field(init=False)

    def __post_init__(self) -> None:
        # Raises ValueError for unsupported extensions
        self.mode = OutputMode.from_destination(self.destination)


def _default_source_factory(
    path: Path, segment_length: float, queue_size: int, cancel: threading.Event
) -> SegmentSource:
    return SegmentSource(path, segment_length, queue_size, cancel_event=cancel)


def run_transcode(
    job: TranscodeJob,
    client: TranscodeClient,
    source_factory: SourceFactory = _default_source_factory,
) -> JobResult:
    """Run a transcode job to completion.

    Args:
        job: The job to run.
        client: Remote transcoding API.
        source_factory: Builds the segment source (injected by tests).

    Returns:
        JobResult with the written files.

    Raises:
        SessionError: If the remote stream cannot be created.
        PushError, SegmenterError, MultiplexError, PlaylistError: If the job
            failed while streaming; teardown has run by then.
    """
    result = JobResult()
    session = TranscodeSession(client, job.renditions)
    session.open()

    cancel = threading.Event()
    multiplexer = create_multiplexer(
        job.mode, job.destination, job.renditions, job.segment_length
    )
    source: SegmentSource | None = None
    try:
        multiplexer.start()
        source = source_factory(job.source, job.segment_length, job.queue_size, cancel)
        source.start()

        for segment in source:
            with segment_context(segment.seq_no):
                logger.info(
                    "Got segment seqNo=%d pts=%s dur=%s data len bytes=%d",
                    segment.seq_no,
                    format_duration(segment.pts),
                    format_duration(segment.duration),
                    len(segment.data),
                )
                transcoded = session.push(segment)
                multiplexer.consume(transcoded)
            result.segments_processed += 1

        result.written_files = multiplexer.finalize()
    except TranscodeError as e:
        logger.warning(
            "Transcode stopped after %d segment(s): %s", result.segments_processed, e
        )
        raise
    finally:
        cancel.set()
        if source is not None:
            source.stop()
        multiplexer.abort()
        session.close()

    logger.info(
        "Transcoded %d segment(s) into %d file(s)",
        result.segments_processed,
        len(result.written_files),
    )
    return result
