"""Segment context for structured logging.

Uses contextvars so that log records emitted while a segment is pushed and
written automatically carry the segment sequence number.
"""

from __future__ import annotations

import contextvars
import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Generator

_seq_no: contextvars.ContextVar[int | None] = contextvars.ContextVar(
    "seq_no", default=None
)


@contextmanager
def segment_context(seq_no: int) -> Generator[None, None, None]:
    """Context manager marking the segment currently being processed.

    Example:
        with segment_context(3):
            logger.info("Pushing segment")  # "[S0003] ..." in text logs
    """
    token = _seq_no.set(seq_no)
    try:
        yield
    finally:
        _seq_no.reset(token)


def get_segment_context() -> int | None:
    """Get the sequence number of the segment being processed, if any."""
    return _seq_no.get()


class SegmentContextFilter(logging.Filter):
    """Logging filter that injects segment context into log records.

    Adds a raw seq_no attribute for JSON output and a compact segment_tag
    such as "[S0003] " for text output.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        seq_no = get_segment_context()
        record.seq_no = seq_no
        record.segment_tag = f"[S{seq_no:04d}] " if seq_no is not None else ""
        return True  # Never filter out records
