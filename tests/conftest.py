"""Shared test fixtures for livepeer-transcode."""

import os
import shutil
import tempfile
import threading
from collections.abc import Iterator
from pathlib import Path
from unittest.mock import patch

import pytest

from livepeer_transcode.api.models import Stream
from livepeer_transcode.config.loader import clear_config_cache
from livepeer_transcode.exceptions import PushError
from livepeer_transcode.pipeline.models import InputSegment
from livepeer_transcode.pipeline.segmenter import SegmentSource

_LIVEPEER_ENV_VARS = (
    "LIVEPEER_API_KEY",
    "LIVEPEER_API_HOST",
    "LIVEPEER_API_TIMEOUT",
    "LIVEPEER_TRANSCODE_SEGMENT_LENGTH",
    "LIVEPEER_TRANSCODE_QUEUE_SIZE",
    "LIVEPEER_TRANSCODE_LOG_LEVEL",
    "LIVEPEER_TRANSCODE_LOG_FILE",
)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test isolation."""
    dir_path = tempfile.mkdtemp()
    yield Path(dir_path)
    shutil.rmtree(dir_path, ignore_errors=True)


@pytest.fixture(autouse=True)
def isolated_config(temp_dir: Path):
    """Point the config file at an empty temp location for every test.

    Also removes LIVEPEER_* variables from the environment so a developer's
    own API key or config file never leaks into tests.
    """
    config_dir = temp_dir / ".livepeer-transcode"
    config_dir.mkdir(parents=True, exist_ok=True)
    env = {
        key: value
        for key, value in os.environ.items()
        if key not in _LIVEPEER_ENV_VARS
    }
    env["LIVEPEER_TRANSCODE_CONFIG_PATH"] = str(config_dir / "config.toml")
    clear_config_cache()
    with patch.dict(os.environ, env, clear=True):
        yield config_dir
    clear_config_cache()


class FakeTranscodeClient:
    """In-memory stand-in for LivepeerClient.

    Every pushed segment comes back as one buffer per rendition, made of
    the rendition index and the input bytes.
    """

    def __init__(self, rendition_count: int, fail_on_seq: int | None = None):
        self.rendition_count = rendition_count
        self.fail_on_seq = fail_on_seq
        self.created: list[dict] = []
        self.pushed: list[int] = []
        self.deleted: list[str] = []

    def create_stream(self, name, presets=(), profiles=(), record=False):
        self.created.append(
            {"name": name, "presets": tuple(presets), "profiles": tuple(profiles)}
        )
        return Stream(id="stream-1", name=name)

    def push_segment(self, stream_id, seq_no, duration, data):
        self.pushed.append(seq_no)
        if seq_no == self.fail_on_seq:
            raise PushError(f"Segment {seq_no} push failed: status 500", seq_no)
        return [bytes([i]) + data for i in range(self.rendition_count)]

    def delete_stream(self, stream_id):
        self.deleted.append(stream_id)


@pytest.fixture
def fake_client_factory():
    """Return a factory for FakeTranscodeClient instances."""
    return FakeTranscodeClient


def make_segments(count: int, duration: float = 2.0) -> list[InputSegment]:
    """Build `count` consecutive input segments with small payloads."""
    return [
        InputSegment(
            seq_no=i,
            pts=i * duration,
            duration=duration,
            data=f"segment-{i}".encode() * 64,
        )
        for i in range(count)
    ]


class ListSegmentSource(SegmentSource):
    """SegmentSource that replays a fixed list instead of demuxing a file."""

    def __init__(self, segments, error=None, **kwargs):
        super().__init__(Path("input.ts"), 2.0, **kwargs)
        self.segment_list = list(segments)
        self.error = error

    def _segments(self) -> Iterator[InputSegment]:
        yield from self.segment_list
        if self.error is not None:
            raise self.error


@pytest.fixture
def segment_source_factory():
    """Return a builder for job source factories replaying fixed segments."""

    def build(segments, error=None):
        def factory(path, segment_length, queue_size, cancel: threading.Event):
            return ListSegmentSource(
                segments, error, queue_size=queue_size, cancel_event=cancel
            )

        return factory

    return build


@pytest.fixture
def segments():
    """Three two-second input segments."""
    return make_segments(3)


@pytest.fixture
def five_segments():
    """Five two-second input segments."""
    return make_segments(5)


@pytest.fixture(autouse=True)
def skip_cli_logging_setup():
    """Keep CLI invocations from replacing pytest's logging handlers."""
    with patch("livepeer_transcode.cli._logging_configured", True):
        yield
