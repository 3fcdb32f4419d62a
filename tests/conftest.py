"""Shared test fixtures."""

import threading

import pytest

from jobstream.core.errors import TransportClosed


class RecordingSink:
    """In-memory sink that records every frame and close call."""

    def __init__(self):
        self._lock = threading.Lock()
        self.frames: list[bytes] = []
        self.closed = 0

    def write(self, frame: bytes) -> None:
        with self._lock:
            self.frames.append(frame)

    def close(self) -> None:
        with self._lock:
            self.closed += 1

    @property
    def wire(self) -> bytes:
        with self._lock:
            return b"".join(self.frames)


class BrokenSink(RecordingSink):
    """Sink whose transport has already gone away."""

    def write(self, frame: bytes) -> None:
        raise TransportClosed("connection reset")


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def broken_sink():
    return BrokenSink()


@pytest.fixture
def sample_config():
    """Fast sample job section: no delays, a handful of records."""
    return {
        "total": 5,
        "fail_every": 0,
        "fail_fatal_at": 0,
        "delay_seconds": 0,
        "endpoint": "sample://test",
    }
