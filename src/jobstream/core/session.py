"""Stream session: owns the outbound channel to one consumer.

The session holds its sink in a single slot guarded by a lock. The slot is
cleared exactly once, by whichever of close_success, close_failure or
cancel gets there first; every later call finds it empty and does nothing.
Jobs may therefore call emit without checking whether anyone is still
listening.
"""

import logging
import threading
from enum import Enum
from typing import Protocol

from .errors import TransportClosed
from .events import FailureSummary, ProgressEvent, SuccessSummary, TerminalSummary, encode

logger = logging.getLogger(__name__)


class Sink(Protocol):
    """Write end of a transport. Both methods must not block."""

    def write(self, frame: bytes) -> None:
        """Queue one encoded frame. Raises TransportClosed if the transport is gone."""

    def close(self) -> None:
        """Signal end of stream."""


class SessionState(str, Enum):
    OPEN = "open"
    CLOSED = "closed"


class StreamSession:
    """Single-consumer progress stream with an open -> closed lifecycle."""

    def __init__(self, sink: Sink):
        self._lock = threading.Lock()
        self._sink: Sink | None = sink
        self._frames_written = 0

    @property
    def state(self) -> SessionState:
        with self._lock:
            return SessionState.OPEN if self._sink is not None else SessionState.CLOSED

    @property
    def is_open(self) -> bool:
        return self.state is SessionState.OPEN

    @property
    def frames_written(self) -> int:
        with self._lock:
            return self._frames_written

    def emit(self, event: ProgressEvent) -> None:
        """Write a progress event; silently dropped once the session is closed."""
        if not isinstance(event, ProgressEvent):
            # terminal records go through close_success / close_failure
            raise TypeError(f"emit expects a ProgressEvent, got {type(event).__name__}")
        frame = encode(event)
        with self._lock:
            if self._sink is None:
                logger.debug("Dropped %s event after close: %s", event.kind.value, event.message)
                return
            self._write(frame)

    def close_success(self, summary: SuccessSummary) -> bool:
        """Write the success terminal record and release the transport.

        Returns True if this call delivered the terminal record, False if
        the session was already closed or the transport died mid-write.
        """
        return self._close(summary)

    def close_failure(self, error: str, duration_ms: float) -> bool:
        """Write the failure terminal record and release the transport."""
        return self._close(FailureSummary(error=error, duration_ms=duration_ms))

    def cancel(self) -> None:
        """Release the transport without writing. Called on consumer disconnect."""
        with self._lock:
            sink, self._sink = self._sink, None
            written = self._frames_written
        if sink is not None:
            logger.debug("Stream cancelled after %d frames", written)
            _close_quietly(sink)

    # ── internals ─────────────────────────────────────────────────

    def _close(self, summary: TerminalSummary) -> bool:
        frame = encode(summary)
        with self._lock:
            if self._sink is None:
                return False
            if not self._write(frame):
                # transport died under the terminal record
                return False
            sink, self._sink = self._sink, None
        _close_quietly(sink)
        logger.debug("Stream closed (success=%s)", isinstance(summary, SuccessSummary))
        return True

    def _write(self, frame: bytes) -> bool:
        """Write under the lock; a dead transport counts as cancellation.

        Returns False if the frame was dropped.
        """
        try:
            self._sink.write(frame)
        except TransportClosed:
            logger.debug("Transport gone; closing session")
            self._sink = None
            return False
        self._frames_written += 1
        return True


def _close_quietly(sink: Sink) -> None:
    try:
        sink.close()
    except TransportClosed:
        pass
