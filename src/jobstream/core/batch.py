"""Batch collector: the non-streaming counterpart of StreamSession.

Jobs report through the same emit / close_success / close_failure calls;
the collector keeps everything in memory and hands back one aggregate
response body once the job has finished.
"""

import threading

from .events import FailureSummary, ProgressEvent, SuccessSummary, TerminalSummary, to_payload


class BatchCollector:
    """Accumulates progress events into a single JSON-ready result."""

    def __init__(self):
        self._lock = threading.Lock()
        self._logs: list[dict] = []
        self._summary: TerminalSummary | None = None

    @property
    def is_open(self) -> bool:
        with self._lock:
            return self._summary is None

    @property
    def succeeded(self) -> bool:
        with self._lock:
            return isinstance(self._summary, SuccessSummary)

    def emit(self, event: ProgressEvent) -> None:
        payload = to_payload(event)
        with self._lock:
            if self._summary is None:
                self._logs.append(payload)

    def close_success(self, summary: SuccessSummary) -> bool:
        return self._close(summary)

    def close_failure(self, error: str, duration_ms: float) -> bool:
        return self._close(FailureSummary(error=error, duration_ms=duration_ms))

    def result(self) -> dict:
        """Aggregate response body.

        Same fields as the terminal record minus the ``done`` sentinel, plus
        the collected ``logs``. Raises RuntimeError if the job never closed.
        """
        with self._lock:
            if self._summary is None:
                raise RuntimeError("Batch result requested before the job finished")
            body = to_payload(self._summary)
            body.pop("done", None)
            body["logs"] = list(self._logs)
            return body

    def _close(self, summary: TerminalSummary) -> bool:
        with self._lock:
            if self._summary is not None:
                return False
            self._summary = summary
            return True
