"""Background job runner: drives a Job against a reporter.

The runner owns the terminal record. A job that returns normally produces a
success summary; any exception becomes an error event followed by a failure
summary. Exceptions never escape the runner thread.
"""

import logging
import threading
import time

from ..core.events import EventKind, SuccessSummary, progress_event
from ..jobs.base import Job, Reporter

logger = logging.getLogger(__name__)

STATUS_RUNNING = "running"
STATUS_COMPLETED = "completed"
STATUS_FAILED = "failed"
STATUS_TIMED_OUT = "timed_out"


class JobRunner:
    """Runs one job, in the caller's thread or a daemon thread."""

    def __init__(self, job: Job, reporter: Reporter, timeout_seconds: float = 0):
        self._job = job
        self._reporter = reporter
        self._timeout = timeout_seconds
        self._lock = threading.Lock()
        self._status = STATUS_RUNNING
        self._started_at: float | None = None
        self._thread: threading.Thread | None = None
        self._watchdog: threading.Thread | None = None

    @property
    def status(self) -> str:
        with self._lock:
            return self._status

    def start(self) -> None:
        self._started_at = time.monotonic()
        self._thread = threading.Thread(
            target=self.run, name=f"job-{self._job.name}", daemon=True,
        )
        self._thread.start()
        if self._timeout:
            self._watchdog = threading.Thread(target=self._watch, daemon=True)
            self._watchdog.start()

    def wait(self, timeout: float | None = None) -> bool:
        """Join the job thread (and watchdog). Returns True if the job finished."""
        if self._thread is None:
            return True
        self._thread.join(timeout)
        if self._watchdog is not None:
            self._watchdog.join(timeout)
        return not self._thread.is_alive()

    def run(self) -> None:
        if self._started_at is None:
            self._started_at = time.monotonic()
        name = self._job.name
        logger.info("Job %s started", name)
        try:
            result = self._job.run(self._reporter)
            summary = SuccessSummary(
                imported=result.imported,
                errors=result.errors,
                total=result.total,
                duration_ms=self._elapsed_ms(),
            )
        except Exception as e:
            message = str(e) or type(e).__name__
            logger.error("Job %s failed: %s", name, message)
            self._reporter.emit(progress_event(EventKind.ERROR, message))
            self._reporter.close_failure(message, self._elapsed_ms())
            self._set_status(STATUS_FAILED)
            return

        if not self._reporter.close_success(summary):
            logger.info("Job %s finished after its stream was closed", name)
        else:
            logger.info(
                "Job %s completed: %d imported, %d errors (%d ms)",
                name, summary.imported, summary.errors, summary.duration_ms,
            )
        self._set_status(STATUS_COMPLETED)

    def _watch(self) -> None:
        self._thread.join(self._timeout)
        if not self._thread.is_alive():
            return
        message = f"Job timed out after {self._timeout:g}s"
        logger.error("Job %s: %s", self._job.name, message)
        # The job thread keeps running; its own close becomes a no-op
        if self._reporter.close_failure(message, self._elapsed_ms()):
            self._set_status(STATUS_TIMED_OUT)

    def _set_status(self, status: str) -> None:
        with self._lock:
            if self._status == STATUS_RUNNING:
                self._status = status

    def _elapsed_ms(self) -> int:
        return round((time.monotonic() - self._started_at) * 1000)


def start_job(job: Job, reporter: Reporter, timeout_seconds: float = 0) -> JobRunner:
    """Start ``job`` in a background thread and return its runner."""
    runner = JobRunner(job, reporter, timeout_seconds=timeout_seconds)
    runner.start()
    return runner
