"""Sample import job: simulates a bulk record import.

Useful for exercising the streaming transport end to end without any
external data source.
"""

import logging
import time

from ..core.events import EventKind, progress_event
from .base import Job, JobResult, Reporter

logger = logging.getLogger(__name__)


class SampleImportJob(Job):
    """Imports ``total`` synthetic records, failing some on request.

    Config keys (``[jobs.sample]``):
        total: number of records
        fail_every: every Nth record fails with a per-record error (0 = never)
        fail_fatal_at: abort the whole job at this record (0 = never)
        delay_seconds: pause between records
        endpoint: reported as the data source
    """

    @property
    def name(self) -> str:
        return "sample"

    def run(self, reporter: Reporter) -> JobResult:
        total = int(self.config.get("total", 20))
        fail_every = int(self.config.get("fail_every", 0))
        fail_fatal_at = int(self.config.get("fail_fatal_at", 0))
        delay = float(self.config.get("delay_seconds", 0.0))
        endpoint = self.config.get("endpoint", "sample://records")

        reporter.emit(progress_event(
            EventKind.INFO, "Starting sample import...", endpoint=endpoint,
        ))
        reporter.emit(progress_event(EventKind.INFO, f"Received {total} records from source"))

        imported = 0
        errors = 0
        t0 = time.monotonic()
        for i in range(1, total + 1):
            record_id = str(i)
            record_name = f"record-{i:04d}"
            reporter.emit(progress_event(
                EventKind.PROGRESS, f"Processing: {record_name}",
                record_id=record_id, record_name=record_name, progress=(i, total),
            ))

            if fail_fatal_at and i == fail_fatal_at:
                raise RuntimeError(f"Source became unavailable at {record_name}")

            if fail_every and i % fail_every == 0:
                message = f"Validation failed for {record_name}"
                reporter.emit(progress_event(
                    EventKind.ERROR, f"Error updating {record_name}: {message}",
                    record_id=record_id, record_name=record_name, error=message,
                ))
                errors += 1
            else:
                imported += 1

            if delay:
                time.sleep(delay)

        elapsed_ms = round((time.monotonic() - t0) * 1000)
        reporter.emit(progress_event(
            EventKind.SUCCESS,
            f"Completed: {imported} records imported, {errors} errors ({elapsed_ms / 1000:.1f}s)",
            duration_ms=elapsed_ms,
        ))
        if not reporter.is_open:
            logger.info("Sample job finished with no consumer attached")
        return JobResult(imported=imported, errors=errors, total=total)
