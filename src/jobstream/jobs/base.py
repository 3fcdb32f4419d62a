"""Abstract job interface for anything that reports progress to a stream."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Protocol

from ..core.events import ProgressEvent, SuccessSummary


class Reporter(Protocol):
    """What a job reports into: a StreamSession or a BatchCollector."""

    @property
    def is_open(self) -> bool: ...

    def emit(self, event: ProgressEvent) -> None: ...

    def close_success(self, summary: SuccessSummary) -> bool: ...

    def close_failure(self, error: str, duration_ms: float) -> bool: ...


@dataclass
class JobResult:
    """Counts returned by a job that ran to completion."""
    imported: int = 0
    errors: int = 0
    total: int = 0


class Job(ABC):
    """Abstract base for import / sync jobs."""

    def __init__(self, config: dict):
        self.config = config

    @property
    @abstractmethod
    def name(self) -> str:
        """Short identifier for this job."""

    @abstractmethod
    def run(self, reporter: Reporter) -> JobResult:
        """Do the work, emitting progress events into ``reporter``.

        Must not call close_success / close_failure; the runner owns the
        terminal record. Raise to abort the job with a failure summary.
        """
