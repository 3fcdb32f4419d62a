"""Progress event protocol: typed records and their SSE wire encoding.

A stream is zero or more ProgressEvents followed by exactly one terminal
summary (SuccessSummary or FailureSummary). Only the terminal record
carries ``done: true``.
"""

import json
import math
from dataclasses import dataclass
from enum import Enum
from numbers import Real

from .constants import (
    DONE_KEY,
    FRAME_PREFIX,
    FRAME_TERMINATOR,
    KIND_ERROR,
    KIND_INFO,
    KIND_PROGRESS,
    KIND_SUCCESS,
    KIND_WARNING,
)
from .errors import EventValidationError


class EventKind(str, Enum):
    INFO = KIND_INFO
    SUCCESS = KIND_SUCCESS
    ERROR = KIND_ERROR
    WARNING = KIND_WARNING
    PROGRESS = KIND_PROGRESS


def _check_count(name: str, value) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise EventValidationError(f"{name} must be a non-negative integer, got {value!r}")


def _check_duration(name: str, value) -> None:
    # NaN and infinity have no JSON representation
    if (
        isinstance(value, bool)
        or not isinstance(value, Real)
        or not math.isfinite(value)
        or value < 0
    ):
        raise EventValidationError(f"{name} must be a finite non-negative number, got {value!r}")


def _check_text(name: str, value) -> None:
    if value is not None and not isinstance(value, str):
        raise EventValidationError(f"{name} must be a string, got {type(value).__name__}")


@dataclass(frozen=True)
class ProgressCount:
    """Position within a job: ``current`` of ``total`` records."""
    current: int
    total: int

    def __post_init__(self):
        _check_count("progress.current", self.current)
        _check_count("progress.total", self.total)


@dataclass(frozen=True)
class EventDetails:
    """Optional structured payload attached to a ProgressEvent."""
    endpoint: str | None = None
    record_id: str | None = None
    record_name: str | None = None
    progress: ProgressCount | None = None
    duration_ms: float | None = None
    error: str | None = None

    def __post_init__(self):
        _check_text("details.endpoint", self.endpoint)
        _check_text("details.recordId", self.record_id)
        _check_text("details.recordName", self.record_name)
        _check_text("details.error", self.error)
        if self.duration_ms is not None:
            _check_duration("details.durationMs", self.duration_ms)
        if self.progress is not None and not isinstance(self.progress, ProgressCount):
            raise EventValidationError(
                f"details.progress must be a ProgressCount, got {type(self.progress).__name__}"
            )

    def to_payload(self) -> dict:
        """Wire form: camelCase keys, absent fields omitted."""
        payload = {}
        if self.endpoint is not None:
            payload["endpoint"] = self.endpoint
        if self.record_id is not None:
            payload["recordId"] = self.record_id
        if self.record_name is not None:
            payload["recordName"] = self.record_name
        if self.progress is not None:
            payload["progress"] = {"current": self.progress.current, "total": self.progress.total}
        if self.duration_ms is not None:
            payload["durationMs"] = self.duration_ms
        if self.error is not None:
            payload["error"] = self.error
        return payload


@dataclass(frozen=True)
class ProgressEvent:
    """One non-terminal record: a log line, progress tick, or sub-unit outcome."""
    kind: EventKind
    message: str
    details: EventDetails | None = None

    def __post_init__(self):
        try:
            kind = EventKind(self.kind)
        except ValueError:
            allowed = ", ".join(k.value for k in EventKind)
            raise EventValidationError(
                f"Unknown event kind: {self.kind!r}. Allowed: {allowed}"
            ) from None
        # frozen: bypass __setattr__ to normalise plain strings to the enum
        object.__setattr__(self, "kind", kind)
        if not isinstance(self.message, str) or not self.message:
            raise EventValidationError("message must be a non-empty string")
        if self.details is not None and not isinstance(self.details, EventDetails):
            raise EventValidationError(
                f"details must be EventDetails, got {type(self.details).__name__}"
            )


@dataclass(frozen=True)
class SuccessSummary:
    """Terminal record for a job that ran to completion."""
    imported: int
    errors: int
    total: int
    duration_ms: float

    def __post_init__(self):
        _check_count("imported", self.imported)
        _check_count("errors", self.errors)
        _check_count("total", self.total)
        _check_duration("durationMs", self.duration_ms)


@dataclass(frozen=True)
class FailureSummary:
    """Terminal record for a job that could not continue."""
    error: str
    duration_ms: float

    def __post_init__(self):
        if not isinstance(self.error, str):
            raise EventValidationError("error must be a string")
        _check_duration("durationMs", self.duration_ms)


TerminalSummary = SuccessSummary | FailureSummary
Record = ProgressEvent | SuccessSummary | FailureSummary


def progress_event(kind, message: str, **details) -> ProgressEvent:
    """Build a ProgressEvent, wrapping keyword details into EventDetails.

    ``progress`` may be given as a ProgressCount or a ``(current, total)``
    tuple.
    """
    if not details:
        return ProgressEvent(kind, message)
    progress = details.get("progress")
    if isinstance(progress, tuple):
        details["progress"] = ProgressCount(*progress)
    return ProgressEvent(kind, message, EventDetails(**details))


def to_payload(record: Record) -> dict:
    """Map any record to its JSON-ready dict."""
    if isinstance(record, ProgressEvent):
        payload = {"kind": record.kind.value, "message": record.message}
        if record.details is not None:
            details = record.details.to_payload()
            if details:
                payload["details"] = details
        return payload
    if isinstance(record, SuccessSummary):
        return {
            "success": True,
            "imported": record.imported,
            "errors": record.errors,
            "total": record.total,
            "durationMs": record.duration_ms,
            DONE_KEY: True,
        }
    if isinstance(record, FailureSummary):
        return {
            "success": False,
            "error": record.error,
            "durationMs": record.duration_ms,
            DONE_KEY: True,
        }
    raise TypeError(f"Not a stream record: {type(record).__name__}")


def encode(record: Record) -> bytes:
    """Encode a record as one SSE frame: ``data: <json>\\n\\n``.

    json.dumps escapes control characters, so the frame body never holds a
    raw newline and the blank line is an unambiguous delimiter.
    """
    body = json.dumps(to_payload(record), separators=(",", ":"), ensure_ascii=False)
    return FRAME_PREFIX + body.encode("utf-8") + FRAME_TERMINATOR
