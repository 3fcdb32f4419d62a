"""Exception hierarchy for jobstream."""


class JobstreamError(Exception):
    """Base class for all jobstream errors."""


class EventValidationError(JobstreamError, ValueError):
    """A progress event or terminal summary violates its shape constraints."""


class TransportClosed(JobstreamError):
    """Raised by a sink when the underlying transport is gone.

    The stream session treats this as consumer cancellation; it never
    reaches the job.
    """


class UnknownJobError(JobstreamError, KeyError):
    """No job is registered under the requested name."""

    def __str__(self) -> str:
        # KeyError repr-quotes its argument
        return str(self.args[0]) if self.args else ""


class StreamParseError(JobstreamError, ValueError):
    """A data frame in an event stream could not be decoded."""
