"""Named jobs the HTTP routes and CLI can start."""

from ..core.errors import UnknownJobError
from .base import Job
from .sample import SampleImportJob

JOBS: dict[str, type[Job]] = {
    "sample": SampleImportJob,
}


def get_job(name: str, section: dict) -> Job:
    """Instantiate job ``name`` with its ``[jobs.<name>]`` config section.

    Raises UnknownJobError (a KeyError) listing the registered names.
    """
    try:
        cls = JOBS[name]
    except KeyError:
        raise UnknownJobError(
            f"Unknown job: {name!r}. Available: {', '.join(sorted(JOBS))}"
        ) from None
    return cls(section)


def list_jobs() -> list[str]:
    return sorted(JOBS)


def job_summaries() -> dict[str, str]:
    """Job name -> first line of its class docstring."""
    summaries = {}
    for name in list_jobs():
        doc = (JOBS[name].__doc__ or "").strip()
        summaries[name] = doc.splitlines()[0] if doc else ""
    return summaries
