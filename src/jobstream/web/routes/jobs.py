"""Job execution routes: SSE progress streaming or a single batch response."""

import asyncio
import logging

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import JSONResponse

from ...core.batch import BatchCollector
from ...core.config import job_config
from ...core.constants import STREAM_QUERY_PARAM
from ...core.errors import UnknownJobError
from ...jobs.registry import get_job, list_jobs
from ..negotiation import wants_streaming
from ..runner import start_job
from ..stream import create_sse_stream

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/jobs", tags=["jobs"])


@router.get("")
async def list_all_jobs():
    """List registered job names."""
    return {"jobs": list_jobs()}


@router.post("/{job_name}/run")
async def run_job(request: Request, job_name: str):
    """Run a job. ``?stream=true`` returns an SSE stream, otherwise JSON.

    Any other query parameter overrides the job's config section for this
    run (e.g. ``?total=50``).
    """
    config = request.app.state.config
    section = job_config(config, job_name)
    section.update(_query_overrides(request))
    try:
        job = get_job(job_name, section)
    except UnknownJobError as e:
        raise HTTPException(status_code=404, detail=str(e))

    timeout = config.get("jobs", {}).get("timeout_seconds", 0)

    if wants_streaming(request):
        stream = create_sse_stream(
            ping_seconds=config.get("stream", {}).get("ping_seconds", 15),
        )
        start_job(job, stream.session, timeout_seconds=timeout)
        logger.info("Streaming job %s", job_name)
        return stream.response()

    collector = BatchCollector()
    runner = start_job(job, collector, timeout_seconds=timeout)
    await asyncio.to_thread(runner.wait, timeout or None)
    status = 200 if collector.succeeded else 400
    return JSONResponse(collector.result(), status_code=status)


def _query_overrides(request: Request) -> dict:
    """Query parameters (minus the stream flag) as typed config values."""
    return {
        key: _coerce(value)
        for key, value in request.query_params.items()
        if key != STREAM_QUERY_PARAM
    }


def _coerce(value: str):
    """Convert query string values to int / float where they parse."""
    for cast in (int, float):
        try:
            return cast(value)
        except ValueError:
            pass
    return value
