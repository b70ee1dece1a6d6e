# jobstatus/routers/jobs.py
import asyncio
import logging

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from pydantic import BaseModel

from jobstatus.config import Settings
from jobstatus.core.driver import ProgressDriver
from jobstatus.core.errors import JobNotFound
from jobstatus.core.models import MAX_PROGRESS, JobState, new_job_id
from jobstatus.core.registry import JobRegistry
from jobstatus.services.status import check_status, require_job_id, wait_for_completion

logger = logging.getLogger("jobstatus.jobs")

router = APIRouter(tags=["jobs"])


class SubmitOut(BaseModel):
    job_id: str


class StatusOut(BaseModel):
    job_id: str
    progress: int
    state: JobState


def get_registry(request: Request) -> JobRegistry:
    return request.app.state.registry


def get_driver(request: Request) -> ProgressDriver:
    return request.app.state.driver


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def _framed(value) -> str:
    # legacy body shape: value wrapped in blank lines
    return f"\n\n{value}\n\n"


def _status_response(settings: Settings, job_id: str, progress: int, status_code: int = 200):
    if settings.RESPONSE_FORMAT == "text":
        return PlainTextResponse(_framed(progress), status_code=status_code)
    state = JobState.complete if progress >= MAX_PROGRESS else JobState.running
    payload = StatusOut(job_id=job_id, progress=progress, state=state)
    if status_code != status.HTTP_200_OK:
        return JSONResponse(payload.model_dump(mode="json"), status_code=status_code)
    return payload


@router.post("/submit", status_code=status.HTTP_201_CREATED, response_model=SubmitOut)
async def submit(
    registry: JobRegistry = Depends(get_registry),
    driver: ProgressDriver = Depends(get_driver),
    settings: Settings = Depends(get_app_settings),
):
    logger.info("POST /submit received")
    job = registry.create(new_job_id())
    driver.start(job.id)

    if settings.RESPONSE_FORMAT == "text":
        return PlainTextResponse(_framed(job.id), status_code=status.HTTP_201_CREATED)
    return SubmitOut(job_id=job.id)


async def _client_gone(request: Request) -> None:
    """Returns once the server reports ``http.disconnect`` for this request."""
    while True:
        message = await request.receive()
        if message["type"] == "http.disconnect":
            return


@router.get("/checkStatus", response_model=StatusOut)
async def get_status(
    request: Request,
    jobId: str | None = Query(default=None),
    wait: bool | None = Query(default=None, description="Long-poll until the job completes"),
    registry: JobRegistry = Depends(get_registry),
    settings: Settings = Depends(get_app_settings),
):
    """
    Progress of one job, immediately or (``wait=true``) once it completes.

    A missing or blank ``jobId`` is a 400 here; the legacy long-poll server
    answered 404 for it, same as for an unknown id.
    """
    job_id = require_job_id(jobId)
    long_poll = settings.STATUS_MODE == "long-poll" if wait is None else wait

    # unknown ids fail here, before any waiting
    progress = check_status(registry, job_id)
    if not long_poll:
        logger.info("Checking status for: %s Current value: %s", job_id, progress)
        return _status_response(settings, job_id, progress)

    waiting = asyncio.ensure_future(wait_for_completion(
        registry,
        job_id,
        poll_interval=settings.poll_interval,
        timeout=settings.long_poll_timeout,
    ))
    watcher = asyncio.ensure_future(_client_gone(request))
    try:
        await asyncio.wait({waiting, watcher}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        for task in (waiting, watcher):
            task.cancel()
        await asyncio.gather(waiting, watcher, return_exceptions=True)

    if waiting.cancelled():
        # driver is untouched; nobody is left to answer
        logger.info("client disconnected during long-poll job=%s", job_id)
        return Response(status_code=499)

    progress = waiting.result()
    if progress < MAX_PROGRESS:
        # timed out; tell the client to come back
        return _status_response(settings, job_id, progress, status_code=status.HTTP_202_ACCEPTED)
    return _status_response(settings, job_id, progress)


@router.get("/jobs/{job_id}")
async def get_job(job_id: str, registry: JobRegistry = Depends(get_registry)):
    job = registry.lookup(job_id)
    if job is None:
        raise JobNotFound(job_id)
    return job.to_api()
