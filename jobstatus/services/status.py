# jobstatus/services/status.py
import asyncio
import logging
from typing import Optional

from jobstatus.core.errors import InvalidRequest, JobNotFound
from jobstatus.core.models import MAX_PROGRESS
from jobstatus.core.registry import JobRegistry

logger = logging.getLogger("jobstatus.status")


def require_job_id(job_id: Optional[str]) -> str:
    job_id = (job_id or "").strip()
    if not job_id:
        raise InvalidRequest("Missing required query parameter 'jobId'")
    return job_id


def check_status(registry: JobRegistry, job_id: str) -> int:
    """Current progress, without waiting."""
    progress = registry.get(job_id)
    if progress is None:
        raise JobNotFound(job_id)
    return progress


async def wait_for_completion(
    registry: JobRegistry,
    job_id: str,
    poll_interval: float = 1.0,
    timeout: Optional[float] = None,
) -> int:
    """
    Long-poll: suspend this request until the job reaches MAX_PROGRESS.

    Unknown ids fail before any waiting. Writes from the progress driver wake
    the wait early; otherwise the registry is re-sampled every ``poll_interval``
    seconds. With a ``timeout`` the current (incomplete) progress is returned
    once it elapses; callers compare against MAX_PROGRESS.

    Cancellation (client went away) only ends this wait; the driver keeps going.
    """
    progress = check_status(registry, job_id)
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout if timeout else None

    while progress < MAX_PROGRESS:
        wait = poll_interval
        if deadline is not None:
            remaining = deadline - loop.time()
            if remaining <= 0:
                logger.info("long-poll timed out job=%s progress=%s", job_id, progress)
                return progress
            wait = min(wait, remaining)

        await registry.wait_for_change(job_id, wait)
        progress = check_status(registry, job_id)

    return progress
