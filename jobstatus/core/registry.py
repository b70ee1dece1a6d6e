import asyncio
import logging
import time
from typing import Dict, Optional

from .errors import JobAlreadyExists, JobNotFound, RegistryFull
from .models import Job, MAX_PROGRESS, MIN_PROGRESS

logger = logging.getLogger("jobstatus.registry")


class JobRegistry:
    """
    In-memory store of job progress, shared by the driver and the status routes.

    All access happens on the event loop thread, so there is no locking. Each job
    has exactly one writer (its progress driver); readers never mutate.
    Completed jobs are dropped once they are older than ``ttl`` seconds, and the
    registry never holds more than ``max_jobs`` entries.
    """

    def __init__(self, ttl: float = 300.0, max_jobs: int = 10000):
        self.ttl = ttl
        self.max_jobs = max_jobs
        self._jobs: Dict[str, Job] = {}
        # replaced after every write so each waiter sees exactly one wake-up
        self._changed: Dict[str, asyncio.Event] = {}

    def __len__(self) -> int:
        return len(self._jobs)

    def __contains__(self, job_id: object) -> bool:
        return job_id in self._jobs

    def create(self, job_id: str) -> Job:
        if job_id in self._jobs:
            raise JobAlreadyExists(job_id)
        if len(self._jobs) >= self.max_jobs:
            self._make_room()

        job = Job(id=job_id)
        self._jobs[job_id] = job
        self._changed[job_id] = asyncio.Event()
        return job

    def get(self, job_id: str) -> Optional[int]:
        job = self._jobs.get(job_id)
        return job.progress if job else None

    def lookup(self, job_id: str) -> Optional[Job]:
        return self._jobs.get(job_id)

    def set(self, job_id: str, value: int) -> None:
        job = self._jobs.get(job_id)
        if job is None:
            raise JobNotFound(job_id)

        value = max(MIN_PROGRESS, min(MAX_PROGRESS, int(value)))
        if value < job.progress:
            raise ValueError(f"progress for {job_id} cannot go back from {job.progress} to {value}")
        if job.is_complete:
            return

        job.progress = value
        if job.is_complete:
            job.completed_at = time.time()
        self._notify(job_id)

    async def wait_for_change(self, job_id: str, timeout: Optional[float] = None) -> None:
        """Suspend until the next write to ``job_id`` or until ``timeout`` elapses."""
        event = self._changed.get(job_id)
        if event is None:
            raise JobNotFound(job_id)
        try:
            await asyncio.wait_for(event.wait(), timeout)
        except asyncio.TimeoutError:
            pass

    def sweep(self, now: Optional[float] = None) -> int:
        now = time.time() if now is None else now
        expired = [
            job_id for job_id, job in self._jobs.items()
            if job.completed_at is not None and now - job.completed_at >= self.ttl
        ]
        for job_id in expired:
            self._evict(job_id)
        if expired:
            logger.info("evicted %d expired job(s), %d remaining", len(expired), len(self._jobs))
        return len(expired)

    def _make_room(self) -> None:
        self.sweep()
        if len(self._jobs) < self.max_jobs:
            return

        completed = sorted(
            (job for job in self._jobs.values() if job.completed_at is not None),
            key=lambda j: j.completed_at,
        )
        overflow = len(self._jobs) - self.max_jobs + 1
        for job in completed[:overflow]:
            self._evict(job.id)
        if len(self._jobs) >= self.max_jobs:
            logger.warning("registry full: %d running jobs", len(self._jobs))
            raise RegistryFull(self.max_jobs)

    def _evict(self, job_id: str) -> None:
        self._jobs.pop(job_id, None)
        event = self._changed.pop(job_id, None)
        if event is not None:
            event.set()

    def _notify(self, job_id: str) -> None:
        event = self._changed.get(job_id)
        if event is not None:
            event.set()
        self._changed[job_id] = asyncio.Event()
