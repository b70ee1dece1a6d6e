import asyncio
import logging
from typing import Set

from .errors import JobNotFound
from .models import MAX_PROGRESS
from .registry import JobRegistry

logger = logging.getLogger("jobstatus.driver")


class ProgressDriver:
    """Advances a job's synthetic progress by ``increment`` every ``period`` seconds."""

    def __init__(self, registry: JobRegistry, increment: int = 5, period: float = 2.0):
        self.registry = registry
        self.increment = increment
        self.period = period
        self._tasks: Set[asyncio.Task] = set()

    @property
    def active(self) -> int:
        return len(self._tasks)

    def start(self, job_id: str) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(self._run(job_id), name=f"progress:{job_id}")
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _run(self, job_id: str) -> None:
        value = self.registry.get(job_id)
        if value is None:
            logger.debug("%s gone before start, driver not running", job_id)
            return
        logger.info("%s %s", job_id, value)

        while value < MAX_PROGRESS:
            await asyncio.sleep(self.period)
            value = min(value + self.increment, MAX_PROGRESS)
            try:
                self.registry.set(job_id, value)
            except JobNotFound:
                logger.debug("%s evicted mid-run, driver stopping at %s", job_id, value)
                return
            logger.info("%s %s", job_id, value)

    async def shutdown(self) -> None:
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
            logger.info("cancelled %d progress driver(s)", len(tasks))
