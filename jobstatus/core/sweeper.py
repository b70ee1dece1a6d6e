import asyncio
import logging
from typing import Optional

from .registry import JobRegistry

logger = logging.getLogger("jobstatus.sweeper")


class Sweeper:
    """Periodically drops completed jobs whose TTL has run out."""

    def __init__(self, registry: JobRegistry, interval: float = 30.0):
        self.registry = registry
        self.interval = interval
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._loop(), name="registry-sweeper")

    async def _loop(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            self.registry.sweep()

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
