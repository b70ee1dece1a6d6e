import asyncio
import time

import pytest

from jobstatus.core.driver import ProgressDriver
from jobstatus.core.errors import InvalidRequest, JobNotFound
from jobstatus.core.registry import JobRegistry
from jobstatus.services.status import check_status, require_job_id, wait_for_completion


@pytest.fixture
def registry():
    return JobRegistry()


@pytest.mark.parametrize("raw", [None, "", "   "])
def test_require_job_id_rejects_blank(raw):
    with pytest.raises(InvalidRequest):
        require_job_id(raw)


def test_require_job_id_strips():
    assert require_job_id("  job:a ") == "job:a"


def test_check_status_known_and_unknown(registry):
    registry.create("job:a")
    registry.set("job:a", 15)
    assert check_status(registry, "job:a") == 15
    with pytest.raises(JobNotFound):
        check_status(registry, "job:missing")


@pytest.mark.asyncio
async def test_long_poll_unknown_job_fails_without_waiting(registry):
    start = time.perf_counter()
    with pytest.raises(JobNotFound):
        await wait_for_completion(registry, "job:missing", poll_interval=5)
    assert time.perf_counter() - start < 1


@pytest.mark.asyncio
async def test_long_poll_returns_after_final_tick(registry):
    registry.create("job:a")
    driver = ProgressDriver(registry, increment=5, period=0.005)
    task = driver.start("job:a")

    result = await wait_for_completion(registry, "job:a", poll_interval=5)

    assert result == 100
    assert registry.get("job:a") == 100
    await task


@pytest.mark.asyncio
async def test_long_poll_falls_back_to_polling(registry):
    registry.create("job:a")

    async def silent_complete():
        # bypass the wake-up to exercise the re-sample path
        await asyncio.sleep(0.02)
        registry.lookup("job:a").progress = 100

    task = asyncio.create_task(silent_complete())
    result = await asyncio.wait_for(
        wait_for_completion(registry, "job:a", poll_interval=0.01), timeout=1
    )
    await task
    assert result == 100


@pytest.mark.asyncio
async def test_long_poll_timeout_returns_current_progress(registry):
    registry.create("job:a")
    registry.set("job:a", 25)

    result = await wait_for_completion(registry, "job:a", poll_interval=0.01, timeout=0.05)

    assert result == 25


@pytest.mark.asyncio
async def test_cancelled_long_poll_leaves_driver_running(registry):
    registry.create("job:a")
    driver = ProgressDriver(registry, increment=5, period=0.005)
    drive = driver.start("job:a")

    poll = asyncio.create_task(wait_for_completion(registry, "job:a", poll_interval=5))
    await asyncio.sleep(0.02)
    poll.cancel()
    with pytest.raises(asyncio.CancelledError):
        await poll

    await asyncio.wait_for(drive, timeout=2)
    assert registry.get("job:a") == 100
