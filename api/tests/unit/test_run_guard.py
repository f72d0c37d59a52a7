"""
Tests unitarios para SyncRunGuard (single-flight por proceso).
"""
import asyncio

import pytest

from app.infrastructure.external.ratings_feed.run_guard import SyncRunGuard
from app.shared.exceptions.sync import SyncInProgressError


@pytest.mark.asyncio
async def test_acquire_marks_running_and_releases():
    guard = SyncRunGuard()
    assert guard.is_running is False

    async with guard.acquire("run-1"):
        assert guard.is_running is True
        assert guard.active_run_id == "run-1"

    assert guard.is_running is False
    assert guard.active_run_id is None


@pytest.mark.asyncio
async def test_second_acquire_is_rejected_not_queued():
    guard = SyncRunGuard()

    async with guard.acquire("run-1"):
        with pytest.raises(SyncInProgressError) as exc_info:
            async with guard.acquire("run-2"):
                pass

    assert exc_info.value.details["active_run_id"] == "run-1"
    assert exc_info.value.error_code == "SYNC_IN_PROGRESS"


@pytest.mark.asyncio
async def test_release_after_error():
    guard = SyncRunGuard()

    with pytest.raises(RuntimeError):
        async with guard.acquire("run-1"):
            raise RuntimeError("fallo en la corrida")

    async with guard.acquire("run-2"):
        assert guard.active_run_id == "run-2"


@pytest.mark.asyncio
async def test_concurrent_tasks_only_one_runs():
    guard = SyncRunGuard()
    started = asyncio.Event()
    finish = asyncio.Event()

    async def long_run():
        async with guard.acquire("larga"):
            started.set()
            await finish.wait()

    task = asyncio.create_task(long_run())
    await started.wait()

    with pytest.raises(SyncInProgressError):
        async with guard.acquire("concurrente"):
            pass

    finish.set()
    await task
    assert guard.is_running is False
