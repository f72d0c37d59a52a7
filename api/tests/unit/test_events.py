"""
Tests unitarios para el scheduler de sincronizacion (app.core.events).
"""
from unittest.mock import AsyncMock, Mock, patch

import pytest

from app.core import events
from app.shared.exceptions.sync import SyncInProgressError


def test_scheduler_disabled_by_default(monkeypatch):
    monkeypatch.setattr(events.settings, "SYNC_INTERVAL_MINUTES", 0)

    assert events._build_scheduler() is None


def test_scheduler_registers_single_instance_job(monkeypatch):
    monkeypatch.setattr(events.settings, "SYNC_INTERVAL_MINUTES", 15)

    scheduler = events._build_scheduler()
    job = scheduler.get_job(events.SCHEDULED_SYNC_JOB_ID)

    assert job is not None
    assert job.max_instances == 1
    assert job.coalesce is True
    assert job.trigger.interval.total_seconds() == 15 * 60


@pytest.mark.asyncio
async def test_scheduled_sync_skips_when_run_in_progress():
    orchestrator = Mock()
    orchestrator.run = AsyncMock(side_effect=SyncInProgressError("otra"))

    with patch.object(events, "build_from_settings", return_value=orchestrator):
        await events.run_scheduled_sync()

    orchestrator.run.assert_awaited_once()


@pytest.mark.asyncio
async def test_scheduled_sync_logs_failed_report():
    report = Mock(run_id="r1", error=Mock(message="Error creating table: boom"), inserted_count=None)
    orchestrator = Mock()
    orchestrator.run = AsyncMock(return_value=report)

    with patch.object(events, "build_from_settings", return_value=orchestrator):
        await events.run_scheduled_sync()

    orchestrator.run.assert_awaited_once()
