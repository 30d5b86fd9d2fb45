"""Tests for background usage log scheduling"""

import asyncio
from unittest.mock import patch

import pytest

from cognita_gateway.db.ai_logs import UsageLogEntry
from cognita_gateway.services import background_tasks
from cognita_gateway.services.background_tasks import (
    drain_background_tasks,
    get_pending_tasks_count,
    schedule_usage_log,
)

ENTRY = UsageLogEntry(
    user_id=None,
    provider="ensemble",
    model="m",
    prompt_chars=1,
    completion_chars=2,
    latency_ms=3,
    status="success",
)


class TestScheduleUsageLog:
    @pytest.mark.asyncio
    async def test_task_tracked_until_done(self, settings):
        written = []

        async def fake_log(entry, token, settings):
            await asyncio.sleep(0.01)
            written.append((entry, token))

        with patch("cognita_gateway.services.background_tasks.log_usage_event", fake_log):
            task = schedule_usage_log(ENTRY, "jwt", settings)
            assert get_pending_tasks_count() == 1
            await task

        assert written == [(ENTRY, "jwt")]
        assert get_pending_tasks_count() == 0
        assert task not in background_tasks._background_tasks


class TestDrainBackgroundTasks:
    @pytest.mark.asyncio
    async def test_nothing_pending(self):
        assert await drain_background_tasks(0.1) == 0

    @pytest.mark.asyncio
    async def test_waits_for_in_flight_writes(self, settings):
        written = []

        async def fake_log(entry, token, settings):
            await asyncio.sleep(0.02)
            written.append(entry)

        with patch("cognita_gateway.services.background_tasks.log_usage_event", fake_log):
            schedule_usage_log(ENTRY, None, settings)
            schedule_usage_log(ENTRY, None, settings)
            assert await drain_background_tasks(1.0) == 0

        assert len(written) == 2

    @pytest.mark.asyncio
    async def test_cancels_after_timeout(self, settings):
        async def stuck_log(entry, token, settings):
            await asyncio.sleep(10)

        with patch("cognita_gateway.services.background_tasks.log_usage_event", stuck_log):
            task = schedule_usage_log(ENTRY, None, settings)
            assert await drain_background_tasks(0.01) == 1

        with pytest.raises(asyncio.CancelledError):
            await task
