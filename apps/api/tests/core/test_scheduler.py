"""
Unit tests for the background job scheduler registry.
"""

from unittest.mock import AsyncMock

import pytest
from apscheduler.triggers.interval import IntervalTrigger

from schoolcms.core import scheduler


async def noop():
    return None


@pytest.fixture(autouse=True)
def clean_registry():
    scheduler.clear_registry()
    yield
    scheduler.clear_registry()


class TestRegistry:
    def test_register_before_start_is_listed(self):
        scheduler.register_job("job_a", AsyncMock(), IntervalTrigger(minutes=5))

        jobs = scheduler.list_registered_jobs()

        assert [job["job_id"] for job in jobs] == ["job_a"]
        assert jobs[0]["registered"] is True

    def test_register_same_id_replaces(self):
        first, second = AsyncMock(), AsyncMock()
        scheduler.register_job("job_a", first, IntervalTrigger(minutes=5))
        scheduler.register_job("job_a", second, IntervalTrigger(minutes=10))

        assert len(scheduler.list_registered_jobs()) == 1

    def test_pause_and_resume_without_scheduler(self):
        scheduler.register_job("job_a", AsyncMock(), IntervalTrigger(minutes=5))

        assert scheduler.pause_job("job_a") is False
        assert scheduler.resume_job("job_a") is False


class TestTriggerJobManually:
    @pytest.mark.asyncio
    async def test_unknown_job_raises(self):
        with pytest.raises(ValueError):
            await scheduler.trigger_job_manually("missing")

    @pytest.mark.asyncio
    async def test_returns_job_result(self):
        job = AsyncMock(return_value={"activated_count": 1})
        scheduler.register_job("job_a", job, IntervalTrigger(minutes=5))

        result = await scheduler.trigger_job_manually("job_a")

        assert result["status"] == "success"
        assert result["result"] == {"activated_count": 1}
        job.assert_awaited_once_with()

    @pytest.mark.asyncio
    async def test_job_exception_is_reported(self):
        job = AsyncMock(side_effect=RuntimeError("boom"))
        scheduler.register_job("job_a", job, IntervalTrigger(minutes=5))

        result = await scheduler.trigger_job_manually("job_a")

        assert result["status"] == "error"
        assert result["error"] == "boom"


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_jobs_registered_before_start_are_scheduled(self):
        scheduler.register_job("job_a", noop, IntervalTrigger(minutes=5))

        running = await scheduler.start_scheduler()
        try:
            job = running.get_job("job_a")
            assert job is not None
            assert job.max_instances == 1
            assert job.coalesce is True

            assert scheduler.pause_job("job_a") is True
            assert scheduler.list_registered_jobs()[0]["is_paused"] is True
            assert scheduler.resume_job("job_a") is True
            assert scheduler.list_registered_jobs()[0]["is_paused"] is False
        finally:
            await scheduler.stop_scheduler()

        assert scheduler.get_scheduler() is None

    @pytest.mark.asyncio
    async def test_register_after_start_schedules_immediately(self):
        running = await scheduler.start_scheduler()
        try:
            scheduler.register_job("late_job", noop, IntervalTrigger(minutes=5))

            assert running.get_job("late_job") is not None
        finally:
            await scheduler.stop_scheduler()

    @pytest.mark.asyncio
    async def test_scheduler_restarts_after_stop(self):
        scheduler.register_job("job_a", noop, IntervalTrigger(minutes=5))

        await scheduler.start_scheduler()
        await scheduler.stop_scheduler()

        restarted = await scheduler.start_scheduler()
        try:
            assert restarted.running
            assert restarted.get_job("job_a") is not None
        finally:
            await scheduler.stop_scheduler()

        assert scheduler.SchedulerConfig.EXECUTORS == {"default": {"type": "asyncio"}}
