import asyncio
import logging
import pytest
from unittest.mock import AsyncMock, MagicMock
from apscheduler.triggers.cron import CronTrigger
from core.exceptions import UpstreamUnavailable
from ingestion.scheduler import ETLScheduler


def make_runner():
    runner = MagicMock()
    runner.run = AsyncMock(return_value={"status": "success"})
    return runner


@pytest.mark.asyncio
async def test_scheduler_initialization():
    scheduler = ETLScheduler(make_runner())
    assert scheduler.scheduler is not None
    assert scheduler.cron == "0 0 * * *"
    assert scheduler.timezone == "UTC"


@pytest.mark.asyncio
async def test_scheduler_job_execution():
    runner = make_runner()
    scheduler = ETLScheduler(runner)

    await scheduler.run_etl_job()

    runner.run.assert_awaited_once_with(trigger="schedule")


@pytest.mark.asyncio
async def test_scheduler_job_survives_failed_run():
    runner = make_runner()
    runner.run.side_effect = UpstreamUnavailable("directory API down")
    scheduler = ETLScheduler(runner)

    await scheduler.run_etl_job()

    runner.run.assert_awaited_once()


@pytest.mark.asyncio
async def test_scheduler_registers_daily_utc_cron_job():
    scheduler = ETLScheduler(make_runner())

    scheduler.start()
    try:
        job = scheduler.scheduler.get_job("etl_job")
        assert job is not None
        assert isinstance(job.trigger, CronTrigger)
        assert str(job.trigger.timezone) == "UTC"
        fields = {f.name: str(f) for f in job.trigger.fields}
        assert fields["hour"] == "0"
        assert fields["minute"] == "0"
    finally:
        scheduler.stop()

    # Newer APScheduler 3.x releases finish shutdown on the next loop iteration
    for _ in range(10):
        if not scheduler.scheduler.running:
            break
        await asyncio.sleep(0)

    assert not scheduler.scheduler.running


@pytest.mark.asyncio
async def test_scheduler_stop_before_start_is_noop(caplog):
    scheduler = ETLScheduler(make_runner())

    with caplog.at_level(logging.INFO):
        scheduler.stop()

    assert not scheduler.scheduler.running
    assert not any("Stopping ETL Scheduler" in r.getMessage() for r in caplog.records)
