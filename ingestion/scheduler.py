import logging
from typing import Optional
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from core.config import settings
from ingestion.runner import ETLRunner

logger = logging.getLogger(__name__)


class ETLScheduler:
    def __init__(
        self,
        runner: ETLRunner,
        cron: Optional[str] = None,
        timezone: Optional[str] = None
    ):
        self.runner = runner
        self.cron = cron or settings.ETL_CRON
        self.timezone = timezone or settings.ETL_TIMEZONE
        self.scheduler = AsyncIOScheduler(timezone=self.timezone)

    async def run_etl_job(self):
        """Job to run ETL pipeline; a failed run must not stop the scheduler"""
        logger.info("Scheduler: Running scheduled ETL process")
        try:
            await self.runner.run(trigger="schedule")
        except Exception as e:
            logger.error(f"Scheduler: ETL job failed - {e}")

    def start(self):
        """Start the scheduler"""
        self.scheduler.add_job(
            self.run_etl_job,
            trigger=CronTrigger.from_crontab(self.cron, timezone=self.timezone),
            id="etl_job",
            replace_existing=True,
            max_instances=1,
            coalesce=True
        )
        self.scheduler.start()
        logger.info(f"ETL Scheduler started (cron: '{self.cron}' {self.timezone})")

    def stop(self):
        """Request scheduler shutdown; AsyncIOScheduler completes it on the event loop"""
        if not self.scheduler.running:
            return
        logger.info("Stopping ETL Scheduler")
        self.scheduler.shutdown(wait=False)
