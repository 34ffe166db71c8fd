"""
Worker process for the periodic alert, summary and compliance jobs.

The scheduler assumes it is the only one running: overlapping cycles for the
same city are not deduplicated here.
"""
import asyncio
import logging
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.interval import IntervalTrigger
import pytz

from energy_portal.config import settings
from energy_portal.tasks.alert_jobs import (
    check_alerts_job, compliance_warning_job, daily_summary_job, send_pending_job,
)

logger = logging.getLogger(__name__)


def schedule_tz():
    return pytz.timezone(settings.schedule_timezone)


def daily_trigger(schedule_value: str) -> CronTrigger:
    """schedule_value is a time like "07:00"."""
    hour, minute = schedule_value.split(':') if schedule_value else ("7", "0")
    return CronTrigger(hour=int(hour), minute=int(minute), timezone=schedule_tz())


def cron_trigger(schedule_value: str) -> CronTrigger:
    """schedule_value is "minute hour day month day_of_week"."""
    parts = schedule_value.split() if schedule_value else ["0", "*", "*", "*", "*"]
    return CronTrigger(
        minute=parts[0],
        hour=parts[1] if len(parts) > 1 else "*",
        day=parts[2] if len(parts) > 2 else "*",
        month=parts[3] if len(parts) > 3 else "*",
        day_of_week=parts[4] if len(parts) > 4 else "*",
        timezone=schedule_tz()
    )


def setup_scheduler() -> AsyncIOScheduler:
    """Set up the APScheduler with the portal's recurring jobs."""
    scheduler = AsyncIOScheduler(timezone=schedule_tz())

    scheduler.add_job(
        check_alerts_job,
        trigger=cron_trigger(settings.alert_check_cron),
        id="check_alerts",
        name="Sudden fluctuation check",
        replace_existing=True,
        misfire_grace_time=600,
        coalesce=True,
        max_instances=1
    )
    scheduler.add_job(
        daily_summary_job,
        trigger=daily_trigger(settings.daily_summary_time),
        id="daily_summary",
        name="Daily temperature summary",
        replace_existing=True,
        misfire_grace_time=3600,
        coalesce=True,
        max_instances=1
    )
    scheduler.add_job(
        compliance_warning_job,
        trigger=IntervalTrigger(minutes=settings.compliance_check_interval_minutes),
        id="compliance_warnings",
        name="Compliance warnings",
        replace_existing=True,
        coalesce=True,
        max_instances=1
    )
    scheduler.add_job(
        send_pending_job,
        trigger=IntervalTrigger(minutes=5),
        id="send_pending",
        name="Send pending messages",
        replace_existing=True,
        coalesce=True,
        max_instances=1
    )

    for job in scheduler.get_jobs():
        logger.info(f"Scheduled job: {job.name} ({job.trigger})")

    return scheduler


async def main():
    """Main worker entry point."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    logger.info("Starting Energy Portal Worker...")

    scheduler = setup_scheduler()
    scheduler.start()

    logger.info("Worker started. Press Ctrl+C to exit.")

    try:
        while True:
            await asyncio.sleep(300)
    except (KeyboardInterrupt, asyncio.CancelledError):
        logger.info("Shutting down worker...")
        scheduler.shutdown()


if __name__ == "__main__":
    asyncio.run(main())
