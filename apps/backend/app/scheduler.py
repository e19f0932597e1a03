"""
Background scheduler: runs the daily recurring-transaction job inside the FastAPI process.

Enabled with ``FT_RECURRING_SCHEDULER_ENABLED=true``. The job fires once a day
at ``RECURRING_SCHEDULE_HOUR:RECURRING_SCHEDULE_MINUTE`` (local time, or
``FT_TIMEZONE`` when set) and processes every user's active definitions.
"""
import logging

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from app.core.config import settings
from app.utils.dates import local_zone

logger = logging.getLogger(__name__)

RECURRING_JOB_ID = "recurring_transactions"

scheduler = BackgroundScheduler(daemon=True)


def run_recurring_job() -> int | None:
    from app.core.database import SessionLocal
    from app.services.recurring_processor import process_recurring_transactions

    db = SessionLocal()
    try:
        created = process_recurring_transactions(db)
        logger.info("Recurring job finished: %d transaction(s) created", created)
        return created
    except Exception:
        # 다음 실행 시각까지 대기
        logger.exception("Recurring job failed")
        return None
    finally:
        db.close()


def start_scheduler() -> None:
    """Start the background scheduler with the daily recurring job."""
    hour = settings.RECURRING_SCHEDULE_HOUR
    minute = settings.RECURRING_SCHEDULE_MINUTE
    scheduler.add_job(
        run_recurring_job,
        CronTrigger(hour=hour, minute=minute, timezone=local_zone()),
        id=RECURRING_JOB_ID,
        replace_existing=True,
    )
    scheduler.start()
    logger.info("Scheduler started: %s (daily %02d:%02d)", RECURRING_JOB_ID, hour, minute)


def shutdown_scheduler() -> None:
    """Gracefully stop the scheduler."""
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Scheduler stopped")
