"""
Scheduler module for periodic background tasks.
Uses APScheduler's AsyncIOScheduler.

The only job today polls the pending interviewer count for admin sessions,
so newly submitted applications show up in the notification inbox.
"""

import logging
from datetime import datetime, timedelta, timezone

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from app.services.notification_service import PendingApplicationWatcher

logger = logging.getLogger(__name__)

# Global scheduler instance
scheduler = AsyncIOScheduler()

PENDING_WATCH_JOB_ID = "pending_interviewer_watch"


def schedule_pending_watch(
    watcher: PendingApplicationWatcher,
    interval_seconds: int = 30,
    initial_delay_seconds: float = 1.0,
    target: AsyncIOScheduler | None = None,
):
    """
    Register the polling job. The first check runs after a short delay so the
    session has a chance to resolve; subsequent checks run every interval.
    """
    sched = target or scheduler
    first_run = datetime.now(timezone.utc) + timedelta(seconds=initial_delay_seconds)
    return sched.add_job(
        watcher.check,
        IntervalTrigger(seconds=interval_seconds),
        id=PENDING_WATCH_JOB_ID,
        replace_existing=True,
        next_run_time=first_run,
        max_instances=1,
        coalesce=True,
    )


def start_scheduler(watcher: PendingApplicationWatcher, interval_seconds: int = 30,
                    initial_delay_seconds: float = 1.0):
    """Start the background scheduler. Must be called from a running event loop."""
    schedule_pending_watch(watcher, interval_seconds, initial_delay_seconds)
    scheduler.start()

    job = scheduler.get_job(PENDING_WATCH_JOB_ID)
    if job:
        logger.info(f"📅 Scheduler started. First pending-interviewer check at: {job.next_run_time}")


def shutdown_scheduler():
    """Stop the scheduler."""
    if scheduler.running:
        scheduler.shutdown(wait=False)
    logger.info("Scheduler shut down.")
