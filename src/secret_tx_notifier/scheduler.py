from __future__ import annotations

import logging
from typing import Callable
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from apscheduler.schedulers.blocking import BlockingScheduler
from apscheduler.triggers.cron import CronTrigger


def _parse_cron(expr: str) -> dict:
    parts = expr.split()
    if len(parts) != 5:
        raise ValueError(f"Invalid cron expression: {expr}")
    minute, hour, day, month, dow = parts
    return {
        "minute": minute,
        "hour": hour,
        "day": day,
        "month": month,
        "day_of_week": dow,
    }


def create_scheduler(tz_name: str, logger: logging.Logger) -> BlockingScheduler:
    try:
        tz = ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("ZoneInfo timezone not found: %s. Falling back to UTC.", tz_name)
        tz = ZoneInfo("UTC")

    return BlockingScheduler(timezone=tz)


def start_job(
    scheduler: BlockingScheduler,
    *,
    cron: str,
    job: Callable[[], object],
    logger: logging.Logger,
) -> None:
    """
    Runs `job` on the cron schedule until interrupted. One run at a time:
    a tick that fires while the previous run is still going is dropped.
    """

    def job_wrapper() -> None:
        logger.info("Scheduler: notifier run started")
        try:
            job()
        except Exception:
            logger.exception("Scheduler: notifier run failed")
            return
        logger.info("Scheduler: notifier run done")

    scheduler.add_job(
        job_wrapper,
        CronTrigger(timezone=scheduler.timezone, **_parse_cron(cron)),
        id="notifier_run",
        replace_existing=True,
        max_instances=1,
        coalesce=True,
    )

    logger.info("Scheduler started. cron='%s'", cron)
    try:
        scheduler.start()
    except (KeyboardInterrupt, SystemExit):
        logger.info("Scheduler stopped")
