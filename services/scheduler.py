from __future__ import annotations

import logging

from apscheduler.schedulers.background import BackgroundScheduler

from config import RECURRING_TICK_MINUTES
from services.recurring import process_due_recurring

logger = logging.getLogger(__name__)


def run_recurring_tick(session_factory) -> int:
    session = session_factory()
    try:
        booked = process_due_recurring(session)
        logger.info("Recurring tick booked %d transaction(s)", booked)
        return booked
    except Exception:
        logger.exception("Recurring tick failed")
        raise
    finally:
        session.close()


def build_scheduler(session_factory):
    scheduler = BackgroundScheduler(timezone="UTC")
    scheduler.add_job(
        run_recurring_tick,
        "interval",
        minutes=RECURRING_TICK_MINUTES,
        id="recurring_due_tick",
        replace_existing=True,
        coalesce=True,
        max_instances=1,
        args=[session_factory],
    )
    return scheduler


def start_local_scheduler(session_factory):
    scheduler = build_scheduler(session_factory)
    scheduler.start()
    return scheduler
