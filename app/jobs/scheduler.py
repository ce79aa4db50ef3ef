"""APScheduler setup and job registration."""

from __future__ import annotations

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from app.config import settings
from app.jobs.refresh_entries import refresh_entries

scheduler = AsyncIOScheduler(timezone=settings.timezone)


def register_jobs() -> None:
    """Register all periodic jobs if not already present."""
    if scheduler.get_job("refresh_entries") is None:
        scheduler.add_job(
            refresh_entries,
            IntervalTrigger(minutes=max(1, settings.refresh_interval_minutes)),
            id="refresh_entries",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
