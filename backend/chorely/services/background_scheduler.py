"""
Background scheduler service for periodic jobs.

Keeps the upcoming instances of recurring tasks materialised.
Uses APScheduler for in-process scheduling without external dependencies.
"""

from __future__ import annotations

import asyncio
from datetime import datetime
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from chorely.core.config import Settings, get_settings
from chorely.core.logger import logger
from chorely.services.recurrence_service import RecurrenceService
from chorely.utils.datetime_utils import now_utc

RECURRENCE_JOB_ID = "recurring_task_generation"


class BackgroundScheduler:
    """
    Background scheduler for periodic jobs.

    Features:
    - Daily top-up of recurring task instances (hour from RECURRENCE_JOB_HOUR, UTC)
    - Startup run so a freshly started server does not wait for the first cron tick
    """

    def __init__(
        self,
        recurrence_service: RecurrenceService,
        settings: Optional[Settings] = None,
    ):
        self._recurrence_service = recurrence_service
        self._settings = settings or get_settings()
        self._scheduler: Optional[AsyncIOScheduler] = None
        self._last_run: Optional[datetime] = None

    @property
    def is_running(self) -> bool:
        return bool(self._scheduler and self._scheduler.running)

    @property
    def last_run(self) -> Optional[datetime]:
        return self._last_run

    async def start(self):
        """Start the scheduler and run one top-up in the background."""
        # Only run scheduler in non-test environments
        if self._settings.is_test:
            logger.info("Background scheduler disabled in test environment")
            return

        self._scheduler = AsyncIOScheduler(timezone="UTC")
        self._scheduler.add_job(
            self.run_recurrence_generation,
            CronTrigger(hour=self._settings.RECURRENCE_JOB_HOUR, minute=0, timezone="UTC"),
            id=RECURRENCE_JOB_ID,
            name="Recurring Task Generation",
            replace_existing=True,
        )
        self._scheduler.start()
        logger.info(
            "Background scheduler started:\n"
            f"  - Recurring task generation: daily {self._settings.RECURRENCE_JOB_HOUR:02d}:00 UTC"
        )

        asyncio.create_task(self.run_recurrence_generation())

    async def stop(self):
        """Stop the scheduler."""
        if self._scheduler:
            self._scheduler.shutdown(wait=False)
            self._scheduler = None
            logger.info("Background scheduler stopped")

    async def run_recurrence_generation(self) -> Optional[dict]:
        """Job body: top up recurring task instances within the lookahead window."""
        try:
            result = await self._recurrence_service.ensure_upcoming(
                lookahead_days=self._settings.RECURRENCE_LOOKAHEAD_DAYS
            )
        except Exception as e:
            logger.error(f"Recurring task generation failed: {e}")
            return None
        self._last_run = now_utc()
        logger.info(f"Recurring task generation done: {result['created_count']} created")
        return result
