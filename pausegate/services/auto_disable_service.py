"""Scheduled auto-disable of maintenance mode."""

import logging
from datetime import datetime, timezone, tzinfo

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.date import DateTrigger
from apscheduler.triggers.interval import IntervalTrigger

from pausegate.config import settings as app_settings
from pausegate.schemas.maintenance import MaintenanceSettings
from pausegate.services.settings_service import SettingsStore

logger = logging.getLogger(__name__)

SWEEP_JOB_ID = "maintenance_auto_disable_sweep"
TARGET_JOB_ID = "maintenance_auto_disable_target"


class AutoDisableService:
    """Switches maintenance mode off once the configured target time passes."""

    def __init__(self, store: SettingsStore, tz: tzinfo | None = None):
        self.store = store
        self.tz = tz or app_settings.site_tzinfo

    def due_at(self, settings: MaintenanceSettings) -> datetime | None:
        """When maintenance should end automatically, or None."""
        if not settings.auto_disable_enabled:
            return None
        return settings.countdown_target(self.tz)

    async def disable_maintenance_mode(self) -> bool:
        """Turn maintenance off; a no-op if it is already off."""
        changed = await self.store.disable()
        if changed:
            logger.info("Maintenance mode auto-disabled")
        return changed

    async def run_due_check(self, now: datetime | None = None) -> bool:
        """Disable maintenance if auto-disable is on and the target has passed.

        Returns:
            True if maintenance mode was switched off by this call
        """
        now = now or datetime.now(timezone.utc)
        settings = await self.store.read()

        if not settings.is_enabled:
            return False

        due = self.due_at(settings)
        if due is None or due > now:
            return False

        return await self.disable_maintenance_mode()


class AutoDisableScheduler:
    """Runs AutoDisableService from an in-process APScheduler.

    Two jobs are kept:
    - an interval sweep every ``auto_disable_check_minutes``
    - a one-shot job at the configured target, rescheduled on every save
    """

    def __init__(self, service: AutoDisableService, check_minutes: int | None = None):
        self.service = service
        self.check_minutes = check_minutes or app_settings.auto_disable_check_minutes
        self.scheduler = AsyncIOScheduler(timezone=timezone.utc)

    @property
    def running(self) -> bool:
        return self.scheduler.running

    def start(self) -> None:
        """Start the scheduler with the periodic sweep."""
        if self.scheduler.running:
            logger.warning("Auto-disable scheduler already running")
            return

        self.scheduler.add_job(
            self.service.run_due_check,
            trigger=IntervalTrigger(minutes=self.check_minutes),
            id=SWEEP_JOB_ID,
            name="Maintenance auto-disable sweep",
            replace_existing=True,
        )
        self.scheduler.start()
        logger.info(f"Auto-disable scheduler started (sweep every {self.check_minutes} min)")

    def stop(self) -> None:
        """Stop the scheduler."""
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            logger.info("Auto-disable scheduler stopped")

    def schedule(self, settings: MaintenanceSettings, now: datetime | None = None) -> datetime | None:
        """Align the one-shot job with the given settings.

        Returns:
            The time the job will run, or None if nothing is scheduled
        """
        now = now or datetime.now(timezone.utc)
        due = self.service.due_at(settings)

        if not settings.is_enabled or due is None or due <= now:
            self.cancel()
            return None

        self._remove_target()
        self.scheduler.add_job(
            self.service.run_due_check,
            trigger=DateTrigger(run_date=due),
            id=TARGET_JOB_ID,
            name="Maintenance auto-disable at target",
            replace_existing=True,
        )
        logger.info(f"Maintenance auto-disable scheduled for {due.isoformat()}")
        return due

    def cancel(self) -> None:
        """Remove the one-shot job if there is one."""
        if self._remove_target():
            logger.info("Maintenance auto-disable job cancelled")

    def _remove_target(self) -> bool:
        # Jobs added before start() sit in a pending list that replace_existing does not dedupe
        try:
            self.scheduler.remove_job(TARGET_JOB_ID)
        except JobLookupError:
            return False
        return True

    def scheduled_at(self) -> datetime | None:
        """When the one-shot job will run, if scheduled."""
        job = self.scheduler.get_job(TARGET_JOB_ID)
        if job is None:
            return None
        return job.trigger.run_date
