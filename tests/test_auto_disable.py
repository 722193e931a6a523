"""Tests for scheduled auto-disable of maintenance mode."""

from datetime import datetime, timedelta, timezone

import pytest

from pausegate.schemas.maintenance import MaintenanceSettings
from pausegate.services.auto_disable_service import (
    SWEEP_JOB_ID,
    AutoDisableScheduler,
    AutoDisableService,
)
from pausegate.services.settings_service import SettingsStore

NOW = datetime(2026, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture()
def service():
    return AutoDisableService(SettingsStore(), timezone.utc)


@pytest.fixture()
async def scheduler(service):
    auto_scheduler = AutoDisableScheduler(service, check_minutes=15)
    auto_scheduler.start()
    yield auto_scheduler
    auto_scheduler.stop()


class TestRunDueCheck:
    async def test_disables_after_target(self, service, store_settings, stored_settings):
        store_settings(
            {"is_enabled": True, "auto_disable_enabled": True, "countdown_datetime": "2026-06-01T11:59"}
        )

        assert await service.run_due_check(now=NOW) is True
        assert stored_settings()["is_enabled"] is False

    async def test_target_exactly_now_is_due(self, service, store_settings):
        store_settings(
            {"is_enabled": True, "auto_disable_enabled": True, "countdown_datetime": "2026-06-01T12:00"}
        )

        assert await service.run_due_check(now=NOW) is True

    async def test_waits_for_future_target(self, service, store_settings, stored_settings):
        store_settings(
            {"is_enabled": True, "auto_disable_enabled": True, "countdown_datetime": "2026-06-01T12:30"}
        )

        assert await service.run_due_check(now=NOW) is False
        assert stored_settings()["is_enabled"] is True

    async def test_requires_auto_disable_flag(self, service, store_settings, stored_settings):
        store_settings({"is_enabled": True, "countdown_datetime": "2026-06-01T11:00"})

        assert await service.run_due_check(now=NOW) is False
        assert stored_settings()["is_enabled"] is True

    async def test_already_disabled(self, service, store_settings):
        store_settings(
            {"is_enabled": False, "auto_disable_enabled": True, "countdown_datetime": "2026-06-01T11:00"}
        )

        assert await service.run_due_check(now=NOW) is False

    async def test_disable_maintenance_mode_twice(self, service, store_settings):
        store_settings({"is_enabled": True})

        assert await service.disable_maintenance_mode() is True
        assert await service.disable_maintenance_mode() is False


class TestAutoDisableScheduler:
    async def test_sweep_job_registered(self, scheduler):
        job = scheduler.scheduler.get_job(SWEEP_JOB_ID)

        assert scheduler.running
        assert job.trigger.interval == timedelta(minutes=15)

    async def test_schedules_future_target(self, scheduler):
        settings = MaintenanceSettings(
            is_enabled=True, auto_disable_enabled=True, countdown_datetime="2099-01-01T00:00"
        )

        due = scheduler.schedule(settings)

        assert due == datetime(2099, 1, 1, tzinfo=timezone.utc)
        assert scheduler.scheduled_at() == due

    async def test_reschedule_replaces_job(self, scheduler):
        scheduler.schedule(
            MaintenanceSettings(is_enabled=True, auto_disable_enabled=True, countdown_datetime="2099-01-01T00:00")
        )
        scheduler.schedule(
            MaintenanceSettings(is_enabled=True, auto_disable_enabled=True, countdown_datetime="2099-02-01T00:00")
        )

        assert scheduler.scheduled_at() == datetime(2099, 2, 1, tzinfo=timezone.utc)

    async def test_clearing_flag_cancels(self, scheduler):
        scheduler.schedule(
            MaintenanceSettings(is_enabled=True, auto_disable_enabled=True, countdown_datetime="2099-01-01T00:00")
        )

        assert scheduler.schedule(MaintenanceSettings(is_enabled=True, countdown_datetime="2099-01-01T00:00")) is None
        assert scheduler.scheduled_at() is None

    async def test_past_target_is_not_scheduled(self, scheduler):
        settings = MaintenanceSettings(
            is_enabled=True, auto_disable_enabled=True, countdown_datetime="2026-06-01T11:00"
        )

        assert scheduler.schedule(settings, now=NOW) is None
        assert scheduler.scheduled_at() is None

    def test_schedule_before_start(self, service):
        auto_scheduler = AutoDisableScheduler(service, check_minutes=15)
        settings = MaintenanceSettings(
            is_enabled=True, auto_disable_enabled=True, countdown_datetime="2099-01-01T00:00"
        )

        auto_scheduler.schedule(settings)
        auto_scheduler.schedule(settings.merged_with({"countdown_datetime": "2099-03-01T00:00"}))

        assert auto_scheduler.scheduled_at() == datetime(2099, 3, 1, tzinfo=timezone.utc)
        auto_scheduler.cancel()
        assert auto_scheduler.scheduled_at() is None
