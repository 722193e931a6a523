"""Dependencies resolving the collaborators built in create_app()."""

from fastapi import Request

from pausegate.services.auto_disable_service import AutoDisableScheduler, AutoDisableService
from pausegate.services.settings_service import SettingsStore


def get_settings_store(request: Request) -> SettingsStore:
    """The application's settings store."""
    return request.app.state.settings_store


def get_auto_disable_service(request: Request) -> AutoDisableService:
    """The application's auto-disable service."""
    return request.app.state.auto_disable_service


def get_auto_disable_scheduler(request: Request) -> AutoDisableScheduler:
    """The application's auto-disable scheduler."""
    return request.app.state.auto_disable_scheduler
