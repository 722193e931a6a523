"""Maintenance mode settings API."""

from fastapi import APIRouter, Depends

from pausegate.api.deps import get_auto_disable_scheduler, get_settings_store
from pausegate.config import settings as app_settings
from pausegate.models.user import Role
from pausegate.schemas.common import APIResponse
from pausegate.schemas.maintenance import (
    MaintenanceSettings,
    MaintenanceSettingsUpdate,
    MaintenanceStatus,
    RoleOption,
)
from pausegate.services.auto_disable_service import AutoDisableScheduler
from pausegate.services.settings_service import SettingsStore, sanitize_settings_input
from pausegate.utils.permissions import require_administrator

router = APIRouter(prefix="/maintenance", tags=["Maintenance"])


@router.get("/settings", response_model=APIResponse[MaintenanceSettings])
@require_administrator()
async def get_maintenance_settings(
    store: SettingsStore = Depends(get_settings_store),
):
    """Get the maintenance settings (administrators only)."""
    return APIResponse(data=await store.read())


@router.post("/settings", response_model=APIResponse[MaintenanceSettings])
@require_administrator()
async def update_maintenance_settings(
    request: MaintenanceSettingsUpdate,
    store: SettingsStore = Depends(get_settings_store),
    scheduler: AutoDisableScheduler = Depends(get_auto_disable_scheduler),
):
    """Update some or all maintenance settings (administrators only).

    Only the fields sent are changed; the full record is returned.
    """
    partial = sanitize_settings_input(request.provided())
    updated = await store.write(partial)
    scheduler.schedule(updated)

    return APIResponse(
        data=updated,
        message="Settings saved",
    )


@router.get("/roles", response_model=APIResponse[list[RoleOption]])
@require_administrator()
async def list_roles():
    """List roles that can be chosen to bypass maintenance mode."""
    return APIResponse(data=[RoleOption(slug=role.value, label=role.label) for role in Role])


@router.get("/status", response_model=APIResponse[MaintenanceStatus])
async def get_maintenance_status(
    store: SettingsStore = Depends(get_settings_store),
):
    """Public maintenance status, for status pages and monitors."""
    current = await store.read()
    return APIResponse(
        data=MaintenanceStatus(
            is_enabled=current.is_enabled,
            countdown_target=current.countdown_target(app_settings.site_tzinfo),
        )
    )
