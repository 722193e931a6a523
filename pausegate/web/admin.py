"""Maintenance mode settings page."""

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from pausegate.api.deps import get_auto_disable_scheduler, get_settings_store
from pausegate.database import get_db
from pausegate.exceptions import ForbiddenException, PauseGateException
from pausegate.models.user import Role, User
from pausegate.services.auth_service import get_auth_service
from pausegate.services.auto_disable_service import AutoDisableScheduler
from pausegate.services.settings_service import SettingsStore, sanitize_settings_input
from pausegate.templates_config import templates
from pausegate.utils.request_context import get_current_language, get_current_user_id_or_none

router = APIRouter(prefix="/admin")


async def _get_current_user(db: AsyncSession) -> User | None:
    """Get the current user from the database."""
    user_id = get_current_user_id_or_none()
    if not user_id:
        return None
    auth_service = get_auth_service()
    try:
        return await auth_service.get_current_user(db, user_id)
    except PauseGateException:
        return None


def _require_admin(user: User | None) -> RedirectResponse | None:
    """Redirect anonymous visitors to the login page; refuse other roles."""
    if not user:
        return RedirectResponse(url="/login?next=/admin/maintenance", status_code=302)
    if not user.is_administrator:
        raise ForbiddenException()
    return None


def _lines(value: str) -> list[str]:
    return [line.strip() for line in value.splitlines() if line.strip()]


@router.get("/maintenance", response_class=HTMLResponse)
async def maintenance_settings_page(
    request: Request,
    saved: bool = False,
    db: AsyncSession = Depends(get_db),
    store: SettingsStore = Depends(get_settings_store),
    scheduler: AutoDisableScheduler = Depends(get_auto_disable_scheduler),
):
    """Render the maintenance settings form."""
    user = await _get_current_user(db)
    redirect = _require_admin(user)
    if redirect:
        return redirect

    return templates.TemplateResponse(
        request,
        "admin/maintenance.html",
        {
            "current_user": user,
            "maintenance": await store.read(),
            "roles": list(Role),
            "scheduled_at": scheduler.scheduled_at(),
            "saved": saved,
            "current_language": get_current_language(),
        },
    )


@router.post("/maintenance", response_class=HTMLResponse)
async def maintenance_settings_save(
    is_enabled: bool = Form(False),
    heading: str = Form(""),
    subheading: str = Form(""),
    logo_id: str = Form("0"),
    logo_alt: str = Form(""),
    seo_title: str = Form(""),
    meta_description: str = Form(""),
    bypass_roles: list[str] = Form([]),
    whitelisted_ips: str = Form(""),
    cta_label: list[str] = Form([]),
    cta_url: list[str] = Form([]),
    countdown_enabled: bool = Form(False),
    countdown_datetime: str = Form(""),
    auto_disable_enabled: bool = Form(False),
    db: AsyncSession = Depends(get_db),
    store: SettingsStore = Depends(get_settings_store),
    scheduler: AutoDisableScheduler = Depends(get_auto_disable_scheduler),
):
    """Save the maintenance settings form."""
    user = await _get_current_user(db)
    redirect = _require_admin(user)
    if redirect:
        return redirect

    buttons = [
        {"label": label, "url": url}
        for label, url in zip(cta_label, cta_url)
        if label.strip() or url.strip()
    ]

    partial = sanitize_settings_input(
        {
            "is_enabled": is_enabled,
            "heading": heading,
            "subheading": subheading,
            "logo_id": logo_id,
            "logo_alt": logo_alt,
            "seo_title": seo_title,
            "meta_description": meta_description,
            "bypass_roles": bypass_roles,
            "whitelisted_ips": _lines(whitelisted_ips),
            "cta_buttons": buttons,
            "countdown_enabled": countdown_enabled,
            "countdown_datetime": countdown_datetime,
            "auto_disable_enabled": auto_disable_enabled,
        }
    )
    updated = await store.write(partial)
    scheduler.schedule(updated)

    return RedirectResponse(url="/admin/maintenance?saved=1", status_code=302)
