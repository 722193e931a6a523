"""Persistence of the maintenance settings record."""

import logging
from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from datetime import datetime
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from pausegate.database import get_db_context
from pausegate.exceptions import SettingsWriteError
from pausegate.models.system_settings import SystemSettings
from pausegate.schemas.maintenance import (
    COUNTDOWN_FORMAT,
    MaintenanceSettings,
)
from pausegate.utils.sanitize import (
    is_valid_ip,
    sanitize_html,
    sanitize_text,
    sanitize_url,
)

logger = logging.getLogger(__name__)

MAINTENANCE_SETTINGS_KEY = "maintenance_settings"

SessionFactory = Callable[[], AbstractAsyncContextManager[AsyncSession]]

TEXT_FIELDS = ("heading", "logo_alt", "seo_title", "meta_description")
BOOL_FIELDS = ("is_enabled", "countdown_enabled", "auto_disable_enabled")


def _unique(values: list[str]) -> list[str]:
    """Drop empty and duplicate entries, keeping first-seen order."""
    return [v for v in dict.fromkeys(values) if v]


def _sanitize_countdown(value: Any) -> str:
    text = sanitize_text(value)
    try:
        datetime.strptime(text, COUNTDOWN_FORMAT)
    except ValueError:
        return ""
    return text


def sanitize_settings_input(data: dict[str, Any]) -> dict[str, Any]:
    """Canonicalize a partial settings update.

    Only the keys present in ``data`` appear in the result.

    Args:
        data: Raw values from the settings API

    Returns:
        Cleaned partial record ready to merge into the stored one
    """
    sanitized: dict[str, Any] = {}

    for name in BOOL_FIELDS:
        if name in data:
            sanitized[name] = bool(data[name])

    for name in TEXT_FIELDS:
        if name in data:
            sanitized[name] = sanitize_text(data[name])

    if "subheading" in data:
        sanitized["subheading"] = sanitize_html(data["subheading"])

    if "logo_id" in data:
        try:
            sanitized["logo_id"] = abs(int(data["logo_id"]))
        except (TypeError, ValueError):
            sanitized["logo_id"] = 0

    if isinstance(data.get("bypass_roles"), list):
        sanitized["bypass_roles"] = _unique(
            [sanitize_text(role) for role in data["bypass_roles"]]
        )

    if isinstance(data.get("whitelisted_ips"), list):
        ips = [sanitize_text(ip) for ip in data["whitelisted_ips"]]
        sanitized["whitelisted_ips"] = _unique([ip for ip in ips if is_valid_ip(ip)])

    if isinstance(data.get("cta_buttons"), list):
        sanitized["cta_buttons"] = [
            {
                "label": sanitize_text(button.get("label", "")),
                "url": sanitize_url(button.get("url", "")),
            }
            for button in data["cta_buttons"]
            if isinstance(button, dict)
        ]

    if "countdown_datetime" in data:
        sanitized["countdown_datetime"] = _sanitize_countdown(data["countdown_datetime"])

    return sanitized


class SettingsStore:
    """Reads and writes the single maintenance settings record."""

    def __init__(self, session_factory: SessionFactory = get_db_context):
        self.session_factory = session_factory

    async def _get_row(self, db: AsyncSession) -> SystemSettings | None:
        result = await db.execute(
            select(SystemSettings).where(SystemSettings.key == MAINTENANCE_SETTINGS_KEY)
        )
        return result.scalar_one_or_none()

    async def read(self) -> MaintenanceSettings:
        """Load the record merged with defaults (defaults if absent)."""
        async with self.session_factory() as db:
            row = await self._get_row(db)
            return MaintenanceSettings.from_stored(row.value if row else None)

    async def write(self, partial: dict[str, Any]) -> MaintenanceSettings:
        """Merge ``partial`` into the stored record and persist it.

        A write that leaves the record unchanged is not sent to the
        database and still counts as a success.

        Raises:
            SettingsWriteError: If the record cannot be saved
        """
        try:
            async with self.session_factory() as db:
                row = await self._get_row(db)
                current = MaintenanceSettings.from_stored(row.value if row else None)
                updated = current.merged_with(partial)
                stored = updated.to_stored()

                if row is None:
                    db.add(SystemSettings(key=MAINTENANCE_SETTINGS_KEY, value=stored))
                elif row.value != stored:
                    row.value = stored
                else:
                    logger.debug("Maintenance settings unchanged; nothing to write")
                    return updated

                await db.flush()
        except SQLAlchemyError as e:
            logger.error(f"Failed to save maintenance settings: {e}")
            raise SettingsWriteError() from e

        logger.info(f"Maintenance settings saved (keys: {', '.join(sorted(partial)) or 'none'})")
        return updated

    async def disable(self) -> bool:
        """Switch maintenance mode off.

        Returns:
            True if the record was changed, False if it was already disabled
        """
        async with self.session_factory() as db:
            row = await self._get_row(db)
            if row is None or not MaintenanceSettings.from_stored(row.value).is_enabled:
                return False

            value = dict(row.value)
            value["is_enabled"] = False
            row.value = value
            await db.flush()

        logger.info("Maintenance mode disabled")
        return True

    async def install(self) -> MaintenanceSettings:
        """Create the record with defaults, or fill in keys missing from an old one."""
        async with self.session_factory() as db:
            row = await self._get_row(db)
            merged = MaintenanceSettings.from_stored(row.value if row else None)
            stored = merged.to_stored()

            if row is None:
                db.add(SystemSettings(key=MAINTENANCE_SETTINGS_KEY, value=stored))
                logger.info("Maintenance settings created with defaults")
            elif row.value != stored:
                row.value = stored
                logger.info("Maintenance settings upgraded with new defaults")

            await db.flush()
            return merged

    async def uninstall(self) -> bool:
        """Delete the record.

        Returns:
            True if a record was removed
        """
        async with self.session_factory() as db:
            result = await db.execute(
                delete(SystemSettings).where(SystemSettings.key == MAINTENANCE_SETTINGS_KEY)
            )
            removed = bool(result.rowcount)

        if removed:
            logger.info("Maintenance settings deleted")
        return removed
