"""Maintenance mode Pydantic schemas."""

from datetime import datetime, tzinfo
from functools import lru_cache
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

COUNTDOWN_FORMAT = "%Y-%m-%dT%H:%M"

DEFAULT_HEADING = "We'll Be Right Back"
DEFAULT_SUBHEADING = (
    "Our site is currently undergoing scheduled maintenance. Please check back soon."
)
DEFAULT_SEO_TITLE = "Site Under Maintenance"
DEFAULT_META_DESCRIPTION = (
    "We are currently performing scheduled maintenance. We will be back online shortly."
)


def parse_countdown(value: str, tz: tzinfo) -> datetime | None:
    """Parse a ``YYYY-MM-DDTHH:MM`` local date-time in the given timezone.

    Returns:
        Timezone-aware datetime, or None if the value is empty or malformed
    """
    if not value:
        return None
    try:
        naive = datetime.strptime(value, COUNTDOWN_FORMAT)
    except (TypeError, ValueError):
        return None
    return naive.replace(tzinfo=tz)


class CTAButton(BaseModel):
    """Call-to-action button shown on the maintenance page."""

    model_config = ConfigDict(frozen=True)

    label: str = ""
    url: str = ""


class MaintenanceSettings(BaseModel):
    """The maintenance mode settings record, fully populated.

    Built once per read via :meth:`from_stored`, so consumers never deal
    with missing keys.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    is_enabled: bool = False
    heading: str = DEFAULT_HEADING
    subheading: str = DEFAULT_SUBHEADING
    logo_id: int = Field(0, ge=0)
    logo_alt: str = ""
    seo_title: str = DEFAULT_SEO_TITLE
    meta_description: str = DEFAULT_META_DESCRIPTION
    bypass_roles: list[str] = Field(default_factory=lambda: ["administrator"])
    whitelisted_ips: list[str] = Field(default_factory=list)
    cta_buttons: list[CTAButton] = Field(default_factory=list)
    countdown_enabled: bool = False
    countdown_datetime: str = ""
    auto_disable_enabled: bool = False

    @classmethod
    def from_stored(cls, raw: dict[str, Any] | None) -> "MaintenanceSettings":
        """Merge a stored (possibly partial or stale) record with the defaults.

        Keys holding a value of the wrong shape fall back to their default.
        """
        data: dict[str, Any] = {}
        if isinstance(raw, dict):
            for name in cls.model_fields:
                if name not in raw:
                    continue
                try:
                    data[name] = _field_adapter(name).validate_python(raw[name])
                except ValidationError:
                    continue
        return cls(**data)

    def to_stored(self) -> dict[str, Any]:
        """Serialize for the key-value store."""
        return self.model_dump(mode="json")

    def merged_with(self, partial: dict[str, Any]) -> "MaintenanceSettings":
        """Return a copy with the given keys overriding the current values."""
        stored = self.to_stored()
        stored.update(partial)
        return MaintenanceSettings.from_stored(stored)

    def countdown_target(self, tz: tzinfo) -> datetime | None:
        """The configured target date-time, or None."""
        return parse_countdown(self.countdown_datetime, tz)

    def countdown_timestamp_ms(self, tz: tzinfo) -> int:
        """Target as epoch milliseconds for client-side scripts (0 = none)."""
        target = self.countdown_target(tz)
        if target is None:
            return 0
        return int(target.timestamp()) * 1000


@lru_cache
def _field_adapter(name: str) -> TypeAdapter:
    field = MaintenanceSettings.model_fields[name]
    if field.metadata:
        return TypeAdapter(Annotated[(field.annotation, *field.metadata)])
    return TypeAdapter(field.annotation)


class CTAButtonInput(BaseModel):
    """CTA button as submitted by the admin UI."""

    label: Any = ""
    url: Any = ""


class MaintenanceSettingsUpdate(BaseModel):
    """Partial update request; only the keys sent are changed."""

    model_config = ConfigDict(extra="ignore")

    is_enabled: bool | None = None
    heading: str | None = None
    subheading: str | None = None
    logo_id: int | None = None
    logo_alt: str | None = None
    seo_title: str | None = None
    meta_description: str | None = None
    bypass_roles: list[str] | None = None
    whitelisted_ips: list[str] | None = None
    cta_buttons: list[CTAButtonInput] | None = None
    countdown_enabled: bool | None = None
    countdown_datetime: str | None = None
    auto_disable_enabled: bool | None = None

    def provided(self) -> dict[str, Any]:
        """The fields that were actually sent, without nulls."""
        return self.model_dump(exclude_unset=True, exclude_none=True)


class RoleOption(BaseModel):
    """A role that can be selected for bypass."""

    slug: str
    label: str


class MaintenanceStatus(BaseModel):
    """Public maintenance status."""

    is_enabled: bool
    countdown_target: datetime | None = None
