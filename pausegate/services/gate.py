"""Request gate for maintenance mode.

The gate decides, once per inbound page request, whether the request is
served normally or answered with the maintenance page.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum

from fastapi import Request
from sqlalchemy.exc import SQLAlchemyError

from pausegate.schemas.maintenance import MaintenanceSettings
from pausegate.services.access_service import IdentityProvider, can_access
from pausegate.services.settings_service import SettingsStore

logger = logging.getLogger(__name__)

ADMIN_PREFIX = "/admin"
API_PREFIX = "/api/"
CRON_PREFIX = "/cron/"
LOGIN_PATHS = {"/login", "/logout"}


class GateDecision(str, Enum):
    """Outcome of the gate for one request."""

    BYPASS_CONTEXT = "bypass_context"
    DISABLED = "disabled"
    ALLOWED = "allowed"
    BLOCKED = "blocked"

    @property
    def serves_request(self) -> bool:
        """Whether the request proceeds to the application."""
        return self is not GateDecision.BLOCKED


@dataclass(frozen=True)
class GateContext:
    """Execution-phase flags and request data the gate needs."""

    is_admin_area: bool = False
    is_ajax: bool = False
    is_cron: bool = False
    is_login_page: bool = False
    headers: Mapping[str, str] = field(default_factory=dict)
    remote_addr: str | None = None
    access_token: str | None = None

    @property
    def is_bypass_context(self) -> bool:
        return self.is_admin_area or self.is_ajax or self.is_cron or self.is_login_page

    @classmethod
    def from_request(cls, request: Request) -> "GateContext":
        """Build the context for a Starlette request."""
        path = request.url.path

        token = None
        auth_header = request.headers.get("Authorization", "")
        if auth_header.startswith("Bearer "):
            token = auth_header.removeprefix("Bearer ").strip()
        if not token:
            token = request.cookies.get("access_token")

        return cls(
            is_admin_area=path == ADMIN_PREFIX or path.startswith(ADMIN_PREFIX + "/"),
            is_ajax=path.startswith(API_PREFIX),
            is_cron=path.startswith(CRON_PREFIX),
            is_login_page=path in LOGIN_PATHS,
            headers=request.headers,
            remote_addr=request.client.host if request.client else None,
            access_token=token,
        )


@dataclass(frozen=True)
class GateOutcome:
    """Decision plus the settings snapshot it was made with."""

    decision: GateDecision
    settings: MaintenanceSettings | None = None


class Gate:
    """Decides between serving a request and showing the maintenance page.

    Checks run in a fixed order and the first match wins:

    1. admin, API/AJAX, cron and login requests always pass
    2. maintenance mode switched off: pass
    3. a bypass role or whitelisted IP: pass
    4. everything else is blocked
    """

    def __init__(self, store: SettingsStore, identity_provider: IdentityProvider):
        self.store = store
        self.identity_provider = identity_provider

    async def load_settings(self) -> MaintenanceSettings:
        """Read settings, falling back to defaults if storage is unavailable."""
        try:
            return await self.store.read()
        except SQLAlchemyError as e:
            logger.error(f"Failed to load maintenance settings, using defaults: {e}")
            return MaintenanceSettings()

    async def should_intercept(self, context: GateContext) -> GateOutcome:
        """Run the gate for one request."""
        if context.is_bypass_context:
            return GateOutcome(GateDecision.BYPASS_CONTEXT)

        settings = await self.load_settings()
        if not settings.is_enabled:
            return GateOutcome(GateDecision.DISABLED, settings)

        identity = await self.identity_provider.identify(context)
        if can_access(identity, settings):
            logger.debug(
                f"Maintenance bypass for {identity.client_ip or 'unknown ip'} "
                f"(roles={sorted(identity.roles)})"
            )
            return GateOutcome(GateDecision.ALLOWED, settings)

        return GateOutcome(GateDecision.BLOCKED, settings)
