"""Service layer for business logic."""

from pausegate.services.access_service import IdentityProvider, RequestIdentity, can_access
from pausegate.services.auth_service import AuthService, get_auth_service
from pausegate.services.auto_disable_service import AutoDisableScheduler, AutoDisableService
from pausegate.services.gate import Gate, GateContext, GateDecision, GateOutcome
from pausegate.services.i18n_service import I18nService, get_i18n_service
from pausegate.services.maintenance_page import MaintenancePageRenderer
from pausegate.services.media_service import MediaResolver
from pausegate.services.settings_service import SettingsStore, sanitize_settings_input

__all__ = [
    "AuthService",
    "get_auth_service",
    "IdentityProvider",
    "RequestIdentity",
    "can_access",
    "Gate",
    "GateContext",
    "GateDecision",
    "GateOutcome",
    "SettingsStore",
    "sanitize_settings_input",
    "MaintenancePageRenderer",
    "MediaResolver",
    "AutoDisableService",
    "AutoDisableScheduler",
    "I18nService",
    "get_i18n_service",
]
