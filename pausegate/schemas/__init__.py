"""Pydantic schemas for request/response validation."""

from pausegate.schemas.auth import LoginRequest, LoginResponse, UserProfile
from pausegate.schemas.common import APIResponse
from pausegate.schemas.maintenance import (
    CTAButton,
    CTAButtonInput,
    MaintenanceSettings,
    MaintenanceSettingsUpdate,
    MaintenanceStatus,
    RoleOption,
)

__all__ = [
    # Auth
    "LoginRequest",
    "LoginResponse",
    "UserProfile",
    # Common
    "APIResponse",
    # Maintenance
    "CTAButton",
    "CTAButtonInput",
    "MaintenanceSettings",
    "MaintenanceSettingsUpdate",
    "MaintenanceStatus",
    "RoleOption",
]
