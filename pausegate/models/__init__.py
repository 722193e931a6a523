"""SQLAlchemy models for PauseGate."""

from pausegate.models.base import Base, BaseModel, TimestampMixin
from pausegate.models.media_asset import MediaAsset
from pausegate.models.system_settings import SystemSettings
from pausegate.models.user import Role, User

__all__ = [
    # Base
    "Base",
    "BaseModel",
    "TimestampMixin",
    # Settings
    "SystemSettings",
    # User
    "User",
    "Role",
    # Media
    "MediaAsset",
]
