"""User model with role-based access control."""

from datetime import datetime
from enum import Enum

from sqlalchemy import Boolean, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from pausegate.models.base import BaseModel


class Role(str, Enum):
    """User roles, most privileged first."""

    ADMINISTRATOR = "administrator"  # Manages maintenance settings
    EDITOR = "editor"
    AUTHOR = "author"
    CONTRIBUTOR = "contributor"
    SUBSCRIBER = "subscriber"

    @property
    def label(self) -> str:
        """Human-readable role name."""
        return self.value.capitalize()


class User(BaseModel):
    """User account with a single role."""

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    display_name: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    role: Mapped[str] = mapped_column(String(20), nullable=False, default=Role.SUBSCRIBER.value)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    last_login_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    @property
    def is_administrator(self) -> bool:
        """Check if user is an administrator."""
        return self.role == Role.ADMINISTRATOR.value

    def __repr__(self) -> str:
        return f"<User {self.email} ({self.role})>"
