"""SystemSettings model for site-wide configuration."""

from sqlalchemy import JSON, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from pausegate.models.base import BaseModel


class SystemSettings(BaseModel):
    """Key-value store for site-wide settings.

    Used for storing configuration that is managed at runtime through the
    admin API (e.g., the maintenance mode record).
    """

    __tablename__ = "system_settings"

    key: Mapped[str] = mapped_column(
        String(100),
        unique=True,
        nullable=False,
        index=True,
    )
    value: Mapped[dict] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"),
        nullable=False,
        default=dict,
    )
