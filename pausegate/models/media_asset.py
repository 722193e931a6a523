"""MediaAsset model for images referenced by settings (e.g. the logo)."""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from pausegate.models.base import Base, TimestampMixin


class MediaAsset(Base, TimestampMixin):
    """A stored image, addressed by a small integer ID."""

    __tablename__ = "media_assets"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    url: Mapped[str] = mapped_column(String(1000), nullable=False)
    alt_text: Mapped[str] = mapped_column(String(255), nullable=False, default="")
