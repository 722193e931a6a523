"""Resolves media asset IDs to URLs."""

import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from pausegate.database import get_db_context
from pausegate.models.media_asset import MediaAsset
from pausegate.services.settings_service import SessionFactory
from pausegate.utils.sanitize import sanitize_url

logger = logging.getLogger(__name__)


class MediaResolver:
    """Looks up the public URL of a media asset."""

    def __init__(self, session_factory: SessionFactory = get_db_context):
        self.session_factory = session_factory

    async def resolve(self, media_id: int) -> str | None:
        """Get the URL for an asset.

        Args:
            media_id: Asset ID (0 means none)

        Returns:
            The asset URL, or None if unset, missing or unusable
        """
        if media_id <= 0:
            return None

        try:
            async with self.session_factory() as db:
                result = await db.execute(select(MediaAsset.url).where(MediaAsset.id == media_id))
                url = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Failed to resolve media asset {media_id}: {e}")
            return None

        if not url:
            logger.debug(f"Media asset {media_id} not found")
            return None
        return sanitize_url(url) or None
