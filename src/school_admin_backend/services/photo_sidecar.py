'''
The photo attached to a student row.
The database row and the media asset cannot change together, so every
operation uploads or deletes in a fixed order and undoes the media side when
the database side fails.
'''
from typing import Optional

from ..common.config import settings
from ..common.exceptions import MediaHostError
from ..common.logger import log
from .media_service import MediaHostService


class PhotoSidecar:
    def __init__(self, media: MediaHostService, folder: str = settings.PHOTO_FOLDER):
        self.media = media
        self.folder = folder

    async def upload(self, content: bytes) -> str:
        """Uploads a new photo; raises MediaHostError."""
        return await self.media.upload(content, folder=self.folder)

    async def remove_existing(self, url: Optional[str]):
        """Deletes the current photo before its column is cleared; raises MediaHostError."""
        if url:
            await self.media.delete_by_url(url)

    async def compensate(self, url: str):
        """
        Deletes a photo uploaded for a database write that then failed.
        Failures are logged only; the caller reports the database error.
        """
        log.warning(f"Database write failed after uploading {url}; deleting the uploaded photo.")
        try:
            await self.media.delete_by_url(url)
        except MediaHostError as e:
            log.error(f"Compensating deletion of {url} failed, the asset is orphaned: {e}")

    async def release(self, url: Optional[str]):
        """Best-effort deletion of a photo no longer referenced by any row."""
        if not url:
            return
        try:
            await self.media.delete_by_url(url)
        except MediaHostError as e:
            log.warning(f"Could not delete unreferenced photo {url}: {e}")
