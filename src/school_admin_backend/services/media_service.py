'''
Student photos on the media host (Cloudinary).
The SDK is blocking, so every call runs in a worker thread.
'''
import asyncio
import io
import re
from typing import Optional

import cloudinary
import cloudinary.uploader

from ..common.config import settings
from ..common.exceptions import MediaHostError
from ..common.logger import log

# Captures the public id (folders included) between the version segment and the extension
PUBLIC_ID_PATTERN = re.compile(r"/v\d+/(.+?)\.\w{3,4}$")

ACCEPTED_DESTROY_RESULTS = ("ok", "not found")


def extract_public_id(url: Optional[str]) -> Optional[str]:
    """
    'https://res.cloudinary.com/demo/image/upload/v1712/eleves/abc.jpg' -> 'eleves/abc'.
    Returns None when the URL does not look like a media host asset.
    """
    if not url:
        return None
    match = PUBLIC_ID_PATTERN.search(url)
    if not match:
        return None
    return match.group(1)


class MediaHostService:
    """
    Uploads and deletes image assets.
    Raises MediaHostError for every refusal or transport failure.
    """
    def __init__(self):
        cloudinary.config(
            cloud_name=settings.CLOUDINARY_CLOUD_NAME,
            api_key=settings.CLOUDINARY_API_KEY,
            api_secret=settings.CLOUDINARY_API_SECRET,
            secure=True
        )

    async def upload(self, content: bytes, folder: str = settings.PHOTO_FOLDER) -> str:
        """Uploads an image and returns its secure URL."""
        log.info(f"Uploading {len(content)} bytes to media folder '{folder}'.")

        def upload_sync() -> dict:
            return cloudinary.uploader.upload(io.BytesIO(content), folder=folder, resource_type="image")

        try:
            result = await asyncio.to_thread(upload_sync)
        except Exception as e:
            log.error(f"Media host upload failed: {e}", exc_info=True)
            raise MediaHostError(str(e)) from e

        url = result.get("secure_url")
        if not url:
            log.error(f"Media host upload returned no URL: {result}")
            raise MediaHostError("aucune URL retournée par l'hébergeur d'images")
        log.info(f"Uploaded media asset {result.get('public_id')}.")
        return url

    async def delete(self, public_id: str):
        """Deletes an asset; an asset that is already gone counts as deleted."""
        log.info(f"Deleting media asset {public_id}.")
        try:
            result = await asyncio.to_thread(cloudinary.uploader.destroy, public_id)
        except Exception as e:
            log.error(f"Media host deletion of {public_id} failed: {e}", exc_info=True)
            raise MediaHostError(str(e)) from e

        outcome = result.get("result")
        if outcome not in ACCEPTED_DESTROY_RESULTS:
            log.error(f"Media host refused to delete {public_id}: {outcome}")
            raise MediaHostError(f"l'hébergeur n'a pas pu supprimer l'image: {outcome}")

    async def delete_by_url(self, url: Optional[str]) -> bool:
        """
        Deletes the asset behind a stored photo URL.
        Returns False (nothing deleted) when no asset id can be read from the URL.
        """
        public_id = extract_public_id(url)
        if public_id is None:
            log.warning(f"No media asset id found in photo URL '{url}'; nothing deleted.")
            return False
        await self.delete(public_id)
        return True


def get_media_host() -> MediaHostService:
    """FastAPI dependency returning the media host client."""
    return MediaHostService()
