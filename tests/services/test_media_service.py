'''
MediaHostService against a patched Cloudinary SDK.
'''
from unittest.mock import patch

import pytest

from src.school_admin_backend.common.exceptions import MediaHostError
from src.school_admin_backend.services.media_service import MediaHostService, extract_public_id
from tests.constants import TEST_PHOTO_BYTES, TEST_PHOTO_URL


@pytest.mark.parametrize("url, expected", [
    (TEST_PHOTO_URL, "eleves/abc123"),
    ("https://res.cloudinary.com/demo/image/upload/v1/photo.jpeg", "photo"),
    ("https://res.cloudinary.com/demo/image/upload/v99/a/b/c.webp", "a/b/c"),
    ("https://example.com/photo.jpg", None),
    ("", None),
    (None, None),
])
def test_extract_public_id(url, expected):
    assert extract_public_id(url) == expected


@pytest.mark.anyio
class TestMediaHostService:

    async def test_upload_returns_secure_url(self):
        service = MediaHostService()
        with patch("cloudinary.uploader.upload", return_value={"secure_url": TEST_PHOTO_URL, "public_id": "eleves/abc123"}) as upload:
            url = await service.upload(TEST_PHOTO_BYTES, folder="eleves")

        assert url == TEST_PHOTO_URL
        assert upload.call_args.kwargs["folder"] == "eleves"

    async def test_upload_error_is_wrapped(self):
        service = MediaHostService()
        with patch("cloudinary.uploader.upload", side_effect=RuntimeError("network down")):
            with pytest.raises(MediaHostError, match="network down"):
                await service.upload(TEST_PHOTO_BYTES)

    async def test_upload_without_url_is_an_error(self):
        service = MediaHostService()
        with patch("cloudinary.uploader.upload", return_value={}):
            with pytest.raises(MediaHostError):
                await service.upload(TEST_PHOTO_BYTES)

    @pytest.mark.parametrize("outcome", ["ok", "not found"])
    async def test_delete_accepts_gone_assets(self, outcome):
        service = MediaHostService()
        with patch("cloudinary.uploader.destroy", return_value={"result": outcome}) as destroy:
            assert await service.delete_by_url(TEST_PHOTO_URL) is True

        destroy.assert_called_once_with("eleves/abc123")

    async def test_delete_refusal_raises(self):
        service = MediaHostService()
        with patch("cloudinary.uploader.destroy", return_value={"result": "error"}):
            with pytest.raises(MediaHostError):
                await service.delete("eleves/abc123")

    async def test_unrecognised_url_deletes_nothing(self):
        service = MediaHostService()
        with patch("cloudinary.uploader.destroy") as destroy:
            assert await service.delete_by_url("https://example.com/photo.jpg") is False

        destroy.assert_not_called()
