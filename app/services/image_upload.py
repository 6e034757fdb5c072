"""
Profile image hosting.

Uploads avatar images to Cloudinary through its REST upload API. The
image is cropped to a square and stored with automatic quality; the
durable https URL of the result is returned.
"""

import hashlib
import time
from typing import Dict, Optional, Protocol

import httpx

from app.config import Settings
from app.core.exceptions import UploadError
from app.utils.logging_config import get_logger

logger = get_logger(__name__)


class ImageUploader(Protocol):
    """Anything that can store image bytes and return a public URL."""

    async def upload(
        self,
        data: bytes,
        *,
        filename: str,
        folder: str,
        size: int,
    ) -> str:
        ...


def square_fill_transformation(size: int) -> str:
    """Cloudinary transformation: fill-crop to size x size, then auto quality."""
    return f"c_fill,h_{size},w_{size}/q_auto"


def sign_params(params: Dict[str, str], api_secret: str) -> str:
    """
    Compute a Cloudinary request signature.

    Args:
        params: Signed upload parameters (file, api_key and resource_type excluded)
        api_secret: Account API secret

    Returns:
        Hex SHA-1 digest of the sorted parameters followed by the secret
    """
    to_sign = "&".join(f"{key}={params[key]}" for key in sorted(params) if params[key] != "")
    return hashlib.sha1(f"{to_sign}{api_secret}".encode("utf-8")).hexdigest()


class CloudinaryUploader:
    """
    ImageUploader backed by a Cloudinary account.

    Credentials come from Settings. A transport may be injected for tests.
    """

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings
        self._transport = transport

    @property
    def upload_url(self) -> str:
        return self.settings.CLOUDINARY_UPLOAD_URL.format(
            cloud_name=self.settings.CLOUDINARY_CLOUD_NAME
        )

    async def upload(
        self,
        data: bytes,
        *,
        filename: str,
        folder: str,
        size: int,
    ) -> str:
        """
        Upload an image and return its secure URL.

        Args:
            data: Raw image bytes
            filename: Original file name, forwarded to the host
            folder: Destination folder on the host
            size: Edge length of the square crop in pixels

        Returns:
            https URL of the stored, transformed image

        Raises:
            UploadError: If the host is not configured or the upload fails
        """
        if not self.settings.cloudinary_configured:
            logger.error("Image upload attempted but Cloudinary credentials are not configured")
            raise UploadError()

        params = {
            "folder": folder,
            "timestamp": str(int(time.time())),
            "transformation": square_fill_transformation(size),
        }
        form = dict(params)
        form["api_key"] = self.settings.CLOUDINARY_API_KEY
        form["signature"] = sign_params(params, self.settings.CLOUDINARY_API_SECRET)

        try:
            async with httpx.AsyncClient(
                transport=self._transport,
                timeout=self.settings.HTTP_TIMEOUT_SECONDS,
            ) as client:
                response = await client.post(
                    self.upload_url,
                    data=form,
                    files={"file": (filename, data)},
                )
        except httpx.HTTPError as e:
            logger.error(f"Image upload request failed: {e}")
            raise UploadError()

        if response.is_error:
            logger.error(f"Image host returned {response.status_code}: {response.text[:200]}")
            raise UploadError()

        try:
            secure_url = response.json()["secure_url"]
        except (ValueError, KeyError, TypeError):
            logger.error("Image host response did not include secure_url")
            raise UploadError()

        logger.info(f"Uploaded profile image to {secure_url}")
        return secure_url
