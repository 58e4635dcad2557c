# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import io
import logging
from typing import Optional, Protocol

import cloudinary.uploader
from cloudinary.exceptions import Error as CloudinaryError

from beebright.errors import UploadError

logger = logging.getLogger(__name__)


class ImageUploader(Protocol):
    def upload(self, data: bytes, filename: str) -> str: ...


class CloudinaryUploader:
    def __init__(
        self,
        cloud_name: Optional[str],
        api_key: Optional[str],
        api_secret: Optional[str],
        *,
        timeout: float = 30.0,
    ) -> None:
        self.cloud_name = cloud_name
        self.api_key = api_key
        self.api_secret = api_secret
        self.timeout = timeout

    def upload(self, data: bytes, filename: str) -> str:
        if not (self.cloud_name and self.api_key and self.api_secret):
            raise UploadError("Faltan credenciales de Cloudinary (CLOUD_NAME, CLOUD_KEY, CLOUD_SECRET)")
        if not data:
            raise UploadError("Archivo vacío")

        # Credentials per call; the SDK's global config is left untouched
        try:
            result = cloudinary.uploader.upload(
                io.BytesIO(data),
                resource_type="image",
                cloud_name=self.cloud_name,
                api_key=self.api_key,
                api_secret=self.api_secret,
                timeout=self.timeout,
            )
        except (CloudinaryError, OSError) as exc:
            raise UploadError(f"Error subiendo a Cloudinary: {exc}") from exc

        url = (result or {}).get("secure_url")
        if not url:
            raise UploadError("Cloudinary no devolvió secure_url")

        logger.info("Image uploaded filename=%r url=%s", filename, url)
        return url
