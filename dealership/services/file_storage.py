"""
Disk storage for uploaded car model images.

Files are written under a UUID name before the database transaction runs;
the caller removes them again when the transaction fails.
"""

import logging
import os
import uuid
from dataclasses import dataclass
from typing import Iterable, List

from fastapi import UploadFile

from dealership.errors import ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoredImage:
    """An image written to disk, ready to be recorded in car_model_images."""

    filename: str
    original_name: str
    mime_type: str
    size: int
    path: str


class ImageStorage:
    """Writes and removes image files in the upload directory."""

    def __init__(
        self,
        upload_dir: str,
        url_prefix: str,
        max_file_size: int,
        allowed_types: Iterable[str],
    ):
        self.upload_dir = upload_dir
        self.url_prefix = url_prefix.rstrip("/")
        self.max_file_size = max_file_size
        self.allowed_types = set(allowed_types)

    def file_path(self, filename: str) -> str:
        return os.path.join(self.upload_dir, os.path.basename(filename))

    async def store(self, upload: UploadFile) -> StoredImage:
        """Validate and write one upload.

        Raises:
            ValidationError: unsupported type or file too large
        """
        if not upload.filename:
            raise ValidationError("Image file name is missing")

        content_type = upload.content_type or ""
        if content_type not in self.allowed_types:
            raise ValidationError(
                f"Unsupported image type: {content_type or 'unknown'}",
                errors=[{"field": "images", "message": "Only image files are allowed"}],
            )

        content = await upload.read()
        if len(content) > self.max_file_size:
            raise ValidationError(
                f"File size exceeds {self.max_file_size // (1024 * 1024)}MB limit",
                errors=[{"field": "images", "message": f"{upload.filename} is too large"}],
            )

        ext = os.path.splitext(upload.filename)[1].lower()
        filename = f"{uuid.uuid4()}{ext}"

        os.makedirs(self.upload_dir, exist_ok=True)
        with open(self.file_path(filename), "wb") as f:
            f.write(content)

        return StoredImage(
            filename=filename,
            original_name=upload.filename,
            mime_type=content_type,
            size=len(content),
            path=f"{self.url_prefix}/{filename}",
        )

    async def store_all(self, uploads: Iterable[UploadFile]) -> List[StoredImage]:
        """Write every upload; files already written are removed if one fails."""
        stored: List[StoredImage] = []
        try:
            for upload in uploads:
                stored.append(await self.store(upload))
        except Exception:
            self.delete_all(image.filename for image in stored)
            raise
        return stored

    def delete(self, filename: str) -> bool:
        """Remove a file. Failures are logged and reported as False."""
        try:
            os.remove(self.file_path(filename))
            return True
        except OSError as e:
            logger.warning(f"Failed to delete file {filename}: {e}")
            return False

    def delete_all(self, filenames: Iterable[str]) -> int:
        """Best-effort removal of several files; returns how many were removed."""
        return sum(1 for filename in filenames if self.delete(filename))
