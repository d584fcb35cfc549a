"""
Object storage for comment images.

Objects live on disk under ``<STORAGE_ROOT>/<bucket>/<name>`` and are served
by the ``/storage`` static mount, which is what their public URL points at.
"""
import logging
import uuid
from pathlib import Path
from typing import Optional

import aiofiles
from fastapi import UploadFile

from freedom_wall.config import settings
from freedom_wall.utils.validation import validate_image_type

logger = logging.getLogger(__name__)


class UploadTooLargeError(ValueError):
    pass


class StorageService:
    def __init__(
        self,
        root: Optional[str] = None,
        public_base_url: Optional[str] = None
    ):
        self.root = Path(root or settings.STORAGE_ROOT)
        self.public_base_url = (public_base_url or settings.PUBLIC_BASE_URL).rstrip("/")

    def bucket_path(self, bucket: str) -> Path:
        if bucket not in settings.STORAGE_BUCKETS:
            raise FileNotFoundError(f"Bucket {bucket} not found")
        return self.root / bucket

    @staticmethod
    def generate_object_name(filename: Optional[str]) -> str:
        """Random unique name that keeps the original file extension"""
        file_extension = Path(filename).suffix.lower() if filename else ""
        return f"{uuid.uuid4().hex}{file_extension}"

    async def upload(self, bucket: str, upload_file: UploadFile) -> str:
        """
        Save an uploaded image into a bucket

        Returns:
            The generated object name
        """
        bucket_dir = self.bucket_path(bucket)
        validate_image_type(upload_file.content_type)

        content = await upload_file.read()
        if len(content) > settings.MAX_UPLOAD_SIZE:
            raise UploadTooLargeError(
                f"File exceeds the {settings.MAX_UPLOAD_SIZE} byte upload limit"
            )

        name = self.generate_object_name(upload_file.filename)
        bucket_dir.mkdir(parents=True, exist_ok=True)

        async with aiofiles.open(bucket_dir / name, 'wb') as out_file:
            await out_file.write(content)

        logger.info(f"Stored {name} in bucket {bucket} ({len(content)} bytes)")

        return name

    def get_public_url(self, bucket: str, name: str) -> str:
        """Durable public URL of a stored object"""
        bucket_dir = self.bucket_path(bucket)

        # Plain file names only, nothing that walks out of the bucket
        if Path(name).name != name or not (bucket_dir / name).is_file():
            raise FileNotFoundError(f"Object {name} not found in bucket {bucket}")

        return f"{self.public_base_url}/storage/{bucket}/{name}"
