"""
تخزين الصور على القرص وإرجاع روابطها العامة
"""
import logging
import uuid
from pathlib import Path
from typing import Optional

import aiofiles
import aiofiles.os

from schoolneeds.config import settings
from schoolneeds.core.exceptions import ValidationError

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
}


class StorageService:
    def __init__(self, root: Optional[str] = None, public_url: Optional[str] = None):
        self.root = Path(root or settings.STORAGE_DIR).resolve()
        self.public_base = (public_url or settings.STORAGE_PUBLIC_URL).rstrip("/")

    def _resolve(self, bucket: str, path: str) -> Path:
        target = (self.root / bucket / path).resolve()
        if self.root not in target.parents:
            raise ValidationError("مسار الملف غير صالح", field="path")
        return target

    def public_url(self, bucket: str, path: str) -> str:
        self._resolve(bucket, path)
        return f"{self.public_base}/{bucket}/{path}"

    async def upload(self, bucket: str, path: str, data: bytes, content_type: Optional[str] = None) -> str:
        target = self._resolve(bucket, path)
        await aiofiles.os.makedirs(target.parent, exist_ok=True)
        async with aiofiles.open(target, "wb") as f:
            await f.write(data)
        logger.info("Stored %d bytes (%s) at %s/%s", len(data), content_type or "unknown", bucket, path)
        return self.public_url(bucket, path)

    async def delete(self, bucket: str, path: str) -> bool:
        target = self._resolve(bucket, path)
        if not await aiofiles.os.path.exists(target):
            return False
        await aiofiles.os.remove(target)
        return True

    @staticmethod
    def image_path(owner_id: uuid.UUID, content_type: str) -> str:
        """<owner>/<random>.<ext>; the extension comes from the accepted content type only."""
        ext = IMAGE_EXTENSIONS.get(content_type)
        if ext is None:
            raise ValidationError("يسمح برفع الصور فقط (JPEG, PNG, GIF, WebP)", field="file")
        return f"{owner_id}/{uuid.uuid4().hex}{ext}"


storage_service = StorageService()
