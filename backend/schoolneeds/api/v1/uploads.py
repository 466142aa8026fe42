"""
رفع الصور (صور المدارس والاحتياجات)
"""
from fastapi import APIRouter, Depends, File, UploadFile
from pydantic import BaseModel

from schoolneeds.config import settings
from schoolneeds.api.deps import get_current_user
from schoolneeds.core.exceptions import ValidationError
from schoolneeds.models.user import Profile
from schoolneeds.services.storage_service import StorageService, storage_service

router = APIRouter(prefix="/uploads", tags=["الملفات - Uploads"])


class UploadResponse(BaseModel):
    url: str
    path: str


def get_storage() -> StorageService:
    return storage_service


@router.post("/images", response_model=UploadResponse, status_code=201)
async def upload_image(
    file: UploadFile = File(...),
    current_user: Profile = Depends(get_current_user),
    storage: StorageService = Depends(get_storage),
):
    """رفع صورة JPEG/PNG/GIF/WebP (حتى 5 ميغابايت) وإرجاع رابطها العام"""
    content_type = (file.content_type or "").lower()
    path = storage.image_path(current_user.id, content_type)

    # لا نقرأ أكثر من الحد + بايت واحد
    data = await file.read(settings.MAX_UPLOAD_BYTES + 1)
    if not data:
        raise ValidationError("الملف فارغ", field="file")
    if len(data) > settings.MAX_UPLOAD_BYTES:
        raise ValidationError("حجم الصورة يتجاوز الحد المسموح", field="file")

    url = await storage.upload(settings.STORAGE_BUCKET, path, data, content_type)
    return UploadResponse(url=url, path=path)
