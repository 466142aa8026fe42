from typing import Optional
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from schoolneeds.core.security import is_valid_slug


def _check_slug(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    slug = v.strip().lower()
    if not is_valid_slug(slug):
        raise ValueError('الرابط المختصر يقبل الأحرف الإنجليزية الصغيرة والأرقام والشرطات فقط')
    return slug


class CustomPageCreate(BaseModel):
    subject: str = Field(..., min_length=2, max_length=200, description="عنوان الصفحة")
    slug: str = Field(..., min_length=1, max_length=200, description="الرابط المختصر")
    content: str = Field(default="", max_length=100000)
    published: bool = True

    @field_validator('slug')
    @classmethod
    def validate_slug(cls, v: str) -> str:
        return _check_slug(v)


class CustomPageUpdate(BaseModel):
    subject: Optional[str] = Field(default=None, min_length=2, max_length=200)
    slug: Optional[str] = Field(default=None, min_length=1, max_length=200)
    content: Optional[str] = Field(default=None, max_length=100000)
    published: Optional[bool] = None

    @field_validator('slug')
    @classmethod
    def validate_slug(cls, v: Optional[str]) -> Optional[str]:
        return _check_slug(v)


class CustomPageResponse(BaseModel):
    id: UUID
    subject: str
    slug: str
    content: str
    published: bool
    created_by: Optional[UUID]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    model_config = {"from_attributes": True}
