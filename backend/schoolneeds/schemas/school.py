from typing import Optional, List
from datetime import datetime
from uuid import UUID
import re

from pydantic import BaseModel, Field, EmailStr, field_validator

from schoolneeds.core.constants import SchoolStatus, Governorate, EducationLevel
from schoolneeds.schemas.need import NeedResponse


def _clean_phone(v: Optional[str]) -> Optional[str]:
    if v is None or v == "":
        return None
    phone = re.sub(r'[\s\-]', '', v)
    if not re.match(r'^(\+?[0-9]{7,15})$', phone):
        raise ValueError('رقم الهاتف غير صالح')
    return phone


# === تسجيل مدرسة (مدير المدرسة) ===
class SchoolCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=200, description="اسم المدرسة")
    address: str = Field(..., min_length=3, max_length=500, description="العنوان")
    governorate: Governorate = Field(..., description="المحافظة")
    education_level: Optional[EducationLevel] = None
    number_of_students: int = Field(..., ge=0, le=100000, description="عدد الطلاب")
    contact_phone: Optional[str] = Field(default=None, max_length=30)
    contact_email: Optional[EmailStr] = None
    description: Optional[str] = Field(default=None, max_length=2000)
    image_url: Optional[str] = Field(default=None, max_length=500)

    @field_validator('contact_phone')
    @classmethod
    def validate_phone(cls, v: Optional[str]) -> Optional[str]:
        return _clean_phone(v)


class SchoolProfileUpdate(BaseModel):
    """الحقول التي يعدّلها مدير المدرسة - بدون الحالة"""
    name: Optional[str] = Field(default=None, min_length=2, max_length=200)
    address: Optional[str] = Field(default=None, min_length=3, max_length=500)
    governorate: Optional[Governorate] = None
    education_level: Optional[EducationLevel] = None
    number_of_students: Optional[int] = Field(default=None, ge=0, le=100000)
    contact_phone: Optional[str] = Field(default=None, max_length=30)
    contact_email: Optional[EmailStr] = None
    description: Optional[str] = Field(default=None, max_length=2000)
    image_url: Optional[str] = Field(default=None, max_length=500)

    @field_validator('contact_phone')
    @classmethod
    def validate_phone(cls, v: Optional[str]) -> Optional[str]:
        return _clean_phone(v)


class SchoolAdminUpdate(SchoolProfileUpdate):
    """تحديث المدرسة من الإدارة - كل الحقول"""
    status: Optional[SchoolStatus] = None


# === الاستجابات ===
class SchoolResponse(BaseModel):
    id: UUID
    principal_id: Optional[UUID]
    name: str
    address: str
    governorate: Optional[Governorate]
    education_level: Optional[EducationLevel]
    number_of_students: int
    contact_phone: Optional[str]
    contact_email: Optional[str]
    description: Optional[str]
    image_url: Optional[str]
    status: SchoolStatus
    created_at: Optional[datetime]
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class SchoolNeedSummary(BaseModel):
    """ملخص احتياجات المدرسة في لوحة الإشراف"""
    total: int = 0
    fulfilled: int = 0
    pending: int = 0
    urgent: int = 0


class SchoolAdminResponse(SchoolResponse):
    needs_summary: SchoolNeedSummary = SchoolNeedSummary()


class SchoolDetailResponse(SchoolResponse):
    needs: List[NeedResponse] = []


class SchoolList(BaseModel):
    items: List[SchoolResponse]
    total: int


class SchoolAdminList(BaseModel):
    items: List[SchoolAdminResponse]
    total: int
