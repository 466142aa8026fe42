from typing import Optional, List
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from schoolneeds.core.constants import NeedCategory, NeedPriority, NeedStatus, Governorate


# === إنشاء احتياج (مدير المدرسة) ===
class NeedCreate(BaseModel):
    title: str = Field(..., min_length=2, max_length=200, description="عنوان الاحتياج")
    description: Optional[str] = Field(default=None, max_length=2000, description="وصف الاحتياج")
    category: NeedCategory = Field(..., description="التصنيف")
    priority: NeedPriority = Field(default=NeedPriority.MEDIUM, description="الأولوية")
    quantity: int = Field(default=1, ge=1, le=100000, description="الكمية")
    image_url: Optional[str] = Field(default=None, max_length=500)


class NeedUpdate(BaseModel):
    """الحقول التي يعدّلها مدير المدرسة"""
    title: Optional[str] = Field(default=None, min_length=2, max_length=200)
    description: Optional[str] = Field(default=None, max_length=2000)
    category: Optional[NeedCategory] = None
    priority: Optional[NeedPriority] = None
    quantity: Optional[int] = Field(default=None, ge=1, le=100000)
    image_url: Optional[str] = Field(default=None, max_length=500)


class NeedAdminUpdate(NeedUpdate):
    """تحديث الاحتياج من الإدارة - يشمل الحالة"""
    status: Optional[NeedStatus] = None


class BulkStatusUpdate(BaseModel):
    ids: List[UUID] = Field(..., min_length=1)
    status: NeedStatus


class BulkDelete(BaseModel):
    ids: List[UUID] = Field(..., min_length=1)


class BulkResult(BaseModel):
    affected: int
    message: str


# === الاستجابات ===
class NeedResponse(BaseModel):
    id: UUID
    school_id: UUID
    title: str
    description: Optional[str]
    category: NeedCategory
    priority: NeedPriority
    quantity: int
    status: NeedStatus
    image_url: Optional[str]
    submitted_by: Optional[UUID] = None
    fulfilled_by: Optional[UUID] = None
    created_at: Optional[datetime]
    updated_at: Optional[datetime] = None
    fulfilled_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class NeedSchoolBrief(BaseModel):
    """بيانات المدرسة المرافقة للاحتياج في القوائم"""
    id: UUID
    name: str
    governorate: Optional[Governorate]
    contact_email: Optional[str]
    contact_phone: Optional[str]

    model_config = {"from_attributes": True}


class NeedWithSchoolResponse(NeedResponse):
    school: Optional[NeedSchoolBrief] = None


class NeedList(BaseModel):
    items: List[NeedWithSchoolResponse]
    total: int
