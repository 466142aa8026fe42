from typing import Optional

from pydantic import BaseModel, Field

from schoolneeds.core.constants import ALL


class NeedFilters(BaseModel):
    """فلاتر قائمة الاحتياجات - "all" أو قيمة فارغة تعني بلا تقييد"""
    category: Optional[str] = ALL
    priority: Optional[str] = ALL
    status: Optional[str] = ALL
    governorate: Optional[str] = ALL
    search: Optional[str] = Field(default="", max_length=200)


class SchoolFilters(BaseModel):
    """فلاتر قائمة المدارس"""
    governorate: Optional[str] = ALL
    education_level: Optional[str] = ALL
    status: Optional[str] = ALL
    search: Optional[str] = Field(default="", max_length=200)
