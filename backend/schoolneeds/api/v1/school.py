"""
واجهة مدير المدرسة - بيانات مدرسته واحتياجاتها
"""
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from schoolneeds.database import get_db
from schoolneeds.api.deps import get_current_principal, need_filters
from schoolneeds.core.constants import SortKey
from schoolneeds.models.user import Profile
from schoolneeds.schemas.listing import NeedFilters
from schoolneeds.schemas.need import NeedCreate, NeedUpdate, NeedResponse
from schoolneeds.schemas.school import SchoolCreate, SchoolProfileUpdate, SchoolResponse
from schoolneeds.schemas.stats import NeedStats
from schoolneeds.schemas.auth import MessageResponse
from schoolneeds.services.need_service import NeedService
from schoolneeds.services.school_service import SchoolService

router = APIRouter(prefix="/school", tags=["مدير المدرسة - Principal"])


@router.post("", response_model=SchoolResponse, status_code=201)
async def register_school(
    body: SchoolCreate,
    current_user: Profile = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    """
    تسجيل مدرسة المدير

    - مدرسة واحدة لكل مدير
    - تبدأ بحالة "بانتظار الموافقة" ويُبلَّغ المشرفون
    """
    return await SchoolService(db).register_school(current_user, body)


@router.get("", response_model=SchoolResponse)
async def get_my_school(
    current_user: Profile = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    return await SchoolService(db).get_by_principal(current_user.id)


@router.patch("", response_model=SchoolResponse)
async def update_my_school(
    body: SchoolProfileUpdate,
    current_user: Profile = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    """تعديل بيانات المدرسة (الحالة لا يعدلها إلا المشرف)"""
    service = SchoolService(db)
    school = await service.get_by_principal(current_user.id)
    return await service.update_profile(school, body, current_user)


# === الاحتياجات ===

@router.get("/needs", response_model=List[NeedResponse])
async def list_my_needs(
    filters: NeedFilters = Depends(need_filters),
    sort: SortKey = Query(default=SortKey.NEWEST),
    current_user: Profile = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    school = await SchoolService(db).get_by_principal(current_user.id)
    return await NeedService(db).list_needs(filters, sort, school_id=school.id)


@router.post("/needs", response_model=NeedResponse, status_code=201)
async def create_need(
    body: NeedCreate,
    current_user: Profile = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    """تقديم احتياج جديد بحالة "معلق" """
    school = await SchoolService(db).get_by_principal(current_user.id)
    return await NeedService(db).create_need(school, current_user, body)


@router.patch("/needs/{need_id}", response_model=NeedResponse)
async def update_need(
    need_id: UUID,
    body: NeedUpdate,
    current_user: Profile = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    school = await SchoolService(db).get_by_principal(current_user.id)
    service = NeedService(db)
    need = await service.get_school_need(school.id, need_id)
    return await service.update_need(need, body, current_user)


@router.delete("/needs/{need_id}", response_model=MessageResponse, status_code=status.HTTP_200_OK)
async def delete_need(
    need_id: UUID,
    current_user: Profile = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    school = await SchoolService(db).get_by_principal(current_user.id)
    service = NeedService(db)
    need = await service.get_school_need(school.id, need_id)
    await service.delete_need(need, current_user)
    return MessageResponse(message="تم حذف الاحتياج")


@router.get("/stats", response_model=NeedStats)
async def get_my_stats(
    current_user: Profile = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    """إحصائيات لوحة تحكم المدرسة"""
    school = await SchoolService(db).get_by_principal(current_user.id)
    return await NeedService(db).school_stats(school.id)
