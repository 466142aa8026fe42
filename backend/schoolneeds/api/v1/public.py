"""
واجهة عامة - تصفح المدارس المعتمدة واحتياجاتها (بدون تسجيل)
"""
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from schoolneeds.database import get_db
from schoolneeds.api.deps import get_language, need_filters, school_filters
from schoolneeds.core.constants import SortKey
from schoolneeds.core.i18n import options
from schoolneeds.schemas.listing import NeedFilters, SchoolFilters
from schoolneeds.schemas.need import NeedList, NeedWithSchoolResponse
from schoolneeds.schemas.school import SchoolList, SchoolResponse, SchoolDetailResponse
from schoolneeds.schemas.custom_page import CustomPageResponse
from schoolneeds.services.need_service import NeedService
from schoolneeds.services.school_service import SchoolService
from schoolneeds.services.custom_page_service import CustomPageService
from schoolneeds.services.listing_service import sort_records

router = APIRouter(prefix="/public", tags=["عام - Public"])


@router.get("/schools", response_model=SchoolList)
async def list_schools(
    filters: SchoolFilters = Depends(school_filters),
    db: AsyncSession = Depends(get_db),
):
    """المدارس المعتمدة فقط"""
    # الحالة ليست فلتراً عاماً
    filters.status = None
    schools = await SchoolService(db).list_schools(filters, approved_only=True)
    return SchoolList(
        items=[SchoolResponse.model_validate(s) for s in schools],
        total=len(schools),
    )


@router.get("/schools/{school_id}", response_model=SchoolDetailResponse)
async def get_school(
    school_id: UUID,
    db: AsyncSession = Depends(get_db),
):
    """تفاصيل مدرسة معتمدة مع احتياجاتها (الأحدث أولاً)"""
    school = await SchoolService(db).get_public_school(school_id)
    detail = SchoolDetailResponse.model_validate(school)
    detail.needs = sort_records(detail.needs, SortKey.NEWEST)
    return detail


@router.get("/needs", response_model=NeedList)
async def list_needs(
    filters: NeedFilters = Depends(need_filters),
    sort: SortKey = Query(default=SortKey.NEWEST),
    db: AsyncSession = Depends(get_db),
):
    """احتياجات المدارس المعتمدة مع بيانات المدرسة والتواصل"""
    needs = await NeedService(db).list_needs(filters, sort, approved_only=True)
    return NeedList(
        items=[NeedWithSchoolResponse.model_validate(n) for n in needs],
        total=len(needs),
    )


@router.get("/pages/{slug}", response_model=CustomPageResponse)
async def get_page(
    slug: str,
    db: AsyncSession = Depends(get_db),
):
    """صفحة محتوى منشورة - غير الموجودة تعيد NOT_FOUND"""
    return await CustomPageService(db).get_published_by_slug(slug)


# === قوائم الخيارات المترجمة ===

@router.get("/categories", response_model=List[dict])
async def get_categories(lang: str = Depends(get_language)):
    return options("categories", lang)


@router.get("/priorities", response_model=List[dict])
async def get_priorities(lang: str = Depends(get_language)):
    return options("priorities", lang)


@router.get("/governorates", response_model=List[dict])
async def get_governorates(lang: str = Depends(get_language)):
    return options("governorates", lang)


@router.get("/education-levels", response_model=List[dict])
async def get_education_levels(lang: str = Depends(get_language)):
    return options("education_levels", lang)
