"""
واجهة الإشراف - مراجعة المدارس والاحتياجات والإحصائيات والتصدير وسجل التدقيق
"""
from datetime import date
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from schoolneeds.database import get_db
from schoolneeds.api.deps import get_current_admin, need_filters, school_filters
from schoolneeds.core.constants import SortKey, ExportScope
from schoolneeds.core.exceptions import ValidationError
from schoolneeds.models.user import Profile
from schoolneeds.schemas.listing import NeedFilters, SchoolFilters
from schoolneeds.schemas.need import (
    NeedAdminUpdate,
    NeedList,
    NeedWithSchoolResponse,
    BulkStatusUpdate,
    BulkDelete,
    BulkResult,
)
from schoolneeds.schemas.school import (
    SchoolAdminUpdate,
    SchoolResponse,
    SchoolAdminList,
    SchoolList,
)
from schoolneeds.schemas.stats import OverviewStats, AnalyticsResponse
from schoolneeds.schemas.audit import AuditLogResponse
from schoolneeds.schemas.auth import MessageResponse
from schoolneeds.schemas.custom_page import CustomPageCreate, CustomPageUpdate, CustomPageResponse
from schoolneeds.services.need_service import NeedService
from schoolneeds.services.school_service import SchoolService
from schoolneeds.services.audit_service import AuditService
from schoolneeds.services.custom_page_service import CustomPageService
from schoolneeds.services.export_service import needs_to_csv_bytes
from schoolneeds.services import stats_service

router = APIRouter(prefix="/admin", tags=["الإشراف - Admin"])


# === الاحتياجات ===

@router.get("/needs", response_model=NeedList)
async def list_needs(
    filters: NeedFilters = Depends(need_filters),
    sort: SortKey = Query(default=SortKey.NEWEST),
    current_user: Profile = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    """كل الاحتياجات مع الفلترة والترتيب"""
    needs = await NeedService(db).list_needs(filters, sort)
    return NeedList(
        items=[NeedWithSchoolResponse.model_validate(n) for n in needs],
        total=len(needs),
    )


@router.get("/needs/export")
async def export_needs(
    scope: ExportScope = Query(default=ExportScope.ALL),
    ids: Optional[List[UUID]] = Query(default=None, description="للتصدير المحدد"),
    filters: NeedFilters = Depends(need_filters),
    sort: SortKey = Query(default=SortKey.NEWEST),
    current_user: Profile = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    """
    تصدير الاحتياجات إلى CSV

    - all: كل الاحتياجات
    - filtered: حسب الفلاتر الحالية
    - selected: المعرفات المحددة فقط
    """
    service = NeedService(db)
    if scope == ExportScope.SELECTED:
        if not ids:
            raise ValidationError("لم يتم تحديد أي احتياج للتصدير", field="ids")
        needs = await service.get_needs_by_ids(ids)
    elif scope == ExportScope.FILTERED:
        needs = await service.list_needs(filters, sort)
    else:
        needs = await service.list_needs(sort=sort)

    filename = f"needs-export-{date.today().isoformat()}.csv"
    return Response(
        content=needs_to_csv_bytes(needs),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/needs/bulk-status", response_model=BulkResult)
async def bulk_update_status(
    body: BulkStatusUpdate,
    current_user: Profile = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    affected = await NeedService(db).bulk_update_status(body.ids, body.status, current_user)
    return BulkResult(affected=affected, message=f"تم تحديث {affected} احتياج")


@router.post("/needs/bulk-delete", response_model=BulkResult)
async def bulk_delete(
    body: BulkDelete,
    current_user: Profile = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    affected = await NeedService(db).bulk_delete(body.ids, current_user)
    return BulkResult(affected=affected, message=f"تم حذف {affected} احتياج")


@router.patch("/needs/{need_id}", response_model=NeedWithSchoolResponse)
async def update_need(
    need_id: UUID,
    body: NeedAdminUpdate,
    current_user: Profile = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    """تعديل الاحتياج بما فيه الحالة - أي حالة يمكن أن تلي أي حالة"""
    return await NeedService(db).admin_update(need_id, body, current_user)


@router.delete("/needs/{need_id}", response_model=MessageResponse)
async def delete_need(
    need_id: UUID,
    current_user: Profile = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    service = NeedService(db)
    need = await service.get_need(need_id)
    await service.delete_need(need, current_user)
    return MessageResponse(message="تم حذف الاحتياج")


# === المدارس ===

@router.get("/schools", response_model=SchoolAdminList)
async def list_schools(
    filters: SchoolFilters = Depends(school_filters),
    current_user: Profile = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    """كل المدارس مع ملخص الاحتياجات (الإجمالي، الملباة، المعلقة، العاجلة)"""
    items = await SchoolService(db).list_admin(filters)
    return SchoolAdminList(items=items, total=len(items))


@router.get("/schools/pending", response_model=SchoolList)
async def list_pending_schools(
    current_user: Profile = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    schools = await SchoolService(db).list_pending()
    return SchoolList(
        items=[SchoolResponse.model_validate(s) for s in schools],
        total=len(schools),
    )


@router.patch("/schools/{school_id}", response_model=SchoolResponse)
async def update_school(
    school_id: UUID,
    body: SchoolAdminUpdate,
    current_user: Profile = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    return await SchoolService(db).admin_update(school_id, body, current_user)


@router.post("/schools/{school_id}/approve", response_model=SchoolResponse)
async def approve_school(
    school_id: UUID,
    current_user: Profile = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    """الموافقة على المدرسة وإبلاغ مديرها"""
    return await SchoolService(db).approve(school_id, current_user)


@router.post("/schools/{school_id}/reject", response_model=SchoolResponse)
async def reject_school(
    school_id: UUID,
    current_user: Profile = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    return await SchoolService(db).reject(school_id, current_user)


# === الإحصائيات ===

@router.get("/stats/overview", response_model=OverviewStats)
async def get_overview(
    current_user: Profile = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    needs = await NeedService(db).list_needs()
    schools = await SchoolService(db).list_schools()
    return OverviewStats(
        needs=stats_service.need_stats(needs),
        schools=stats_service.school_stats(schools),
    )


@router.get("/stats/analytics", response_model=AnalyticsResponse)
async def get_analytics(
    current_user: Profile = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    """المدارس حسب المحافظة والاحتياجات حسب التصنيف"""
    needs = await NeedService(db).list_needs()
    schools = await SchoolService(db).list_schools()
    return AnalyticsResponse(
        schools_by_governorate=stats_service.schools_by_governorate(schools),
        needs_by_category=stats_service.needs_by_category(needs),
    )


# === سجل التدقيق ===

@router.get("/audit-logs", response_model=List[AuditLogResponse])
async def list_audit_logs(
    action: Optional[str] = Query(default=None),
    entity_type: Optional[str] = Query(default=None),
    search: Optional[str] = Query(default=None, max_length=200, description="بحث في البريد والإجراء ونوع الكيان"),
    current_user: Profile = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    return await AuditService(db).list_logs(action=action, entity_type=entity_type, search=search)


# === الصفحات المخصصة ===

@router.get("/pages", response_model=List[CustomPageResponse])
async def list_pages(
    current_user: Profile = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    return await CustomPageService(db).list_pages()


@router.post("/pages", response_model=CustomPageResponse, status_code=201)
async def create_page(
    body: CustomPageCreate,
    current_user: Profile = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    return await CustomPageService(db).create_page(body, current_user)


@router.patch("/pages/{page_id}", response_model=CustomPageResponse)
async def update_page(
    page_id: UUID,
    body: CustomPageUpdate,
    current_user: Profile = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    return await CustomPageService(db).update_page(page_id, body, current_user)


@router.delete("/pages/{page_id}", response_model=MessageResponse)
async def delete_page(
    page_id: UUID,
    current_user: Profile = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    await CustomPageService(db).delete_page(page_id, current_user)
    return MessageResponse(message="تم حذف الصفحة")
