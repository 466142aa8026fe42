import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from schoolneeds.core.constants import SchoolStatus, NotificationType, AuditAction, ChangeType
from schoolneeds.core.exceptions import NotFoundError, DuplicateError
from schoolneeds.models.school import School
from schoolneeds.models.user import Profile
from schoolneeds.schemas.listing import SchoolFilters
from schoolneeds.schemas.school import (
    SchoolCreate,
    SchoolProfileUpdate,
    SchoolAdminUpdate,
    SchoolResponse,
    SchoolAdminResponse,
)
from schoolneeds.services.audit_service import AuditService, snapshot
from schoolneeds.services import listing_service
from schoolneeds.services.notification_service import NotificationService
from schoolneeds.services.realtime import ChangeEvent, queue_change
from schoolneeds.services.stats_service import school_need_summary

logger = logging.getLogger(__name__)

STATUS_NOTIFICATIONS = {
    SchoolStatus.APPROVED: (NotificationType.SCHOOL_APPROVED, AuditAction.APPROVED),
    SchoolStatus.REJECTED: (NotificationType.SCHOOL_REJECTED, AuditAction.REJECTED),
}


class SchoolService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.audit = AuditService(db)
        self.notifications = NotificationService(db)

    async def register_school(self, user: Profile, data: SchoolCreate) -> School:
        """مدرسة واحدة لكل مدير، تبدأ بانتظار الموافقة"""
        if await self.find_by_principal(user.id):
            raise DuplicateError("لديك مدرسة مسجلة مسبقاً")

        school = School(
            principal_id=user.id,
            status=SchoolStatus.PENDING,
            **data.model_dump(),
        )
        self.db.add(school)
        await self.db.flush()

        await self.audit.log(user.id, AuditAction.CREATED, "school", school.id,
                             new_values=snapshot(school, SchoolResponse))
        await self.notifications.notify_admins(
            NotificationType.SCHOOL_REGISTERED, school.name, "school", school.id
        )
        self._queue(ChangeType.INSERT, school)
        logger.info("School %s registered by %s", school.id, user.email)
        return school

    async def find_by_principal(self, principal_id: UUID) -> Optional[School]:
        result = await self.db.execute(select(School).where(School.principal_id == principal_id))
        return result.scalar_one_or_none()

    async def get_by_principal(self, principal_id: UUID) -> School:
        school = await self.find_by_principal(principal_id)
        if not school:
            raise NotFoundError("المدرسة")
        return school

    async def get_school(self, school_id: UUID) -> School:
        school = await self.db.get(School, school_id)
        if not school:
            raise NotFoundError("المدرسة", str(school_id))
        return school

    async def get_public_school(self, school_id: UUID) -> School:
        """مدرسة معتمدة مع احتياجاتها - غير المعتمدة تُعامل كغير موجودة"""
        result = await self.db.execute(
            select(School)
            .options(selectinload(School.needs))
            .where(School.id == school_id, School.status == SchoolStatus.APPROVED)
            .execution_options(populate_existing=True)
        )
        school = result.scalar_one_or_none()
        if not school:
            raise NotFoundError("المدرسة", str(school_id))
        return school

    async def update_profile(self, school: School, data: SchoolProfileUpdate, user: Profile) -> School:
        return await self._update(school, data.model_dump(exclude_unset=True), user)

    async def admin_update(self, school_id: UUID, data: SchoolAdminUpdate, admin: Profile) -> School:
        school = await self.get_school(school_id)
        return await self._update(school, data.model_dump(exclude_unset=True), admin)

    async def approve(self, school_id: UUID, admin: Profile) -> School:
        school = await self.get_school(school_id)
        return await self._update(school, {"status": SchoolStatus.APPROVED}, admin)

    async def reject(self, school_id: UUID, admin: Profile) -> School:
        school = await self.get_school(school_id)
        return await self._update(school, {"status": SchoolStatus.REJECTED}, admin)

    async def _update(self, school: School, changes: dict, actor: Profile) -> School:
        old = snapshot(school, SchoolResponse)
        previous_status = school.status

        for key, value in changes.items():
            # الحقول الإلزامية لا تُمسح
            if value is None and key in ("name", "address", "number_of_students", "status"):
                continue
            setattr(school, key, value)
        await self.db.flush()

        new = snapshot(school, SchoolResponse)
        action = AuditAction.UPDATED
        if school.status != previous_status and school.status in STATUS_NOTIFICATIONS:
            notification_type, action = STATUS_NOTIFICATIONS[school.status]
            await self.notifications.notify_user(
                school.principal_id, notification_type, school.name, "school", school.id
            )
        await self.audit.log(actor.id, action, "school", school.id, old_values=old, new_values=new)
        self._queue(ChangeType.UPDATE, school, old)
        return school

    async def list_schools(
        self,
        filters: Optional[SchoolFilters] = None,
        approved_only: bool = False,
    ) -> List[School]:
        query = select(School).order_by(School.created_at.desc())
        if approved_only:
            query = query.where(School.status == SchoolStatus.APPROVED)
        schools = (await self.db.execute(query)).scalars().all()
        return listing_service.list_schools(schools, filters)

    async def list_admin(self, filters: Optional[SchoolFilters] = None) -> List[SchoolAdminResponse]:
        """كل المدارس مع ملخص احتياجات كل منها"""
        result = await self.db.execute(
            select(School)
            .options(selectinload(School.needs))
            .order_by(School.created_at.desc())
            .execution_options(populate_existing=True)
        )
        schools = listing_service.list_schools(result.scalars().all(), filters)

        items = []
        for school in schools:
            item = SchoolAdminResponse.model_validate(school)
            item.needs_summary = school_need_summary(school.needs)
            items.append(item)
        return items

    async def list_pending(self) -> List[School]:
        return await self.list_schools(SchoolFilters(status=SchoolStatus.PENDING.value))

    def _queue(self, event: ChangeType, school: School, old: Optional[dict] = None) -> None:
        queue_change(self.db, ChangeEvent(
            table="schools",
            event=event,
            record=snapshot(school, SchoolResponse),
            old_record=old,
        ))
