import logging
from typing import List, Optional, Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from schoolneeds.database import utcnow
from schoolneeds.core.constants import (
    NeedStatus,
    SchoolStatus,
    SortKey,
    NotificationType,
    AuditAction,
    ChangeType,
)
from schoolneeds.core.exceptions import NotFoundError
from schoolneeds.models.need import Need
from schoolneeds.models.school import School
from schoolneeds.models.user import Profile
from schoolneeds.schemas.listing import NeedFilters
from schoolneeds.schemas.need import NeedCreate, NeedUpdate, NeedAdminUpdate, NeedResponse
from schoolneeds.schemas.stats import NeedStats
from schoolneeds.services.audit_service import AuditService, snapshot
from schoolneeds.services import listing_service
from schoolneeds.services.notification_service import NotificationService
from schoolneeds.services.realtime import ChangeEvent, queue_change
from schoolneeds.services.stats_service import need_stats

logger = logging.getLogger(__name__)

# حقول لا يمكن مسحها بقيمة فارغة
REQUIRED_FIELDS = ("title", "category", "priority", "quantity", "status")


class NeedService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.audit = AuditService(db)
        self.notifications = NotificationService(db)

    async def create_need(self, school: School, user: Profile, data: NeedCreate) -> Need:
        need = Need(
            school=school,
            submitted_by=user.id,
            status=NeedStatus.PENDING,
            **data.model_dump(),
        )
        self.db.add(need)
        await self.db.flush()

        await self.audit.log(user.id, AuditAction.CREATED, "need", need.id,
                             new_values=snapshot(need, NeedResponse))
        await self.notifications.notify_admins(
            NotificationType.NEED_SUBMITTED, need.title, "need", need.id
        )
        self._queue(ChangeType.INSERT, need)
        logger.info("Need %s created for school %s", need.id, school.id)
        return need

    async def get_need(self, need_id: UUID) -> Need:
        result = await self.db.execute(
            select(Need).options(selectinload(Need.school)).where(Need.id == need_id)
        )
        need = result.scalar_one_or_none()
        if not need:
            raise NotFoundError("الاحتياج", str(need_id))
        return need

    async def get_school_need(self, school_id: UUID, need_id: UUID) -> Need:
        """احتياج من مدرسة المدير فقط - غير ذلك يعامل كغير موجود"""
        need = await self.get_need(need_id)
        if need.school_id != school_id:
            raise NotFoundError("الاحتياج", str(need_id))
        return need

    async def list_needs(
        self,
        filters: Optional[NeedFilters] = None,
        sort: SortKey = SortKey.NEWEST,
        school_id: Optional[UUID] = None,
        approved_only: bool = False,
    ) -> List[Need]:
        """
        Fetch the scoped collection (newest first) then run the in-memory
        filter/sort layer over it.
        """
        query = select(Need).options(selectinload(Need.school)).order_by(Need.created_at.desc())
        if school_id:
            query = query.where(Need.school_id == school_id)
        if approved_only:
            query = query.join(School, Need.school_id == School.id).where(
                School.status == SchoolStatus.APPROVED
            )
        needs = (await self.db.execute(query)).scalars().all()
        return listing_service.list_needs(needs, filters, sort)

    async def get_needs_by_ids(self, ids: Sequence[UUID]) -> List[Need]:
        if not ids:
            return []
        result = await self.db.execute(
            select(Need)
            .options(selectinload(Need.school))
            .where(Need.id.in_(list(ids)))
            .order_by(Need.created_at.desc())
        )
        return list(result.scalars().all())

    async def school_stats(self, school_id: UUID) -> NeedStats:
        return need_stats(await self.list_needs(school_id=school_id))

    async def update_need(self, need: Need, data: NeedUpdate, user: Profile) -> Need:
        return await self._update(need, data.model_dump(exclude_unset=True), user)

    async def admin_update(self, need_id: UUID, data: NeedAdminUpdate, admin: Profile) -> Need:
        need = await self.get_need(need_id)
        return await self._update(need, data.model_dump(exclude_unset=True), admin)

    async def delete_need(self, need: Need, user: Profile) -> None:
        old = snapshot(need, NeedResponse)
        await self.db.delete(need)
        await self.db.flush()

        await self.audit.log(user.id, AuditAction.DELETED, "need", need.id, old_values=old)
        queue_change(self.db, ChangeEvent(table="needs", event=ChangeType.DELETE, old_record=old))

    async def bulk_update_status(self, ids: Sequence[UUID], status: NeedStatus, admin: Profile) -> int:
        needs = await self.get_needs_by_ids(ids)
        for need in needs:
            await self._update(need, {"status": status}, admin)
        logger.info("Bulk status %s applied to %d needs", status.value, len(needs))
        return len(needs)

    async def bulk_delete(self, ids: Sequence[UUID], admin: Profile) -> int:
        needs = await self.get_needs_by_ids(ids)
        for need in needs:
            await self.delete_need(need, admin)
        logger.info("Bulk delete removed %d needs", len(needs))
        return len(needs)

    async def _update(self, need: Need, changes: dict, actor: Profile) -> Need:
        old = snapshot(need, NeedResponse)
        previous_status = need.status

        for key, value in changes.items():
            if value is None and key in REQUIRED_FIELDS:
                continue
            if key == "status":
                self._apply_status(need, value, actor)
            else:
                setattr(need, key, value)
        await self.db.flush()

        action = AuditAction.UPDATED
        if need.status != previous_status and need.status == NeedStatus.FULFILLED:
            action = AuditAction.FULFILLED
            principal_id = need.school.principal_id if need.school else None
            await self.notifications.notify_user(
                principal_id, NotificationType.NEED_FULFILLED, need.title, "need", need.id
            )
        await self.audit.log(actor.id, action, "need", need.id,
                             old_values=old, new_values=snapshot(need, NeedResponse))
        self._queue(ChangeType.UPDATE, need, old)
        return need

    @staticmethod
    def _apply_status(need: Need, status: NeedStatus, actor: Profile) -> None:
        """
        Any status may follow any other. Entering ``fulfilled`` stamps the
        fulfilment time and actor; leaving it clears both.
        """
        if status == need.status:
            return
        if status == NeedStatus.FULFILLED:
            need.fulfilled_at = utcnow()
            need.fulfilled_by = actor.id
        elif need.status == NeedStatus.FULFILLED:
            need.fulfilled_at = None
            need.fulfilled_by = None
        need.status = status

    def _queue(self, event: ChangeType, need: Need, old: Optional[dict] = None) -> None:
        queue_change(self.db, ChangeEvent(
            table="needs",
            event=event,
            record=snapshot(need, NeedResponse),
            old_record=old,
        ))
