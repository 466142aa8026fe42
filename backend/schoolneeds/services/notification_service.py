import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select, func, update
from sqlalchemy.ext.asyncio import AsyncSession

from schoolneeds.config import settings
from schoolneeds.core.constants import NotificationType, UserRole, ChangeType
from schoolneeds.core.exceptions import NotFoundError
from schoolneeds.models.audit import Notification
from schoolneeds.models.user import Profile
from schoolneeds.schemas.audit import NotificationResponse, PaginatedNotifications
from schoolneeds.services.realtime import ChangeEvent, queue_change

logger = logging.getLogger(__name__)

# (title, message) لكل نوع إشعار ولغة - {name} اسم المدرسة أو الاحتياج
MESSAGES = {
    NotificationType.SCHOOL_REGISTERED: {
        "ar": ("تسجيل مدرسة جديدة", "سجّلت مدرسة {name} وهي بانتظار المراجعة"),
        "en": ("New school registration", "{name} has registered and is awaiting review"),
    },
    NotificationType.SCHOOL_APPROVED: {
        "ar": ("تمت الموافقة على المدرسة", "تمت الموافقة على مدرسة {name} وأصبحت ظاهرة للعموم"),
        "en": ("School approved", "{name} has been approved and is now publicly visible"),
    },
    NotificationType.SCHOOL_REJECTED: {
        "ar": ("تم رفض المدرسة", "تم رفض تسجيل مدرسة {name}"),
        "en": ("School rejected", "The registration of {name} was rejected"),
    },
    NotificationType.NEED_SUBMITTED: {
        "ar": ("احتياج جديد", "تم تقديم احتياج جديد: {name}"),
        "en": ("New need submitted", "A new need was submitted: {name}"),
    },
    NotificationType.NEED_FULFILLED: {
        "ar": ("تمت تلبية احتياج", "تمت تلبية الاحتياج: {name}"),
        "en": ("Need fulfilled", "The need was fulfilled: {name}"),
    },
}


def render_message(type: NotificationType, name: str, language: Optional[str]) -> tuple:
    texts = MESSAGES[type]
    title, message = texts.get(language or settings.DEFAULT_LANGUAGE, texts["en"])
    return title, message.format(name=name)


class NotificationService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(
        self,
        recipient: Profile,
        type: NotificationType,
        name: str,
        entity_type: Optional[str] = None,
        entity_id: Optional[UUID] = None,
    ) -> Notification:
        title, message = render_message(type, name, recipient.language)
        notification = Notification(
            recipient_id=recipient.id,
            title=title,
            message=message,
            type=type.value,
            entity_type=entity_type,
            entity_id=entity_id,
            read=False,
        )
        self.db.add(notification)
        await self.db.flush()

        queue_change(self.db, ChangeEvent(
            table="notifications",
            event=ChangeType.INSERT,
            record=self._record(notification),
        ))
        return notification

    async def notify_admins(
        self,
        type: NotificationType,
        name: str,
        entity_type: Optional[str] = None,
        entity_id: Optional[UUID] = None,
    ) -> List[Notification]:
        result = await self.db.execute(select(Profile).where(Profile.role == UserRole.ADMIN))
        admins = result.scalars().all()
        if not admins:
            logger.warning("No admin profile to notify about %s", type.value)
        return [await self.create(admin, type, name, entity_type, entity_id) for admin in admins]

    async def notify_user(
        self,
        user_id: Optional[UUID],
        type: NotificationType,
        name: str,
        entity_type: Optional[str] = None,
        entity_id: Optional[UUID] = None,
    ) -> Optional[Notification]:
        if user_id is None:
            return None
        recipient = await self.db.get(Profile, user_id)
        if recipient is None:
            return None
        return await self.create(recipient, type, name, entity_type, entity_id)

    async def list_for_user(
        self,
        user_id: UUID,
        page: int = 0,
        page_size: Optional[int] = None,
    ) -> PaginatedNotifications:
        """الصفحة تبدأ من الصفر والأحدث أولاً"""
        page_size = page_size or settings.NOTIFICATIONS_PAGE_SIZE
        query = select(Notification).where(Notification.recipient_id == user_id)

        total = (await self.db.execute(select(func.count()).select_from(query.subquery()))).scalar()
        unread = await self.unread_count(user_id)

        query = query.order_by(Notification.created_at.desc()).offset(page * page_size).limit(page_size)
        items = (await self.db.execute(query)).scalars().all()

        return PaginatedNotifications(
            items=[NotificationResponse.model_validate(n) for n in items],
            total=total,
            unread=unread,
            page=page,
            page_size=page_size,
            has_more=(page + 1) * page_size < total,
        )

    async def unread_count(self, user_id: UUID) -> int:
        result = await self.db.execute(
            select(func.count(Notification.id)).where(
                Notification.recipient_id == user_id,
                Notification.read.is_(False),
            )
        )
        return result.scalar() or 0

    async def mark_read(self, notification_id: UUID, user_id: UUID) -> Notification:
        notification = await self.db.get(Notification, notification_id)
        if not notification or notification.recipient_id != user_id:
            raise NotFoundError("الإشعار", str(notification_id))

        if not notification.read:
            old = self._record(notification)
            notification.read = True
            await self.db.flush()
            queue_change(self.db, ChangeEvent(
                table="notifications",
                event=ChangeType.UPDATE,
                record=self._record(notification),
                old_record=old,
            ))
        return notification

    async def mark_all_read(self, user_id: UUID) -> int:
        result = await self.db.execute(
            update(Notification)
            .where(Notification.recipient_id == user_id, Notification.read.is_(False))
            .values(read=True)
            .execution_options(synchronize_session="fetch")
        )
        await self.db.flush()
        return result.rowcount or 0

    @staticmethod
    def _record(notification: Notification) -> dict:
        data = NotificationResponse.model_validate(notification).model_dump(mode="json")
        data["recipient_id"] = str(notification.recipient_id) if notification.recipient_id else None
        return data
