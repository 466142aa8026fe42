"""
الإشعارات - كل مستخدم يرى إشعاراته فقط
"""
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from schoolneeds.database import get_db
from schoolneeds.api.deps import get_current_user
from schoolneeds.models.user import Profile
from schoolneeds.schemas.audit import NotificationResponse, PaginatedNotifications, UnreadCount
from schoolneeds.schemas.auth import MessageResponse
from schoolneeds.services.notification_service import NotificationService

router = APIRouter(prefix="/notifications", tags=["الإشعارات - Notifications"])


@router.get("", response_model=PaginatedNotifications)
async def list_notifications(
    page: int = Query(default=0, ge=0, description="رقم الصفحة يبدأ من 0"),
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await NotificationService(db).list_for_user(current_user.id, page=page)


@router.get("/unread-count", response_model=UnreadCount)
async def get_unread_count(
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return UnreadCount(unread=await NotificationService(db).unread_count(current_user.id))


@router.post("/read-all", response_model=MessageResponse)
async def mark_all_read(
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    count = await NotificationService(db).mark_all_read(current_user.id)
    return MessageResponse(message=f"تم تعليم {count} إشعار كمقروء")


@router.post("/{notification_id}/read", response_model=NotificationResponse)
async def mark_read(
    notification_id: UUID,
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await NotificationService(db).mark_read(notification_id, current_user.id)
