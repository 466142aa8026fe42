from typing import Optional, List, Any
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel


# === الإشعارات ===
class NotificationResponse(BaseModel):
    id: UUID
    title: str
    message: str
    type: str
    entity_type: Optional[str] = None
    entity_id: Optional[UUID] = None
    read: bool
    created_at: Optional[datetime]

    model_config = {"from_attributes": True}


class PaginatedNotifications(BaseModel):
    items: List[NotificationResponse]
    total: int
    unread: int
    page: int
    page_size: int
    has_more: bool


class UnreadCount(BaseModel):
    unread: int


# === سجل التدقيق ===
class AuditLogResponse(BaseModel):
    id: UUID
    user_id: Optional[UUID]
    user_email: str
    action: str
    entity_type: str
    entity_id: UUID
    old_values: Optional[Any] = None
    new_values: Optional[Any] = None
    created_at: Optional[datetime]
