from typing import Any, List, Optional
from uuid import UUID

from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from schoolneeds.config import settings
from schoolneeds.models.audit import AuditLog
from schoolneeds.models.user import Profile
from schoolneeds.schemas.audit import AuditLogResponse

SYSTEM_USER = "System"
UNKNOWN_USER = "Unknown"


def snapshot(obj: Any, schema: type) -> dict:
    """JSON-safe copy of an ORM row, used for old/new values."""
    model: BaseModel = schema.model_validate(obj)
    return model.model_dump(mode="json")


class AuditService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def log(
        self,
        user_id: Optional[UUID],
        action: str,
        entity_type: str,
        entity_id: UUID,
        old_values: Optional[dict] = None,
        new_values: Optional[dict] = None,
    ) -> AuditLog:
        entry = AuditLog(
            user_id=user_id,
            action=getattr(action, "value", action),
            entity_type=entity_type,
            entity_id=entity_id,
            old_values=old_values,
            new_values=new_values,
        )
        self.db.add(entry)
        await self.db.flush()
        return entry

    async def list_logs(
        self,
        action: Optional[str] = None,
        entity_type: Optional[str] = None,
        search: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[AuditLogResponse]:
        """Newest entries first; search runs over the limited page, as the dashboard does."""
        query = select(AuditLog)
        if action and action != "all":
            query = query.where(AuditLog.action == action)
        if entity_type and entity_type != "all":
            query = query.where(AuditLog.entity_type == entity_type)
        query = query.order_by(AuditLog.created_at.desc()).limit(limit or settings.AUDIT_LOG_LIMIT)

        entries = list((await self.db.execute(query)).scalars().all())

        user_ids = {e.user_id for e in entries if e.user_id}
        emails = {}
        if user_ids:
            rows = await self.db.execute(select(Profile.id, Profile.email).where(Profile.id.in_(user_ids)))
            emails = {row.id: row.email for row in rows}

        logs = []
        for e in entries:
            if e.user_id is None:
                email = SYSTEM_USER
            else:
                email = emails.get(e.user_id, UNKNOWN_USER)
            logs.append(
                AuditLogResponse(
                    id=e.id,
                    user_id=e.user_id,
                    user_email=email,
                    action=e.action,
                    entity_type=e.entity_type,
                    entity_id=e.entity_id,
                    old_values=e.old_values,
                    new_values=e.new_values,
                    created_at=e.created_at,
                )
            )

        needle = (search or "").strip().lower()
        if needle:
            logs = [
                log for log in logs
                if needle in f"{log.user_email} {log.action} {log.entity_type}".lower()
            ]
        return logs
