"""
بث التغييرات الفورية عبر WebSocket
"""
import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, Query, WebSocket, WebSocketDisconnect, status
from sqlalchemy.ext.asyncio import AsyncSession

from schoolneeds.config import settings
from schoolneeds.database import SessionLocal
from schoolneeds.api.deps import authenticate_token
from schoolneeds.core.constants import REALTIME_TABLES
from schoolneeds.core.exceptions import AppException
from schoolneeds.models.user import Profile
from schoolneeds.services.realtime import hub
from schoolneeds.services.school_service import SchoolService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/realtime", tags=["البث الفوري - Realtime"])


async def subscription_filter(table: str, user: Profile, db: AsyncSession) -> Optional[dict]:
    """
    Row filter applied to the feed of ``table`` for ``user``.

    Raises ``AppException`` when the user may not follow the table at all.
    """
    if table == "notifications":
        return {"recipient_id": user.id}
    if user.is_admin:
        return None
    if table == "needs":
        school = await SchoolService(db).get_by_principal(user.id)
        return {"school_id": school.id}
    raise AppException("FORBIDDEN", "غير مصرح لك بمتابعة هذا الجدول", status_code=403)


async def authorize_feed(table: str, token: Optional[str], session_factory=None) -> Optional[dict]:
    """Authenticate on a short-lived session that is closed before streaming starts."""
    session_factory = session_factory or SessionLocal
    async with session_factory() as db:
        user = await authenticate_token(token, db)
        return await subscription_filter(table, user, db)


async def forward_events(websocket: WebSocket, queue: asyncio.Queue) -> None:
    while True:
        event = await queue.get()
        await websocket.send_json(event.to_dict())


@router.websocket("/{table}")
async def realtime_feed(
    websocket: WebSocket,
    table: str,
    token: Optional[str] = Query(default=None),
):
    """
    يرسل كل حدث كـ JSON: {table, event, record, old_record}

    - الإشعارات: إشعارات المستخدم فقط
    - الاحتياجات: احتياجات مدرسة المدير، أو الكل للمشرف
    - المدارس: للمشرف فقط
    """
    if table not in REALTIME_TABLES:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    try:
        where = await authorize_feed(table, token)
    except AppException as exc:
        logger.info("Realtime subscription to %s refused: %s", table, exc.error_code)
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await websocket.accept()

    # لكل اتصال طابوره ومهمة إرسال خاصة به
    subscription, queue = hub.subscribe_queue(table, where, maxsize=settings.REALTIME_QUEUE_SIZE)
    sender = asyncio.create_task(forward_events(websocket, queue))
    try:
        while True:
            data = await websocket.receive_text()
            if data == "ping":
                await websocket.send_text("pong")
    except WebSocketDisconnect:
        logger.debug("Realtime client left %s", table)
    finally:
        subscription.close()
        sender.cancel()
