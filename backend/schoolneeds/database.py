from datetime import datetime, timezone
from typing import AsyncGenerator

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import Session, declarative_base

from schoolneeds.config import settings
from schoolneeds.services.realtime import discard_changes, publish_committed

engine = create_async_engine(settings.DATABASE_URL, echo=settings.DEBUG, pool_pre_ping=True)
SessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

Base = declarative_base()


@event.listens_for(Session, "after_rollback")
def _drop_uncommitted_changes(session: Session) -> None:
    # أحداث معاملة ملغاة لا تُبث أبداً
    discard_changes(session)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """جلسة قاعدة بيانات لكل طلب: تُثبَّت عند النجاح وتُلغى عند الخطأ، ثم تُبث التغييرات"""
    async with SessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        await publish_committed(session)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
