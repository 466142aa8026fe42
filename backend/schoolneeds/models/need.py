import uuid

from sqlalchemy import Column, String, Integer, Text, DateTime, Enum, ForeignKey, Uuid, func
from sqlalchemy.orm import relationship

from schoolneeds.database import Base, utcnow
from schoolneeds.core.constants import NeedCategory, NeedPriority, NeedStatus


class Need(Base):
    """نموذج احتياج المدرسة"""
    __tablename__ = "needs"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    school_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("schools.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # تفاصيل الاحتياج
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    category = Column(Enum(NeedCategory), nullable=False)
    priority = Column(Enum(NeedPriority), nullable=False, default=NeedPriority.MEDIUM)
    quantity = Column(Integer, nullable=False, default=1)
    image_url = Column(String(500), nullable=True)

    # الحالة
    status = Column(Enum(NeedStatus), nullable=False, default=NeedStatus.PENDING, index=True)

    # من قدّم ومن لبّى
    submitted_by = Column(Uuid(as_uuid=True), ForeignKey("profiles.id"), nullable=True)
    fulfilled_by = Column(Uuid(as_uuid=True), ForeignKey("profiles.id"), nullable=True)

    # التواريخ
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=utcnow)
    fulfilled_at = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    school = relationship("School", back_populates="needs")
