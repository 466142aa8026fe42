import uuid

from sqlalchemy import Column, String, Text, Boolean, DateTime, ForeignKey, Uuid, func

from schoolneeds.database import Base, utcnow


class CustomPage(Base):
    """صفحة محتوى يحررها المشرفون وتُعرض بالرابط المختصر"""
    __tablename__ = "custom_pages"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    subject = Column(String(200), nullable=False)
    slug = Column(String(200), unique=True, nullable=False, index=True)
    content = Column(Text, nullable=False, default="")
    published = Column(Boolean, default=True, nullable=False)
    created_by = Column(Uuid(as_uuid=True), ForeignKey("profiles.id"), nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
