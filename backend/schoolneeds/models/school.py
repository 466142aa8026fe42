import uuid

from sqlalchemy import Column, String, Integer, Text, DateTime, Enum, ForeignKey, Uuid, func
from sqlalchemy.orm import relationship

from schoolneeds.database import Base, utcnow
from schoolneeds.core.constants import SchoolStatus, Governorate, EducationLevel


class School(Base):
    """نموذج المدرسة"""
    __tablename__ = "schools"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    principal_id = Column(Uuid(as_uuid=True), ForeignKey("profiles.id"), nullable=True, index=True)

    # بيانات المدرسة
    name = Column(String(200), nullable=False)
    address = Column(String(500), nullable=False)
    governorate = Column(Enum(Governorate), nullable=True, index=True)
    education_level = Column(Enum(EducationLevel), nullable=True)
    number_of_students = Column(Integer, nullable=False, default=0)
    description = Column(Text, nullable=True)
    image_url = Column(String(500), nullable=True)

    # معلومات الاتصال
    contact_phone = Column(String(30), nullable=True)
    contact_email = Column(String(255), nullable=True)

    # الحالة - المعتمدة فقط تظهر في القوائم العامة
    status = Column(Enum(SchoolStatus), nullable=False, default=SchoolStatus.PENDING, index=True)

    # التواريخ
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=utcnow)

    # Relationships
    principal = relationship("Profile", back_populates="school")
    needs = relationship(
        "Need",
        back_populates="school",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
