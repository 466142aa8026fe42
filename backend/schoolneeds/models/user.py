import uuid

from sqlalchemy import Column, String, DateTime, Enum, Uuid, func
from sqlalchemy.orm import relationship

from schoolneeds.database import Base, utcnow
from schoolneeds.core.constants import UserRole


class Profile(Base):
    """حساب المستخدم: مدير مدرسة أو مشرف"""
    __tablename__ = "profiles"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(Enum(UserRole), nullable=False, default=UserRole.PRINCIPAL)
    language = Column(String(5), default="ar")
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=utcnow)

    # Relationships
    school = relationship("School", back_populates="principal", uselist=False)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
