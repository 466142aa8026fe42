from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, EmailStr

from schoolneeds.core.constants import UserRole


class LoginRequest(BaseModel):
    """طلب تسجيل الدخول"""
    email: EmailStr
    password: str = Field(..., min_length=6)


class RegisterRequest(BaseModel):
    """تسجيل مدير مدرسة جديد"""
    email: EmailStr
    password: str = Field(..., min_length=6, description="كلمة المرور (6 أحرف على الأقل)")
    language: str = Field(default="ar", pattern="^(ar|en)$")


class UserResponse(BaseModel):
    """بيانات المستخدم"""
    id: UUID
    email: str
    role: UserRole
    language: Optional[str] = "ar"
    school_id: Optional[UUID] = None

    model_config = {"from_attributes": True}


class LoginResponse(BaseModel):
    """استجابة تسجيل الدخول"""
    access_token: str
    token_type: str = "bearer"
    user: UserResponse


class MessageResponse(BaseModel):
    message: str
