"""
واجهة المصادقة - مديرو المدارس والمشرفون
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from schoolneeds.database import get_db
from schoolneeds.api.deps import get_current_user
from schoolneeds.models.user import Profile
from schoolneeds.schemas.auth import (
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    UserResponse,
    MessageResponse,
)
from schoolneeds.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["المصادقة - Authentication"])


@router.post("/register", response_model=LoginResponse, status_code=201)
async def register(
    body: RegisterRequest,
    db: AsyncSession = Depends(get_db),
):
    """
    تسجيل مدير مدرسة جديد

    - يُنشئ حساباً بدور "مدير مدرسة" ويعيد رمز الدخول مباشرة
    - تسجيل المدرسة نفسها يتم عبر POST /school
    """
    service = AuthService(db)
    user = await service.register(body)
    return LoginResponse(
        access_token=service.create_token(user),
        user=await service.to_response(user),
    )


@router.post("/login", response_model=LoginResponse)
async def login(
    body: LoginRequest,
    db: AsyncSession = Depends(get_db),
):
    """تسجيل الدخول بالبريد الإلكتروني وكلمة المرور"""
    service = AuthService(db)
    user = await service.authenticate(body.email, body.password)
    return LoginResponse(
        access_token=service.create_token(user),
        user=await service.to_response(user),
    )


@router.post("/logout", response_model=MessageResponse)
async def logout(current_user: Profile = Depends(get_current_user)):
    """الرموز عديمة الحالة - يكفي أن يتخلص العميل من الرمز"""
    return MessageResponse(message="تم تسجيل الخروج")


@router.get("/me", response_model=UserResponse)
async def get_me(
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """استعادة الجلسة من رمز الوصول"""
    return await AuthService(db).to_response(current_user)
