from typing import Optional
from uuid import UUID

from fastapi import Depends, Header, Query
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from schoolneeds.database import get_db
from schoolneeds.core.security import decode_token
from schoolneeds.core.exceptions import UnauthorizedError, ForbiddenError
from schoolneeds.core.constants import UserRole, ALL
from schoolneeds.core.i18n import resolve_language
from schoolneeds.models.user import Profile
from schoolneeds.schemas.listing import NeedFilters, SchoolFilters

security = HTTPBearer()


async def authenticate_token(token: Optional[str], db: AsyncSession) -> Profile:
    """يستخدم أيضاً في WebSocket حيث يصل الرمز كمعامل استعلام"""
    payload = decode_token(token) if token else None
    if not payload or payload.get("type") != "access":
        raise UnauthorizedError("رمز الوصول غير صالح أو منتهي الصلاحية")

    user_id = payload.get("sub")
    if not user_id:
        raise UnauthorizedError()

    try:
        user = await db.get(Profile, UUID(user_id))
    except ValueError:
        raise UnauthorizedError()

    if not user:
        raise UnauthorizedError("المستخدم غير موجود")
    return user


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> Profile:
    return await authenticate_token(credentials.credentials, db)


async def get_current_admin(
    current_user: Profile = Depends(get_current_user),
) -> Profile:
    if current_user.role != UserRole.ADMIN:
        raise ForbiddenError("هذه الخدمة متاحة للمشرفين فقط")
    return current_user


async def get_current_principal(
    current_user: Profile = Depends(get_current_user),
) -> Profile:
    if current_user.role != UserRole.PRINCIPAL:
        raise ForbiddenError("هذه الخدمة متاحة لمديري المدارس فقط")
    return current_user


async def get_language(
    lang: Optional[str] = Query(default=None, description="ar أو en"),
    accept_language: Optional[str] = Header(default=None),
) -> str:
    return resolve_language(lang, accept_language)


async def need_filters(
    category: Optional[str] = Query(default=ALL),
    priority: Optional[str] = Query(default=ALL),
    status: Optional[str] = Query(default=ALL),
    governorate: Optional[str] = Query(default=ALL),
    search: Optional[str] = Query(default="", max_length=200, description="بحث في العنوان والوصف"),
) -> NeedFilters:
    return NeedFilters(
        category=category,
        priority=priority,
        status=status,
        governorate=governorate,
        search=search,
    )


async def school_filters(
    governorate: Optional[str] = Query(default=ALL),
    education_level: Optional[str] = Query(default=ALL),
    status: Optional[str] = Query(default=ALL),
    search: Optional[str] = Query(default="", max_length=200, description="بحث في الاسم والوصف والعنوان"),
) -> SchoolFilters:
    return SchoolFilters(
        governorate=governorate,
        education_level=education_level,
        status=status,
        search=search,
    )
