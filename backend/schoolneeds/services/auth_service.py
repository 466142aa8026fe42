import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from schoolneeds.core.security import (
    create_access_token,
    hash_password,
    verify_password,
    normalize_email,
)
from schoolneeds.core.exceptions import DuplicateError, InvalidCredentialsError
from schoolneeds.core.constants import UserRole
from schoolneeds.models.user import Profile
from schoolneeds.models.school import School
from schoolneeds.schemas.auth import RegisterRequest, UserResponse

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_email(self, email: str) -> Optional[Profile]:
        result = await self.db.execute(
            select(Profile).where(Profile.email == normalize_email(email))
        )
        return result.scalar_one_or_none()

    async def register(self, data: RegisterRequest) -> Profile:
        """Create a principal account. Admin accounts are only created by scripts/init_db.py."""
        if await self.get_by_email(data.email):
            raise DuplicateError("البريد الإلكتروني مسجل مسبقاً")

        user = Profile(
            email=normalize_email(data.email),
            password_hash=hash_password(data.password),
            role=UserRole.PRINCIPAL,
            language=data.language,
        )
        self.db.add(user)
        await self.db.flush()
        logger.info("Principal account registered: %s", user.email)
        return user

    async def authenticate(self, email: str, password: str) -> Profile:
        user = await self.get_by_email(email)
        if not user or not verify_password(password, user.password_hash):
            logger.warning("Failed sign-in for %s", normalize_email(email))
            raise InvalidCredentialsError()
        return user

    def create_token(self, user: Profile) -> str:
        return create_access_token({"sub": str(user.id), "role": user.role.value})

    async def to_response(self, user: Profile) -> UserResponse:
        result = await self.db.execute(select(School.id).where(School.principal_id == user.id))
        school_id: Optional[UUID] = result.scalars().first()
        return UserResponse(
            id=user.id,
            email=user.email,
            role=user.role,
            language=user.language,
            school_id=school_id,
        )
