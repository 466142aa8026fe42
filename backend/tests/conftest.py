import uuid
from typing import AsyncGenerator

import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import NullPool

from schoolneeds.database import Base, get_db
from schoolneeds.main import app
from schoolneeds.core.constants import (
    UserRole,
    SchoolStatus,
    Governorate,
    EducationLevel,
    NeedCategory,
    NeedPriority,
    NeedStatus,
)
from schoolneeds.core.security import create_access_token, hash_password
from schoolneeds.models import Profile, School, Need
from schoolneeds.services.realtime import discard_changes, publish_committed

# Use SQLite for testing
TEST_DATABASE_URL = "sqlite+aiosqlite:///./test.db"

engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=NullPool)
TestSessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

TEST_PASSWORD = "secret123"


@pytest_asyncio.fixture
async def setup_db():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture
async def db_session(setup_db) -> AsyncGenerator[AsyncSession, None]:
    async with TestSessionLocal() as session:
        yield session


@pytest_asyncio.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    async def override_get_db():
        try:
            yield db_session
        except Exception:
            discard_changes(db_session)
            raise
        await db_session.commit()
        await publish_committed(db_session)

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()


async def make_profile(db: AsyncSession, email: str, role: UserRole, language: str = "ar") -> Profile:
    user = Profile(
        id=uuid.uuid4(),
        email=email,
        password_hash=hash_password(TEST_PASSWORD),
        role=role,
        language=language,
    )
    db.add(user)
    await db.commit()
    return user


async def make_school(
    db: AsyncSession,
    principal: Profile,
    status: SchoolStatus = SchoolStatus.APPROVED,
    **kwargs,
) -> School:
    values = dict(
        name="مدرسة الأمل",
        address="حي الميدان، شارع المدارس",
        governorate=Governorate.DAMASCUS,
        education_level=EducationLevel.PRIMARY,
        number_of_students=420,
        contact_email="amal@school.sy",
    )
    values.update(kwargs)
    school = School(principal_id=principal.id, status=status, **values)
    db.add(school)
    await db.commit()
    return school


async def make_need(db: AsyncSession, school: School, **kwargs) -> Need:
    values = dict(
        title="مقاعد دراسية",
        description="نحتاج مقاعد للصف الأول",
        category=NeedCategory.FURNITURE,
        priority=NeedPriority.MEDIUM,
        quantity=30,
        status=NeedStatus.PENDING,
    )
    values.update(kwargs)
    need = Need(school_id=school.id, **values)
    db.add(need)
    await db.commit()
    return need


@pytest_asyncio.fixture
async def admin_user(db_session: AsyncSession) -> Profile:
    return await make_profile(db_session, "admin@schoolneeds.sy", UserRole.ADMIN)


@pytest_asyncio.fixture
async def principal_user(db_session: AsyncSession) -> Profile:
    return await make_profile(db_session, "principal@school.sy", UserRole.PRINCIPAL)


@pytest_asyncio.fixture
async def other_principal(db_session: AsyncSession) -> Profile:
    return await make_profile(db_session, "other@school.sy", UserRole.PRINCIPAL, language="en")


@pytest_asyncio.fixture
async def school(db_session: AsyncSession, principal_user: Profile) -> School:
    return await make_school(db_session, principal_user)


def get_auth_headers(user: Profile) -> dict:
    token = create_access_token({"sub": str(user.id), "role": user.role.value})
    return {"Authorization": f"Bearer {token}"}
