"""
سكريبت إنشاء قاعدة البيانات والمشرف الأول
"""
import asyncio
import os

from sqlalchemy import select

from schoolneeds.database import engine, Base, SessionLocal
from schoolneeds.models import Profile
from schoolneeds.core.constants import UserRole
from schoolneeds.core.security import hash_password, normalize_email

ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@schoolneeds.sy")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin123")


async def init_database():
    """إنشاء الجداول"""
    print("🔄 جاري إنشاء الجداول...")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    print("✅ تم إنشاء الجداول بنجاح")


async def create_admin_user():
    """إنشاء حساب مشرف افتراضي"""
    async with SessionLocal() as session:
        result = await session.execute(
            select(Profile).where(Profile.role == UserRole.ADMIN)
        )
        if result.scalars().first():
            print("⚠️  يوجد مشرف بالفعل")
            return

        admin = Profile(
            email=normalize_email(ADMIN_EMAIL),
            password_hash=hash_password(ADMIN_PASSWORD),
            role=UserRole.ADMIN,
            language="ar",
        )
        session.add(admin)
        await session.commit()

        print("✅ تم إنشاء حساب المشرف:")
        print(f"   📧 البريد: {admin.email}")
        print("   ⚠️  يرجى تغيير كلمة المرور فوراً!")


async def main():
    print("=" * 50)
    print("   🏫 Syria School Needs - إعداد قاعدة البيانات")
    print("=" * 50)

    await init_database()
    await create_admin_user()

    print("=" * 50)
    print("   ✅ تم الإعداد بنجاح!")
    print("=" * 50)


if __name__ == "__main__":
    asyncio.run(main())
