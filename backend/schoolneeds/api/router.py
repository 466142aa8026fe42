"""
تجميع جميع مسارات API
"""
from fastapi import APIRouter

from schoolneeds.api.v1 import public, auth, school, admin, notifications, uploads, realtime

api_router = APIRouter(prefix="/api/v1")

# المسارات العامة (بدون تسجيل) - المدارس المعتمدة واحتياجاتها
api_router.include_router(public.router)

# المصادقة (تسجيل + دخول)
api_router.include_router(auth.router)

# مدير المدرسة
api_router.include_router(school.router)

# الإشراف
api_router.include_router(admin.router)

# الإشعارات والملفات والبث الفوري (لكل المستخدمين المسجلين)
api_router.include_router(notifications.router)
api_router.include_router(uploads.router)
api_router.include_router(realtime.router)
