"""
منصة احتياجات المدارس السورية - ربط المدارس بالمانحين
"""
import logging
import traceback
from contextlib import asynccontextmanager
from pathlib import Path

from starlette.requests import Request

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from schoolneeds.config import settings
from schoolneeds.api.router import api_router

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """إدارة دورة حياة التطبيق"""
    logger.info("%s is starting...", settings.APP_NAME)
    yield
    logger.info("%s is shutting down...", settings.APP_NAME)


app = FastAPI(
    title="Syria School Needs - منصة احتياجات المدارس",
    description="""
    ## منصة احتياجات المدارس السورية

    ### الميزات:
    - **تسجيل المدارس**: يسجل مدير المدرسة مدرسته وتراجعها الإدارة
    - **الاحتياجات**: تقديم احتياجات البنية التحتية (أثاث، معدات، لوازم...) ومتابعة حالتها
    - **التصفح العام**: عرض المدارس المعتمدة واحتياجاتها مع الفلترة والترتيب
    - **لوحة الإشراف**: المراجعة والتحديث الجماعي والإحصائيات والتصدير وسجل التدقيق

    ### الأدوار:
    - **عام**: تصفح المدارس المعتمدة واحتياجاتها
    - **مدير مدرسة**: إدارة مدرسته واحتياجاتها
    - **مشرف**: المراجعة والتحليلات والتحكم الكامل
    """,
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# معالج أخطاء التحقق (422) - تسجيل البيانات المرسلة لتسهيل التشخيص
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning(
        "Validation error on %s %s\nBody received: %s\nErrors: %s",
        request.method,
        request.url.path,
        exc.body,
        exc.errors(),
    )
    return JSONResponse(
        status_code=422,
        content={
            "detail": {
                "error": {
                    "code": "VALIDATION_ERROR",
                    "message": "البيانات المرسلة غير صالحة",
                    "details": jsonable_errors(exc),
                }
            }
        },
    )


def jsonable_errors(exc: RequestValidationError) -> list:
    # ctx may hold exception objects
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]


# معالج الأخطاء العام
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(
        "Unhandled exception on %s %s: %s\n%s",
        request.method,
        request.url.path,
        exc,
        traceback.format_exc(),
    )
    return JSONResponse(
        status_code=500,
        content={"detail": {"error": {"code": "INTERNAL_ERROR", "message": "حدث خطأ داخلي. يرجى المحاولة لاحقاً.", "details": None}}},
    )


# Health check
@app.get("/health")
async def health_check():
    """فحص صحة الخدمة"""
    return {"status": "healthy", "service": "schoolneeds-backend", "version": "1.0.0"}


# Include API routes
app.include_router(api_router)

# الصور المرفوعة
Path(settings.STORAGE_DIR).mkdir(parents=True, exist_ok=True)
app.mount(settings.STORAGE_PUBLIC_URL, StaticFiles(directory=settings.STORAGE_DIR), name="storage")


# Root endpoint
@app.get("/")
async def root():
    """الصفحة الرئيسية"""
    return {
        "name": "Syria School Needs - منصة احتياجات المدارس",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health",
    }


def run():
    import uvicorn
    uvicorn.run(
        "schoolneeds.main:app",
        host=settings.SERVER_HOST,
        port=settings.SERVER_PORT,
        reload=settings.DEBUG,
    )


if __name__ == "__main__":
    run()
