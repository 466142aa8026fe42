from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    # App
    APP_NAME: str = "Syria School Needs"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    ALLOWED_ORIGINS: str = "http://localhost:5173,http://localhost:3000,http://127.0.0.1:5173"

    # Server
    SERVER_HOST: str = "0.0.0.0"
    SERVER_PORT: int = 8000

    # Database
    DATABASE_URL: str = "postgresql+asyncpg://schoolneeds:schoolneeds_pass@db:5432/schoolneeds"

    # JWT
    JWT_SECRET_KEY: str = "change-this-to-a-secure-random-string"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24  # يوم واحد

    # Localisation (ar, en)
    DEFAULT_LANGUAGE: str = "ar"

    # Object storage
    STORAGE_DIR: str = "./storage"
    STORAGE_PUBLIC_URL: str = "/storage"
    STORAGE_BUCKET: str = "school-images"
    MAX_UPLOAD_BYTES: int = 5 * 1024 * 1024

    # Realtime: events buffered per connection before dropping
    REALTIME_QUEUE_SIZE: int = 100

    # Listings
    NOTIFICATIONS_PAGE_SIZE: int = 10
    AUDIT_LOG_LIMIT: int = 50

    @property
    def allowed_origins_list(self) -> List[str]:
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",") if origin.strip()]

    model_config = {"env_file": ".env", "case_sensitive": True}


settings = Settings()
