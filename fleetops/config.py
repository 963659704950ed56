from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    # ─── Application ───────────────────────────────────────────────────────────
    APP_NAME: str = "Fleet Vehicle Service"
    APP_ENV:  str = "development"
    APP_DEBUG: bool = True
    APP_HOST:  str = "0.0.0.0"
    APP_PORT:  int = 8000
    LOG_LEVEL: str = "INFO"

    # ─── Database ──────────────────────────────────────────────────────────────
    DATABASE_URL:          str  = "sqlite:///./fleetops.db"
    DATABASE_POOL_SIZE:    int  = 10
    DATABASE_MAX_OVERFLOW: int  = 20
    DATABASE_POOL_TIMEOUT: int  = 30
    DATABASE_ECHO:         bool = False

    # ─── Driver service ────────────────────────────────────────────────────────
    DRIVER_SERVICE_URL:     str   = "http://localhost:8081"
    DRIVER_SERVICE_TIMEOUT: float = 5.0

    # ─── Image store ───────────────────────────────────────────────────────────
    IMAGE_STORE_DIR:     str = "./uploads/vehicles"
    IMAGE_BASE_URL:      str = "/api/v1/vehicles/view"
    IMAGE_MAX_BYTES:     int = 5 * 1024 * 1024
    IMAGE_ALLOWED_TYPES: str = "image/jpeg,image/png,image/webp"

    # ─── CORS ──────────────────────────────────────────────────────────────────
    CORS_ORIGINS: str = "*"

    def get_cors_origins(self) -> List[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",")]

    def get_image_allowed_types(self) -> List[str]:
        return [t.strip() for t in self.IMAGE_ALLOWED_TYPES.split(",") if t.strip()]

    @property
    def is_production(self) -> bool:
        return self.APP_ENV == "production"

    @property
    def is_development(self) -> bool:
        return self.APP_ENV == "development"

    model_config = {"env_file": ".env", "case_sensitive": True, "extra": "ignore"}


settings = Settings()
