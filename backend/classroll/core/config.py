"""
Core configuration для Classroll
Использует pydantic-settings для валидации
"""

from pathlib import Path
from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict


# Корень проекта (backend/classroll/core/config.py -> 3 уровня вверх)
BASE_DIR = Path(__file__).resolve().parents[3]


class Settings(BaseSettings):
    """Конфигурация приложения"""

    # API
    API_PREFIX: str = "/api"
    PROJECT_NAME: str = "Classroll API"
    VERSION: str = "1.0.0"
    DEBUG: bool = False

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    # File Storage
    DATA_DIR: Path = BASE_DIR / "data"
    LEGACY_FILE: Path = BASE_DIR / "students.json"

    # Static frontend
    STATIC_DIR: Path = BASE_DIR
    FALLBACK_PAGE: str = "basic.html"

    # CORS
    BACKEND_CORS_ORIGINS: List[str] = ["*"]

    # Logging
    LOG_DIR: Path = BASE_DIR / "logs"
    LOG_FILE: str = "classroll.log"
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )


# Singleton instance
settings = Settings()
