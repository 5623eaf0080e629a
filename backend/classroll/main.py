"""
FastAPI Main Application
Classroll: учёт студентов по классам
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Iterable, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError, ResponseValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse, RedirectResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from classroll.core.config import Settings, settings as default_settings
from classroll.core.logging import setup_logging
from classroll.core.storage import ClassFileStore
from classroll.services.migration import migrate_legacy
from classroll.schemas.student import ErrorResponse
from classroll.api import api_router


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan events для инициализации и очистки"""
    app_settings: Settings = app.state.settings

    # Startup
    if app.state.configure_logging:
        setup_logging(app_settings.LOG_DIR, app_settings.LOG_FILE, app_settings.LOG_LEVEL)

    logger.info("Запуск Classroll API...")
    app.state.store = ClassFileStore(app_settings.DATA_DIR)
    # До приёма запросов; ошибки миграции не мешают старту
    migrate_legacy(app.state.store, app_settings.LEGACY_FILE)
    logger.info(f"Сервер слушает http://{app_settings.HOST}:{app_settings.PORT}")

    yield

    # Shutdown
    logger.info("Остановка Classroll API...")


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Ошибки в формате {"error": ...}"""
    return _error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Некорректное тело запроса -> 400"""
    logger.debug(f"Некорректный запрос {request.url.path}: {exc.errors()}")
    return _error_response(status.HTTP_400_BAD_REQUEST, "Invalid request body")


async def response_validation_exception_handler(request: Request, exc: ResponseValidationError):
    """Ответ не прошёл схему -> 500 без подробностей"""
    logger.error(f"Некорректный ответ {request.url.path}: {exc.errors()}")
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


def _error_response(status_code: int, message: str, headers=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump(),
        headers=headers,
    )


def _resolve_static(static_dir: Path, full_path: str, hidden_dirs: Iterable[Path] = ()) -> Optional[Path]:
    """Файл внутри static_dir или None (скрытые файлы и hidden_dirs не отдаются)"""
    root = static_dir.resolve()
    target = (root / full_path).resolve()

    if target != root and root not in target.parents:
        return None
    if any(part.startswith(".") for part in target.relative_to(root).parts):
        return None
    for hidden in hidden_dirs:
        hidden = Path(hidden).resolve()
        if target == hidden or hidden in target.parents:
            return None

    if target.is_dir():
        target = target / "index.html"
    return target if target.is_file() else None


def create_app(app_settings: Optional[Settings] = None, configure_logging: bool = True) -> FastAPI:
    """Собрать приложение с заданной конфигурацией"""
    app_settings = app_settings or default_settings

    app = FastAPI(
        title=app_settings.PROJECT_NAME,
        version=app_settings.VERSION,
        description="API для учёта студентов по классам",
        openapi_url=f"{app_settings.API_PREFIX}/openapi.json",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = app_settings
    app.state.configure_logging = configure_logging

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.BACKEND_CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(ResponseValidationError, response_validation_exception_handler)

    # Include API router
    app.include_router(api_router, prefix=app_settings.API_PREFIX)

    # Health check
    @app.get("/health")
    async def health_check():
        """Проверка здоровья API"""
        return {
            "status": "ok",
            "version": app_settings.VERSION,
            "service": "classroll"
        }

    # Статика из корня проекта, для остальных путей - basic.html
    @app.get("/{full_path:path}", include_in_schema=False)
    async def static_fallback(full_path: str, request: Request):
        """Отдать статический файл или страницу по умолчанию"""
        # /api/students/ -> /api/students
        api_root = app_settings.API_PREFIX.strip("/") + "/"
        if full_path.startswith(api_root) and full_path.endswith("/") and full_path.rstrip("/") != api_root.rstrip("/"):
            url = "/" + full_path.rstrip("/")
            if request.url.query:
                url = f"{url}?{request.url.query}"
            return RedirectResponse(url, status_code=status.HTTP_307_TEMPORARY_REDIRECT)

        static_dir = Path(app_settings.STATIC_DIR)

        target = _resolve_static(static_dir, full_path, hidden_dirs=[app_settings.LOG_DIR])
        if target is None:
            target = static_dir / app_settings.FALLBACK_PAGE

        if not target.is_file():
            return _error_response(status.HTTP_404_NOT_FOUND, "Not found")
        return FileResponse(target)

    return app


# Создаём FastAPI app
app = create_app()


def run() -> None:
    """Запуск через uvicorn"""
    import uvicorn

    uvicorn.run(
        "classroll.main:app",
        host=default_settings.HOST,
        port=default_settings.PORT,
        reload=default_settings.DEBUG,
        log_level="info"
    )


if __name__ == "__main__":
    run()
