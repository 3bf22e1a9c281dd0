import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from portfolio.api.http import health_router
from portfolio.api.router import api_router
from portfolio.core.config import Settings, get_settings
from portfolio.core.db import Database
from portfolio.core.errors import register_exception_handlers
from portfolio.core.logging import setup_logging
from portfolio.core.rate_limit import limiter

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Сборка приложения: настройки, БД, обработчики ошибок и роутеры"""
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        database = Database(settings.database_url, echo=settings.db_echo)
        app.state.db = database
        if settings.create_tables_on_startup:
            await database.create_all()
        logger.info(f"Portfolio API started ({settings.environment})")
        try:
            yield
        finally:
            await database.dispose()
            logger.info("Portfolio API stopped")

    app = FastAPI(
        title="Portfolio CMS",
        description="API портфолио: проекты, содержимое разделов и статистика посещений",
        version="1.0.0",
        lifespan=lifespan
    )

    # Настройка CORS для работы с frontend
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_url],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    limiter.enabled = settings.rate_limit_enabled
    app.state.limiter = limiter

    register_exception_handlers(app)

    # Подключаем роутеры
    app.include_router(health_router)
    app.include_router(api_router, prefix=settings.api_prefix)

    return app


app = create_app()
