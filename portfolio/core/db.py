import logging
from typing import AsyncIterator

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

logger = logging.getLogger(__name__)

# Базовый класс для моделей
Base = declarative_base()


class Database:
    """Подключение к БД на время жизни процесса"""

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self.engine: AsyncEngine = create_async_engine(url, future=True, echo=echo)
        self.session_factory = async_sessionmaker(
            bind=self.engine, class_=AsyncSession, expire_on_commit=False
        )

    async def create_all(self) -> None:
        """Создание таблиц без миграций (dev / тесты)"""
        # модели должны быть импортированы до create_all
        import portfolio.db.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables ensured")

    async def dispose(self) -> None:
        await self.engine.dispose()
        logger.info("Database engine disposed")


# Функция для dependency injection в FastAPI
async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    database: Database = request.app.state.db
    async with database.session_factory() as session:
        yield session
