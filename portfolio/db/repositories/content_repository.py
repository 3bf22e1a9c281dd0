import logging
from typing import Any, Dict, List, Optional
import uuid

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio.db.base import utcnow
from portfolio.db.models.content import Content as ContentModel
from portfolio.domains.content.entities import Content

logger = logging.getLogger(__name__)


class ContentRepository:
    """Репозиторий для работы с содержимым разделов"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_section(self, section: str) -> Optional[Content]:
        """Получение раздела по имени"""
        result = await self.session.execute(
            select(ContentModel)
            .where(ContentModel.section == section)
            .execution_options(populate_existing=True)
        )
        db_content = result.scalar_one_or_none()
        return self._to_domain(db_content) if db_content else None

    async def get_all(self) -> List[Content]:
        """Все сохраненные разделы"""
        result = await self.session.execute(
            select(ContentModel).order_by(ContentModel.section)
        )
        return [self._to_domain(c) for c in result.scalars().all()]

    async def upsert(
        self,
        section: str,
        data: Dict[str, Any],
        updated_by: Optional[uuid.UUID] = None
    ) -> Content:
        """Сохранение раздела: обновление существующей записи или вставка новой"""
        # вторая попытка нужна, если параллельный запрос вставил раздел первым
        for attempt in range(2):
            now = utcnow()
            result = await self.session.execute(
                update(ContentModel)
                .where(ContentModel.section == section)
                .values(data=data, updated_by=updated_by, updated_at=now)
            )

            if result.rowcount == 0:
                self.session.add(ContentModel(
                    section=section,
                    data=data,
                    updated_by=updated_by,
                    created_at=now,
                    updated_at=now
                ))

            try:
                await self.session.commit()
            except IntegrityError:
                await self.session.rollback()
                if attempt:
                    raise
                logger.info(f"Concurrent insert of section '{section}', retrying as update")
                continue

            return await self.get_by_section(section)

    async def delete(self, section: str) -> bool:
        """Удаление раздела"""
        stmt = delete(ContentModel).where(ContentModel.section == section)
        result = await self.session.execute(stmt)
        await self.session.commit()
        return result.rowcount > 0

    def _to_domain(self, db_content: ContentModel) -> Content:
        """Преобразование модели БД в доменную сущность"""
        return Content(
            id=db_content.id,
            section=db_content.section,
            data=db_content.data,
            updated_by=db_content.updated_by,
            created_at=db_content.created_at,
            updated_at=db_content.updated_at
        )
