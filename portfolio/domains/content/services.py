import logging
import uuid
from typing import Any, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio.core.exceptions import NotFound, ValidationError
from portfolio.db.repositories.content_repository import ContentRepository
from portfolio.domains.content.entities import Content, ContentSection
from portfolio.domains.content.schemas import data_model_for

logger = logging.getLogger(__name__)

SECTIONS = tuple(s.value for s in ContentSection)


def _check_section(section: str) -> str:
    if section not in SECTIONS:
        raise ValidationError(
            errors=[{"field": "section", "message": f"Section must be one of: {', '.join(SECTIONS)}"}]
        )
    return section


class ContentService:
    """Сервис для работы с содержимым разделов сайта"""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.content_repository = ContentRepository(session)

    async def get_all(self) -> List[Content]:
        """Все сохраненные разделы"""
        return await self.content_repository.get_all()

    async def get_section(self, section: str) -> Content:
        """Раздел по имени; незаполненный раздел возвращается с пустыми данными"""
        _check_section(section)
        content = await self.content_repository.get_by_section(section)
        return content or Content.empty(section)

    async def upsert(
        self,
        section: str,
        data: Dict[str, Any],
        editor_id: Optional[uuid.UUID] = None
    ) -> Content:
        """Сохранение раздела целиком, последняя запись побеждает"""
        _check_section(section)

        try:
            payload = data_model_for(section).model_validate(data)
        except PydanticValidationError as e:
            errors = [
                {"field": ".".join(["data", *map(str, err["loc"])]), "message": err["msg"]}
                for err in e.errors()
            ]
            raise ValidationError(errors=errors)

        normalized = payload.model_dump(mode="json", by_alias=True, exclude_unset=True)
        content = await self.content_repository.upsert(section, normalized, editor_id)
        logger.info(f"Content section '{section}' saved by {editor_id}")
        return content

    async def delete(self, section: str) -> None:
        """Удаление раздела"""
        _check_section(section)
        deleted = await self.content_repository.delete(section)
        if not deleted:
            raise NotFound("Content section not found")
        logger.info(f"Content section '{section}' deleted")
