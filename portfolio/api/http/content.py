from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio.core.auth import require_admin
from portfolio.core.db import get_db
from portfolio.core.responses import success_response
from portfolio.domains.content.entities import Content, ContentSection
from portfolio.domains.content.schemas import ContentResponse, ContentUpsert
from portfolio.domains.content.services import ContentService
from portfolio.domains.identity.entities import User

router = APIRouter(prefix="/content", tags=["content"])


def _serialize(content: Content) -> dict:
    # у незаполненного раздела нет id и дат, в ответе остаются только section и data
    return ContentResponse.model_validate(content).model_dump(
        mode="json", by_alias=True, exclude_none=True
    )


@router.get("")
async def get_all_content(db: AsyncSession = Depends(get_db)):
    """Получение всех разделов"""
    content_service = ContentService(db)
    contents = await content_service.get_all()
    return success_response({"content": [_serialize(c) for c in contents]})


@router.get("/{section}")
async def get_content(section: ContentSection, db: AsyncSession = Depends(get_db)):
    """Получение раздела по имени"""
    content_service = ContentService(db)
    content = await content_service.get_section(section.value)
    return success_response({"content": _serialize(content)})


@router.post("")
async def upsert_content(
    content_data: ContentUpsert,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Создание или замена содержимого раздела"""
    content_service = ContentService(db)
    content = await content_service.upsert(
        content_data.section,
        content_data.data.model_dump(mode="json", by_alias=True, exclude_unset=True),
        editor_id=current_user.id
    )
    return success_response({"content": _serialize(content)}, "Content saved successfully")


@router.delete("/{section}")
async def delete_content(
    section: ContentSection,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Удаление раздела"""
    content_service = ContentService(db)
    await content_service.delete(section.value)
    return success_response(message="Content deleted successfully")
