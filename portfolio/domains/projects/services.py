import logging
import uuid
from typing import List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from portfolio.core.exceptions import NotFound
from portfolio.db.repositories.project_repository import ProjectRepository
from portfolio.domains.projects.entities import Project, ProjectFilter, parse_sort
from portfolio.domains.projects.schemas import ProjectCreate, ProjectUpdate

logger = logging.getLogger(__name__)


class ProjectService:
    """Сервис для работы с проектами портфолио"""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.project_repository = ProjectRepository(session)

    async def list_projects(
        self,
        filters: ProjectFilter,
        page: int = 1,
        limit: int = 10,
        sort: Optional[str] = None
    ) -> Tuple[List[Project], int]:
        """Список проектов с фильтрацией, сортировкой и пагинацией"""
        sort_field, descending = parse_sort(sort)
        offset = (page - 1) * limit

        return await self.project_repository.list(
            filters,
            offset=offset,
            limit=limit,
            sort_field=sort_field,
            descending=descending
        )

    async def get_by_slug(self, slug: str) -> Project:
        """Получение проекта по slug"""
        project = await self.project_repository.get_by_slug(slug)
        if project is None:
            raise NotFound("Project not found")
        return project

    async def increment_view(self, project_id: uuid.UUID) -> None:
        """Учет просмотра, отсутствующий проект не является ошибкой"""
        await self.project_repository.increment_view(project_id)

    async def create_project(self, project_data: ProjectCreate) -> Project:
        """Создание нового проекта"""
        fields = project_data.model_dump(mode="json", exclude={"title", "description"})
        project = Project.create_project(
            title=project_data.title,
            description=project_data.description,
            **fields
        )

        project = await self.project_repository.create(project)
        logger.info(f"Project {project.id} created with slug '{project.slug}'")
        return project

    async def update_project(self, project_id: uuid.UUID, update_data: ProjectUpdate) -> Project:
        """Частичное обновление проекта"""
        project = await self.project_repository.get_by_id(project_id)
        if project is None:
            raise NotFound("Project not found")

        project.apply_changes(update_data.model_dump(mode="json", exclude_unset=True))

        project = await self.project_repository.update(project)
        logger.info(f"Project {project.id} updated")
        return project

    async def delete_project(self, project_id: uuid.UUID) -> None:
        """Удаление проекта"""
        deleted = await self.project_repository.delete(project_id)
        if not deleted:
            raise NotFound("Project not found")
        logger.info(f"Project {project_id} deleted")
