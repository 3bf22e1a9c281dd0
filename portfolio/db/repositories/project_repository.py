from typing import List, Optional, Tuple
import uuid

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio.core.exceptions import DuplicateKey
from portfolio.db.models.project import Project as ProjectModel
from portfolio.domains.projects.entities import Project, ProjectFilter


def _escape_like(value: str) -> str:
    """Экранирование спецсимволов LIKE в пользовательском вводе"""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class ProjectRepository:
    """Репозиторий для работы с проектами"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, project: Project) -> Project:
        """Создание нового проекта"""
        db_project = ProjectModel(
            id=project.id,
            title=project.title,
            slug=project.slug,
            description=project.description,
            full_description=project.full_description,
            technologies=project.technologies,
            category=project.category,
            images=project.images,
            live_url=project.live_url,
            github_url=project.github_url,
            featured=project.featured,
            ai_prompts=project.ai_prompts,
            view_count=0
        )

        self.session.add(db_project)
        try:
            await self.session.commit()
            await self.session.refresh(db_project)
            return self._to_domain(db_project)
        except IntegrityError:
            await self.session.rollback()
            raise DuplicateKey("Duplicate value for slug. Please use another value.")

    async def get_by_id(self, project_id: uuid.UUID) -> Optional[Project]:
        """Получение проекта по id"""
        result = await self.session.execute(
            select(ProjectModel)
            .where(ProjectModel.id == project_id)
            .execution_options(populate_existing=True)
        )
        db_project = result.scalar_one_or_none()
        return self._to_domain(db_project) if db_project else None

    async def get_by_slug(self, slug: str) -> Optional[Project]:
        """Получение проекта по slug"""
        result = await self.session.execute(
            select(ProjectModel)
            .where(ProjectModel.slug == slug)
            .execution_options(populate_existing=True)
        )
        db_project = result.scalar_one_or_none()
        return self._to_domain(db_project) if db_project else None

    async def list(
        self,
        filters: ProjectFilter,
        offset: int = 0,
        limit: int = 10,
        sort_field: str = "created_at",
        descending: bool = True
    ) -> Tuple[List[Project], int]:
        """Список проектов с фильтрами и общее число совпадений"""
        conditions = []

        if filters.category:
            conditions.append(ProjectModel.category == filters.category)

        if filters.featured is not None:
            conditions.append(ProjectModel.featured == filters.featured)

        if filters.search:
            pattern = f"%{_escape_like(filters.search)}%"
            conditions.append(or_(
                ProjectModel.title.ilike(pattern, escape="\\"),
                ProjectModel.description.ilike(pattern, escape="\\"),
                self._technology_matches(pattern),
            ))

        total_result = await self.session.execute(
            select(func.count(ProjectModel.id)).where(*conditions)
        )
        total = total_result.scalar() or 0

        column = getattr(ProjectModel, sort_field)
        order = column.desc() if descending else column.asc()

        result = await self.session.execute(
            select(ProjectModel)
            .where(*conditions)
            .order_by(order, ProjectModel.id)
            .offset(offset)
            .limit(limit)
        )
        db_projects = result.scalars().all()
        return [self._to_domain(p) for p in db_projects], total

    def _technology_matches(self, pattern: str):
        """Совпадение с любым отдельным тегом технологии, а не с JSON-текстом колонки"""
        if self.session.bind.dialect.name == "postgresql":
            tags = func.json_array_elements_text(ProjectModel.technologies).table_valued("value")
        else:
            tags = func.json_each(ProjectModel.technologies).table_valued("value")

        return (
            select(tags.c.value)
            .where(tags.c.value.ilike(pattern, escape="\\"))
            .correlate(ProjectModel.__table__)
            .exists()
        )

    async def update(self, project: Project) -> Project:
        """Обновление проекта, счетчик просмотров не трогается"""
        stmt = (
            update(ProjectModel)
            .where(ProjectModel.id == project.id)
            .values(
                title=project.title,
                slug=project.slug,
                description=project.description,
                full_description=project.full_description,
                technologies=project.technologies,
                category=project.category,
                images=project.images,
                live_url=project.live_url,
                github_url=project.github_url,
                featured=project.featured,
                ai_prompts=project.ai_prompts,
                updated_at=project.updated_at
            )
        )

        try:
            await self.session.execute(stmt)
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            raise DuplicateKey("Duplicate value for slug. Please use another value.")

        return await self.get_by_id(project.id)

    async def delete(self, project_id: uuid.UUID) -> bool:
        """Удаление проекта"""
        stmt = delete(ProjectModel).where(ProjectModel.id == project_id)
        result = await self.session.execute(stmt)
        await self.session.commit()
        return result.rowcount > 0

    async def increment_view(self, project_id: uuid.UUID) -> None:
        """Атомарное увеличение счетчика просмотров одним UPDATE"""
        stmt = (
            update(ProjectModel)
            .where(ProjectModel.id == project_id)
            .values(view_count=ProjectModel.view_count + 1)
            .execution_options(synchronize_session=False)
        )
        await self.session.execute(stmt)
        await self.session.commit()

    def _to_domain(self, db_project: ProjectModel) -> Project:
        """Преобразование модели БД в доменную сущность"""
        return Project(
            id=db_project.id,
            title=db_project.title,
            slug=db_project.slug,
            description=db_project.description,
            full_description=db_project.full_description,
            technologies=db_project.technologies,
            category=db_project.category,
            images=db_project.images,
            live_url=db_project.live_url,
            github_url=db_project.github_url,
            featured=db_project.featured,
            ai_prompts=db_project.ai_prompts,
            view_count=db_project.view_count,
            created_at=db_project.created_at,
            updated_at=db_project.updated_at
        )
