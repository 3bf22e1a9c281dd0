import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio.core.auth import require_admin
from portfolio.core.db import get_db
from portfolio.core.responses import pagination, success_response
from portfolio.domains.identity.entities import User
from portfolio.domains.projects.entities import DEFAULT_SORT, ProjectCategory, ProjectFilter
from portfolio.domains.projects.schemas import ProjectCreate, ProjectResponse, ProjectUpdate
from portfolio.domains.projects.services import ProjectService

router = APIRouter(prefix="/projects", tags=["projects"])


@router.get("")
async def list_projects(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    category: Optional[ProjectCategory] = Query(None),
    featured: Optional[bool] = Query(None),
    search: Optional[str] = Query(None, max_length=100),
    sort: str = Query(DEFAULT_SORT),
    db: AsyncSession = Depends(get_db)
):
    """Получение списка проектов"""
    project_service = ProjectService(db)

    filters = ProjectFilter(
        category=category.value if category else None,
        featured=featured,
        search=search
    )
    projects, total = await project_service.list_projects(filters, page=page, limit=limit, sort=sort)

    return success_response({
        "projects": [ProjectResponse.model_validate(p) for p in projects],
        "pagination": pagination(page, limit, total),
    })


@router.get("/{slug}")
async def get_project(slug: str, db: AsyncSession = Depends(get_db)):
    """Получение проекта по slug"""
    project_service = ProjectService(db)
    project = await project_service.get_by_slug(slug)
    return success_response({"project": ProjectResponse.model_validate(project)})


@router.post("/{project_id}/view")
async def increment_view(project_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    """Учет просмотра проекта"""
    project_service = ProjectService(db)
    await project_service.increment_view(project_id)
    return success_response(message="View count incremented")


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_project(
    project_data: ProjectCreate,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Создание нового проекта"""
    project_service = ProjectService(db)
    project = await project_service.create_project(project_data)
    return success_response(
        {"project": ProjectResponse.model_validate(project)},
        "Project created successfully"
    )


@router.put("/{project_id}")
async def update_project(
    project_id: uuid.UUID,
    update_data: ProjectUpdate,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Обновление проекта"""
    project_service = ProjectService(db)
    project = await project_service.update_project(project_id, update_data)
    return success_response(
        {"project": ProjectResponse.model_validate(project)},
        "Project updated successfully"
    )


@router.delete("/{project_id}")
async def delete_project(
    project_id: uuid.UUID,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Удаление проекта"""
    project_service = ProjectService(db)
    await project_service.delete_project(project_id)
    return success_response(message="Project deleted successfully")
