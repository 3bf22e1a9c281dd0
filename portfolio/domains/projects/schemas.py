from datetime import datetime
from typing import List, Optional
import uuid

from pydantic import AnyHttpUrl, BaseModel, Field, TypeAdapter, field_validator

from portfolio.core.schemas import CamelModel
from portfolio.domains.projects.entities import ProjectCategory, slugify

_http_url = TypeAdapter(AnyHttpUrl)


def _check_title(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    v = v.strip()
    if not v:
        raise ValueError('Title cannot be empty')
    if not slugify(v):
        raise ValueError('Title must contain letters or digits')
    return v


def _check_url(v: Optional[str]) -> Optional[str]:
    # пустая строка допустима и означает "ссылки нет"
    if v is None or v == "":
        return v
    try:
        _http_url.validate_python(v)
    except ValueError:
        raise ValueError('Must be a valid http(s) URL')
    return v


class ProjectImages(BaseModel):
    """Изображения проекта"""
    thumbnail: Optional[str] = None
    gallery: List[str] = Field(default_factory=list)


class ProjectCreate(CamelModel):
    """Схема для создания проекта"""
    title: str = Field(..., max_length=100)
    description: str = Field(..., min_length=1, max_length=500)
    full_description: Optional[str] = Field(None, max_length=10000)
    technologies: List[str] = Field(default_factory=list)
    category: ProjectCategory = ProjectCategory.MANUAL
    images: ProjectImages = Field(default_factory=ProjectImages)
    live_url: Optional[str] = None
    github_url: Optional[str] = None
    featured: bool = False
    ai_prompts: List[str] = Field(default_factory=list)

    @field_validator('title')
    @classmethod
    def validate_title(cls, v):
        return _check_title(v)

    @field_validator('live_url', 'github_url')
    @classmethod
    def validate_url(cls, v):
        return _check_url(v)


class ProjectUpdate(CamelModel):
    """Схема для обновления проекта, все поля необязательны"""
    title: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = Field(None, min_length=1, max_length=500)
    full_description: Optional[str] = Field(None, max_length=10000)
    technologies: Optional[List[str]] = None
    category: Optional[ProjectCategory] = None
    images: Optional[ProjectImages] = None
    live_url: Optional[str] = None
    github_url: Optional[str] = None
    featured: Optional[bool] = None
    ai_prompts: Optional[List[str]] = None

    @field_validator('title')
    @classmethod
    def validate_title(cls, v):
        return _check_title(v)

    @field_validator('live_url', 'github_url')
    @classmethod
    def validate_url(cls, v):
        return _check_url(v)


class ProjectResponse(CamelModel):
    """Схема для ответа с данными проекта"""
    id: uuid.UUID
    title: str
    slug: str
    description: str
    full_description: Optional[str] = None
    technologies: List[str]
    category: str
    images: ProjectImages
    live_url: Optional[str] = None
    github_url: Optional[str] = None
    featured: bool
    ai_prompts: List[str]
    view_count: int
    created_at: datetime
    updated_at: datetime
