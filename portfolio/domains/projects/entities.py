import enum
import re
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from portfolio.core.exceptions import ValidationError


class ProjectCategory(str, enum.Enum):
    AI_GENERATED = "ai-generated"
    MANUAL = "manual"
    HYBRID = "hybrid"


# camelCase имя поля сортировки -> атрибут модели
SORT_FIELDS = {
    "createdAt": "created_at",
    "updatedAt": "updated_at",
    "title": "title",
    "viewCount": "view_count",
    "featured": "featured",
}
DEFAULT_SORT = "-createdAt"

_NON_SLUG_CHARS = re.compile(r"[^a-z0-9]+")


def slugify(title: str) -> str:
    """Slug из заголовка: нижний регистр, [a-z0-9] и одиночные дефисы"""
    return _NON_SLUG_CHARS.sub("-", title.lower()).strip("-")


def parse_sort(sort: Optional[str]) -> Tuple[str, bool]:
    """Разбор параметра сортировки вида '-createdAt' в (атрибут, по убыванию)"""
    sort = (sort or DEFAULT_SORT).strip()
    descending = sort.startswith("-")
    name = sort.lstrip("-")

    if name not in SORT_FIELDS:
        raise ValidationError(
            errors=[{
                "field": "sort",
                "message": f"Unknown sort field '{name}'. Allowed: {', '.join(SORT_FIELDS)}"
            }]
        )
    return SORT_FIELDS[name], descending


class ProjectFilter:
    """Фильтр списка проектов, пустые условия не применяются"""

    def __init__(
        self,
        category: Optional[str] = None,
        featured: Optional[bool] = None,
        search: Optional[str] = None
    ):
        self.category = category
        self.featured = featured
        self.search = search.strip() if search and search.strip() else None


class Project:
    """Сущность проекта портфолио"""

    # поля, которые можно менять через обновление
    EDITABLE_FIELDS = (
        "title", "description", "full_description", "technologies", "category",
        "images", "live_url", "github_url", "featured", "ai_prompts",
    )
    # поля, для которых null означает "очистить"
    NULLABLE_FIELDS = ("full_description", "live_url", "github_url")

    def __init__(
        self,
        id: uuid.UUID,
        title: str,
        slug: str,
        description: str,
        full_description: Optional[str] = None,
        technologies: Optional[List[str]] = None,
        category: str = ProjectCategory.MANUAL.value,
        images: Optional[Dict[str, Any]] = None,
        live_url: Optional[str] = None,
        github_url: Optional[str] = None,
        featured: bool = False,
        ai_prompts: Optional[List[str]] = None,
        view_count: int = 0,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None
    ):
        self.id = id
        self.title = title
        self.slug = slug
        self.description = description
        self.full_description = full_description
        self.technologies = list(technologies or [])
        self.category = category
        self.images = dict(images or {"gallery": []})
        self.live_url = live_url
        self.github_url = github_url
        self.featured = featured
        self.ai_prompts = list(ai_prompts or [])
        self.view_count = view_count
        self.created_at = created_at or datetime.now(timezone.utc)
        self.updated_at = updated_at or datetime.now(timezone.utc)

    def rename(self, title: str) -> None:
        """Смена заголовка вместе со slug"""
        slug = slugify(title)
        if not slug:
            raise ValidationError(errors=[{"field": "title", "message": "Title must contain letters or digits"}])
        self.title = title
        self.slug = slug

    def apply_changes(self, changes: Dict[str, Any]) -> None:
        """Применение частичного обновления"""
        for field, value in changes.items():
            if field not in self.EDITABLE_FIELDS:
                continue
            if value is None and field not in self.NULLABLE_FIELDS:
                continue
            if field == "title":
                self.rename(value)
            else:
                setattr(self, field, value)
        self.updated_at = datetime.now(timezone.utc)

    @classmethod
    def create_project(cls, title: str, description: str, **fields: Any) -> "Project":
        """Создание нового проекта, slug выводится из заголовка"""
        project = cls(
            id=uuid.uuid4(),
            title=title,
            slug="",
            description=description,
            **{k: v for k, v in fields.items() if k in cls.EDITABLE_FIELDS and v is not None}
        )
        project.rename(title)
        return project

    def __eq__(self, other) -> bool:
        if not isinstance(other, Project):
            return False
        return self.id == other.id

    def __repr__(self) -> str:
        return f"Project(id={self.id}, slug={self.slug}, views={self.view_count})"
