from portfolio.domains.projects.entities import Project, ProjectCategory, ProjectFilter, slugify
from portfolio.domains.projects.schemas import ProjectCreate, ProjectResponse, ProjectUpdate

__all__ = [
    "Project", "ProjectCategory", "ProjectFilter", "slugify",
    "ProjectCreate", "ProjectResponse", "ProjectUpdate"
]
