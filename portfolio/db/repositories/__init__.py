from portfolio.db.repositories.user_repository import UserRepository
from portfolio.db.repositories.project_repository import ProjectRepository
from portfolio.db.repositories.content_repository import ContentRepository
from portfolio.db.repositories.analytics_repository import AnalyticsRepository

__all__ = [
    "UserRepository",
    "ProjectRepository",
    "ContentRepository",
    "AnalyticsRepository"
]
