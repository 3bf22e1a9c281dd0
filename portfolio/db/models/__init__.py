from portfolio.db.models.user import User
from portfolio.db.models.project import Project
from portfolio.db.models.content import Content
from portfolio.db.models.analytics import AnalyticsSession, PageView

__all__ = [
    "User",
    "Project",
    "Content",
    "AnalyticsSession",
    "PageView",
]
