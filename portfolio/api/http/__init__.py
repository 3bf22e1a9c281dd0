from portfolio.api.http.health import router as health_router
from portfolio.api.http.auth import router as auth_router
from portfolio.api.http.projects import router as projects_router
from portfolio.api.http.content import router as content_router
from portfolio.api.http.analytics import router as analytics_router

__all__ = [
    "health_router",
    "auth_router",
    "projects_router",
    "content_router",
    "analytics_router"
]
