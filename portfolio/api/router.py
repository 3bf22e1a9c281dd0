from fastapi import APIRouter

from portfolio.api.http import analytics_router, auth_router, content_router, projects_router

api_router = APIRouter()
api_router.include_router(auth_router)
api_router.include_router(projects_router)
api_router.include_router(content_router)
api_router.include_router(analytics_router)
