import logging
import uuid
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio.core.auth import require_admin
from portfolio.core.db import get_db
from portfolio.core.rate_limit import client_ip, limiter, track_limit
from portfolio.core.responses import pagination, success_response
from portfolio.domains.analytics.schemas import TrackRequest, VisitorResponse
from portfolio.domains.analytics.services import TREND_BASIS_SESSION, AnalyticsService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.post("/track")
@limiter.limit(track_limit)
async def track_page_view(
    request: Request,
    track_data: TrackRequest,
    db: AsyncSession = Depends(get_db)
):
    """Учет просмотра страницы; сбой хранилища не влияет на ответ клиенту"""
    session_id = track_data.session_id or str(uuid.uuid4())
    analytics_service = AnalyticsService(db)

    try:
        await analytics_service.record_page_view(
            page=track_data.page,
            session_id=session_id,
            ip_address=client_ip(request),
            user_agent=request.headers.get("user-agent", ""),
            referrer=track_data.referrer,
            duration=track_data.duration
        )
    except Exception:
        logger.exception(f"Failed to record page view for session {session_id}")
        await db.rollback()

    return success_response({"sessionId": session_id})


@router.get("/stats", dependencies=[Depends(require_admin)])
async def get_stats(
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    db: AsyncSession = Depends(get_db)
):
    """Статистика посещений за период и стандартные интервалы"""
    analytics_service = AnalyticsService(db)
    summary = await analytics_service.get_summary(start_date, end_date)
    return success_response(summary)


@router.get("/visitors", dependencies=[Depends(require_admin)])
async def get_visitors(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    db: AsyncSession = Depends(get_db)
):
    """Список сессий посетителей"""
    analytics_service = AnalyticsService(db)
    visitors, total = await analytics_service.list_visitors(page, limit, start_date, end_date)

    return success_response({
        "visitors": [VisitorResponse.model_validate(v) for v in visitors],
        "pagination": pagination(page, limit, total),
    })


@router.get("/popular-pages", dependencies=[Depends(require_admin)])
async def get_popular_pages(
    limit: int = Query(10, ge=1, le=100),
    db: AsyncSession = Depends(get_db)
):
    """Самые популярные страницы"""
    analytics_service = AnalyticsService(db)
    popular_pages = await analytics_service.get_popular_pages(limit)
    return success_response({"popularPages": popular_pages})


@router.get("/trend", dependencies=[Depends(require_admin)])
async def get_visitor_trend(
    days: int = Query(30, ge=1, le=365),
    basis: str = Query(TREND_BASIS_SESSION),
    db: AsyncSession = Depends(get_db)
):
    """Динамика посещений по дням"""
    analytics_service = AnalyticsService(db)
    trend = await analytics_service.get_visitor_trend(days, basis)
    return success_response({"trend": trend})
