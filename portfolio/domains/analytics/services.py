import logging
import uuid
from collections import defaultdict
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Set, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from portfolio.core.exceptions import ValidationError
from portfolio.db.repositories.analytics_repository import AnalyticsRepository
from portfolio.domains.analytics.entities import VisitorSession, anonymize_ip, detect_device, utc_day
from portfolio.domains.analytics.schemas import PopularPage, StatsSummary, TrendPoint, VisitorStats

logger = logging.getLogger(__name__)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

TREND_BASIS_SESSION = "session"
TREND_BASIS_ACTIVITY = "activity"
TREND_BASES = (TREND_BASIS_SESSION, TREND_BASIS_ACTIVITY)


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def start_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


class AnalyticsService:
    """Сервис учета посещений и агрегированной статистики"""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.analytics_repository = AnalyticsRepository(session)

    async def record_page_view(
        self,
        page: str,
        session_id: Optional[str] = None,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
        referrer: Optional[str] = None,
        duration: Optional[float] = None
    ) -> str:
        """Учет просмотра страницы, возвращает идентификатор сессии"""
        session_id = session_id or str(uuid.uuid4())

        await self.analytics_repository.record_page_view(
            session_id=session_id,
            path=page,
            ip_address=anonymize_ip(ip_address),
            user_agent=user_agent or "",
            device=detect_device(user_agent),
            referrer=referrer,
            duration=duration
        )
        return session_id

    async def get_session(self, session_id: str) -> Optional[VisitorSession]:
        return await self.analytics_repository.get_by_session_id(session_id)

    async def get_visitor_stats(self, start: datetime, end: datetime) -> VisitorStats:
        """Статистика по сессиям, последний визит которых попадает в период"""
        visitors, page_views, unique_pages = await self.analytics_repository.visitor_stats(
            _as_utc(start), _as_utc(end)
        )
        return VisitorStats(
            total_visitors=visitors,
            total_page_views=page_views,
            unique_pages=unique_pages
        )

    async def get_summary(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None
    ) -> StatsSummary:
        """Статистика за весь период, сегодня, неделю и месяц"""
        now = datetime.now(timezone.utc)

        return StatsSummary(
            overall=await self.get_visitor_stats(start or EPOCH, end or now),
            today=await self.get_visitor_stats(start_of_day(now), now),
            this_week=await self.get_visitor_stats(now - timedelta(days=7), now),
            this_month=await self.get_visitor_stats(now - timedelta(days=30), now)
        )

    async def list_visitors(
        self,
        page: int = 1,
        limit: int = 20,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None
    ) -> Tuple[List[VisitorSession], int]:
        """Список сессий по убыванию последнего визита"""
        return await self.analytics_repository.list_sessions(
            offset=(page - 1) * limit,
            limit=limit,
            start=_as_utc(start) if start else None,
            end=_as_utc(end) if end else None
        )

    async def get_popular_pages(self, limit: int = 10) -> List[PopularPage]:
        """Самые просматриваемые страницы"""
        rows = await self.analytics_repository.popular_pages(limit)
        return [PopularPage(path=path, views=views) for path, views in rows]

    async def get_visitor_trend(self, days: int = 30, basis: str = TREND_BASIS_SESSION) -> List[TrendPoint]:
        """Посещаемость по дням за последние days дней"""
        if basis not in TREND_BASES:
            raise ValidationError(
                errors=[{"field": "basis", "message": f"Basis must be one of: {', '.join(TREND_BASES)}"}]
            )

        start = start_of_day(datetime.now(timezone.utc) - timedelta(days=days))
        visitors: Dict[str, int] = defaultdict(int)
        page_views: Dict[str, int] = defaultdict(int)

        if basis == TREND_BASIS_SESSION:
            # сессия относится ко дню первого визита вместе со всеми своими просмотрами
            for first_visit, total in await self.analytics_repository.sessions_started_since(start):
                day = utc_day(first_visit).isoformat()
                visitors[day] += 1
                page_views[day] += total
        else:
            active: Dict[str, Set[uuid.UUID]] = defaultdict(set)
            for timestamp, session_pk in await self.analytics_repository.page_views_since(start):
                day = utc_day(timestamp).isoformat()
                active[day].add(session_pk)
                page_views[day] += 1
            for day, sessions in active.items():
                visitors[day] = len(sessions)

        return [
            TrendPoint(date=day, visitors=visitors[day], page_views=page_views[day])
            for day in sorted(visitors)
        ]
