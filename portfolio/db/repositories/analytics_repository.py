import logging
from datetime import datetime
from typing import List, Optional, Tuple
import uuid

from sqlalchemy import distinct, func, insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio.db.base import utcnow
from portfolio.db.models.analytics import AnalyticsSession as SessionModel, PageView as PageViewModel
from portfolio.domains.analytics.entities import PageView, VisitorSession

logger = logging.getLogger(__name__)


class AnalyticsRepository:
    """Репозиторий для работы с сессиями посетителей и просмотрами"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def record_page_view(
        self,
        session_id: str,
        path: str,
        ip_address: str,
        user_agent: str,
        device: str,
        referrer: Optional[str] = None,
        duration: Optional[float] = None
    ) -> uuid.UUID:
        """Создание или обновление сессии и добавление просмотра в одной транзакции"""
        for attempt in range(2):
            now = utcnow()
            try:
                result = await self.session.execute(
                    select(SessionModel.id).where(SessionModel.session_id == session_id)
                )
                session_pk = result.scalar_one_or_none()

                if session_pk is None:
                    session_pk = uuid.uuid4()
                    await self.session.execute(
                        insert(SessionModel).values(
                            id=session_pk,
                            session_id=session_id,
                            ip_address=ip_address,
                            user_agent=user_agent,
                            referrer=referrer or "",
                            device=device,
                            first_visit=now,
                            last_visit=now,
                            created_at=now,
                            updated_at=now
                        )
                    )
                else:
                    await self.session.execute(
                        update(SessionModel)
                        .where(SessionModel.id == session_pk)
                        .values(
                            ip_address=ip_address,
                            user_agent=user_agent,
                            referrer=referrer or "",
                            device=device,
                            last_visit=now,
                            updated_at=now
                        )
                        .execution_options(synchronize_session=False)
                    )

                await self.session.execute(
                    insert(PageViewModel).values(
                        session_pk=session_pk,
                        path=path,
                        timestamp=now,
                        duration=duration
                    )
                )
                await self.session.commit()
                return session_pk
            except IntegrityError:
                await self.session.rollback()
                if attempt:
                    raise
                logger.info(f"Concurrent insert of session {session_id}, retrying as update")

    async def get_by_session_id(self, session_id: str) -> Optional[VisitorSession]:
        """Получение сессии по идентификатору клиента"""
        result = await self.session.execute(
            select(SessionModel)
            .where(SessionModel.session_id == session_id)
            .execution_options(populate_existing=True)
        )
        db_session = result.scalar_one_or_none()
        return self._to_domain(db_session) if db_session else None

    def _last_visit_range(self, start: Optional[datetime], end: Optional[datetime]) -> list:
        conditions = []
        if start is not None:
            conditions.append(SessionModel.last_visit >= start)
        if end is not None:
            conditions.append(SessionModel.last_visit <= end)
        return conditions

    async def visitor_stats(self, start: datetime, end: datetime) -> Tuple[int, int, int]:
        """Число сессий, просмотров и уникальных страниц для сессий с last_visit в периоде"""
        conditions = self._last_visit_range(start, end)

        visitors = await self.session.execute(
            select(func.count(SessionModel.id)).where(*conditions)
        )
        pages = await self.session.execute(
            select(func.count(PageViewModel.seq), func.count(distinct(PageViewModel.path)))
            .join(SessionModel, PageViewModel.session_pk == SessionModel.id)
            .where(*conditions)
        )
        total_page_views, unique_pages = pages.one()

        return visitors.scalar() or 0, total_page_views or 0, unique_pages or 0

    async def list_sessions(
        self,
        offset: int = 0,
        limit: int = 20,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None
    ) -> Tuple[List[VisitorSession], int]:
        """Сессии по убыванию последнего визита и их общее число"""
        conditions = self._last_visit_range(start, end)

        total_result = await self.session.execute(
            select(func.count(SessionModel.id)).where(*conditions)
        )
        total = total_result.scalar() or 0

        result = await self.session.execute(
            select(SessionModel)
            .where(*conditions)
            .order_by(SessionModel.last_visit.desc(), SessionModel.id)
            .offset(offset)
            .limit(limit)
            .execution_options(populate_existing=True)
        )
        return [self._to_domain(s) for s in result.scalars().all()], total

    async def popular_pages(self, limit: int = 10) -> List[Tuple[str, int]]:
        """Самые просматриваемые страницы"""
        views = func.count(PageViewModel.seq).label("views")
        result = await self.session.execute(
            select(PageViewModel.path, views)
            .group_by(PageViewModel.path)
            .order_by(views.desc(), PageViewModel.path)
            .limit(limit)
        )
        return [(path, count) for path, count in result.all()]

    async def sessions_started_since(self, start: datetime) -> List[Tuple[datetime, int]]:
        """Первый визит и общее число просмотров для сессий, начатых после start"""
        page_totals = (
            select(PageViewModel.session_pk, func.count(PageViewModel.seq).label("total"))
            .group_by(PageViewModel.session_pk)
            .subquery()
        )
        result = await self.session.execute(
            select(SessionModel.first_visit, func.coalesce(page_totals.c.total, 0))
            .outerjoin(page_totals, page_totals.c.session_pk == SessionModel.id)
            .where(SessionModel.first_visit >= start)
        )
        return [(first_visit, total) for first_visit, total in result.all()]

    async def page_views_since(self, start: datetime) -> List[Tuple[datetime, uuid.UUID]]:
        """Время и сессия каждого просмотра начиная с start"""
        result = await self.session.execute(
            select(PageViewModel.timestamp, PageViewModel.session_pk)
            .where(PageViewModel.timestamp >= start)
        )
        return [(timestamp, session_pk) for timestamp, session_pk in result.all()]

    def _to_domain(self, db_session: SessionModel) -> VisitorSession:
        """Преобразование модели БД в доменную сущность"""
        return VisitorSession(
            id=db_session.id,
            session_id=db_session.session_id,
            ip_address=db_session.ip_address,
            user_agent=db_session.user_agent,
            referrer=db_session.referrer,
            device=db_session.device,
            pages=[
                PageView(path=p.path, timestamp=p.timestamp, duration=p.duration)
                for p in db_session.pages
            ],
            first_visit=db_session.first_visit,
            last_visit=db_session.last_visit
        )
