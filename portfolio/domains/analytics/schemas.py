from datetime import datetime
from typing import List, Optional
import uuid

from pydantic import Field, field_validator

from portfolio.core.schemas import CamelModel


class TrackRequest(CamelModel):
    """Схема события просмотра страницы"""
    session_id: Optional[str] = Field(None, max_length=100)
    page: str = Field(..., min_length=1, max_length=2048)
    referrer: Optional[str] = Field(None, max_length=2048)
    duration: Optional[float] = Field(None, ge=0)

    @field_validator('session_id')
    @classmethod
    def validate_session_id(cls, v):
        # пустой идентификатор равнозначен отсутствующему
        if v is not None and not v.strip():
            return None
        return v.strip() if v else v


class PageViewResponse(CamelModel):
    path: str
    timestamp: datetime
    duration: Optional[float] = None


class VisitorResponse(CamelModel):
    """Схема для ответа с данными сессии посетителя"""
    id: uuid.UUID
    session_id: str
    ip_address: str
    user_agent: str
    referrer: Optional[str] = None
    device: str
    pages: List[PageViewResponse]
    first_visit: datetime
    last_visit: datetime


class VisitorStats(CamelModel):
    total_visitors: int = 0
    total_page_views: int = 0
    unique_pages: int = 0


class StatsSummary(CamelModel):
    """Сводная статистика за стандартные периоды"""
    overall: VisitorStats
    today: VisitorStats
    this_week: VisitorStats
    this_month: VisitorStats


class PopularPage(CamelModel):
    path: str
    views: int


class TrendPoint(CamelModel):
    date: str
    visitors: int
    page_views: int
