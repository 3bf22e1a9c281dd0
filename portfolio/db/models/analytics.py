from sqlalchemy import UUID, Column, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from portfolio.db.base import Base, BaseModel, utcnow


class AnalyticsSession(BaseModel):
    __tablename__ = "analytics_sessions"

    session_id = Column(String(100), unique=True, index=True, nullable=False)
    ip_address = Column(String(45), nullable=False, default="anonymous")
    user_agent = Column(Text, nullable=False, default="")
    referrer = Column(Text, nullable=True)
    device = Column(String(10), nullable=False, default="desktop")
    first_visit = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    last_visit = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)

    # Relationships
    pages = relationship(
        "PageView",
        back_populates="session",
        order_by="PageView.seq",
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class PageView(Base):
    __tablename__ = "page_views"

    # порядок вставки, по нему восстанавливается список страниц сессии
    seq = Column(Integer, primary_key=True, autoincrement=True)
    session_pk = Column(
        UUID(as_uuid=True),
        ForeignKey("analytics_sessions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    path = Column(String(2048), nullable=False, index=True)
    timestamp = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    duration = Column(Float, nullable=True)

    # Relationships
    session = relationship("AnalyticsSession", back_populates="pages")
