from sqlalchemy import JSON, UUID, Column, ForeignKey, String

from portfolio.db.base import BaseModel


class Content(BaseModel):
    __tablename__ = "contents"

    section = Column(String(20), unique=True, index=True, nullable=False)
    data = Column(JSON, nullable=False, default=dict)
    updated_by = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
