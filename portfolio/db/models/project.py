from sqlalchemy import JSON, Boolean, Column, Integer, String, Text

from portfolio.db.base import BaseModel


class Project(BaseModel):
    __tablename__ = "projects"

    title = Column(String(100), nullable=False)
    slug = Column(String(120), unique=True, index=True, nullable=False)
    description = Column(String(500), nullable=False)
    full_description = Column(Text, nullable=True)
    technologies = Column(JSON, nullable=False, default=list)
    category = Column(String(20), nullable=False, default="manual", index=True)
    images = Column(JSON, nullable=False, default=dict)
    live_url = Column(String(500), nullable=True)
    github_url = Column(String(500), nullable=True)
    featured = Column(Boolean, nullable=False, default=False, index=True)
    ai_prompts = Column(JSON, nullable=False, default=list)
    view_count = Column(Integer, nullable=False, default=0)
