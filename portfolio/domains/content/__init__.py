from portfolio.domains.content.entities import Content, ContentSection
from portfolio.domains.content.schemas import ContentResponse, ContentUpsert

__all__ = [
    "Content", "ContentSection",
    "ContentResponse", "ContentUpsert"
]
