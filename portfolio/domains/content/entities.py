import enum
import uuid
from datetime import datetime
from typing import Any, Dict, Optional


class ContentSection(str, enum.Enum):
    HERO = "hero"
    ABOUT = "about"
    SKILLS = "skills"
    CONTACT = "contact"
    SETTINGS = "settings"


class Content:
    """Содержимое одного раздела сайта"""

    def __init__(
        self,
        id: Optional[uuid.UUID],
        section: str,
        data: Optional[Dict[str, Any]] = None,
        updated_by: Optional[uuid.UUID] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None
    ):
        self.id = id
        self.section = section
        self.data = dict(data or {})
        self.updated_by = updated_by
        self.created_at = created_at
        self.updated_at = updated_at

    @classmethod
    def empty(cls, section: str) -> "Content":
        """Незаполненный раздел: читается как пустой объект данных"""
        return cls(id=None, section=section)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Content):
            return False
        return self.section == other.section and self.id == other.id

    def __repr__(self) -> str:
        return f"Content(section={self.section}, keys={sorted(self.data)})"
