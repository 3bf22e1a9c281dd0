import uuid
from datetime import datetime, timezone
from typing import Optional

from portfolio.core.security import get_password_hash, verify_password

ROLE_ADMIN = "admin"


class User:
    """Сущность пользователя домена Identity"""

    def __init__(
        self,
        id: uuid.UUID,
        email: str,
        username: str,
        password_hash: str,
        role: str = ROLE_ADMIN,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None
    ):
        self.id = id
        self.email = email
        self.username = username
        self.password_hash = password_hash
        self.role = role
        self.created_at = created_at or datetime.now(timezone.utc)
        self.updated_at = updated_at or datetime.now(timezone.utc)

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    def authenticate(self, password: str) -> bool:
        """Проверка пароля пользователя"""
        return verify_password(password, self.password_hash)

    @classmethod
    def create_user(cls, email: str, username: str, password: str, role: str = ROLE_ADMIN) -> "User":
        """Создание нового пользователя с хешированием пароля"""
        return cls(
            id=uuid.uuid4(),
            email=normalize_email(email),
            username=username.strip(),
            password_hash=get_password_hash(password),
            role=role
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, User):
            return False
        return self.id == other.id

    def __repr__(self) -> str:
        return f"User(id={self.id}, email={self.email}, role={self.role})"


def normalize_email(email: str) -> str:
    return email.strip().lower()
