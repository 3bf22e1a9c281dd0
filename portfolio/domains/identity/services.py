import logging
import uuid
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from portfolio.core.exceptions import (
    AppError, Forbidden, InvalidCredentials, RegistrationClosed, Unauthorized
)
from portfolio.core.security import (
    create_access_token, create_refresh_token, dummy_verify_password,
    verify_access_token, verify_refresh_token
)
from portfolio.db.repositories.user_repository import UserRepository
from portfolio.domains.identity.entities import ROLE_ADMIN, User, normalize_email
from portfolio.domains.identity.schemas import UserCreate, UserLogin

logger = logging.getLogger(__name__)


@dataclass
class AuthResult:
    """Пользователь и выданная ему пара токенов"""
    user: User
    access_token: str
    refresh_token: str


def issue_tokens(user: User) -> AuthResult:
    return AuthResult(
        user=user,
        access_token=create_access_token(user.id, user.email, user.role),
        refresh_token=create_refresh_token(user.id),
    )


class IdentityService:
    """Сервис для работы с идентификацией и аутентификацией пользователей"""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.user_repository = UserRepository(session)

    async def register_user(self, user_data: UserCreate) -> AuthResult:
        """Регистрация администратора, допускается только один раз"""
        # Бизнес-правило: единственный администратор на всю систему
        if await self.user_repository.count() > 0:
            logger.warning("Registration attempt rejected: admin already exists")
            raise RegistrationClosed()

        user = User.create_user(
            email=user_data.email,
            username=user_data.username,
            password=user_data.password,
            role=ROLE_ADMIN
        )
        user = await self.user_repository.create(user)
        logger.info(f"Admin {user.id} registered")

        return issue_tokens(user)

    async def authenticate_user(self, login_data: UserLogin) -> User:
        """Аутентификация пользователя"""
        user = await self.user_repository.get_by_email(normalize_email(login_data.email))

        if user is None:
            dummy_verify_password()
            raise InvalidCredentials()

        if not user.authenticate(login_data.password):
            raise InvalidCredentials()

        return user

    async def login_user(self, login_data: UserLogin) -> AuthResult:
        """Вход пользователя и создание токенов"""
        try:
            user = await self.authenticate_user(login_data)
        except InvalidCredentials:
            logger.info("Failed login attempt")
            raise

        logger.info(f"User {user.id} logged in")
        return issue_tokens(user)

    async def refresh(self, refresh_token: Optional[str]) -> AuthResult:
        """Обновление access токена с ротацией refresh токена"""
        if not refresh_token:
            raise Unauthorized("Refresh token not found")

        try:
            payload = verify_refresh_token(refresh_token)
            user = await self.user_repository.get_by_id(uuid.UUID(payload["userId"]))
        except (AppError, ValueError) as e:
            logger.info(f"Refresh rejected: {e}")
            raise Unauthorized("Invalid refresh token")

        if user is None:
            logger.info("Refresh rejected: user no longer exists")
            raise Unauthorized("Invalid refresh token")

        return issue_tokens(user)

    async def get_current_user_from_token(self, token: str) -> User:
        """Получение текущего пользователя из JWT токена"""
        payload = verify_access_token(token)

        try:
            user_id = uuid.UUID(payload["userId"])
        except ValueError:
            raise Unauthorized("Invalid token.")

        user = await self.user_repository.get_by_id(user_id)
        if user is None:
            raise Unauthorized("User not found.")

        return user

    @staticmethod
    def ensure_admin(user: User) -> User:
        if not user.is_admin:
            raise Forbidden()
        return user
