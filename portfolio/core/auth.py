from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio.core.db import get_db
from portfolio.core.exceptions import Unauthorized
from portfolio.domains.identity.entities import User
from portfolio.domains.identity.services import IdentityService

# ошибки аутентификации отдаются в общем конверте, а не стандартным 403 HTTPBearer
security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db)
) -> User:
    """Зависимость для получения текущего пользователя по Bearer токену"""
    if credentials is None or not credentials.credentials:
        raise Unauthorized("Access denied. No token provided.")

    identity_service = IdentityService(db)
    return await identity_service.get_current_user_from_token(credentials.credentials)


async def require_admin(current_user: User = Depends(get_current_user)) -> User:
    """Зависимость: только администратор"""
    return IdentityService.ensure_admin(current_user)
