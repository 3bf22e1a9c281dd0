import logging
from typing import Optional

from fastapi import APIRouter, Cookie, Depends, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio.core.auth import require_admin
from portfolio.core.config import get_settings
from portfolio.core.db import get_db
from portfolio.core.rate_limit import auth_limit, limiter
from portfolio.core.responses import success_response
from portfolio.domains.identity.entities import User
from portfolio.domains.identity.schemas import UserCreate, UserLogin, UserResponse
from portfolio.domains.identity.services import AuthResult, IdentityService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["authentication"])

# Один общий лимит на все маршруты /auth
auth_rate_limit = limiter.shared_limit(auth_limit, scope="auth")

REFRESH_COOKIE = "refreshToken"


def set_refresh_cookie(response: Response, refresh_token: str) -> None:
    """Refresh токен передается только в httpOnly cookie"""
    settings = get_settings()
    response.set_cookie(
        key=REFRESH_COOKIE,
        value=refresh_token,
        max_age=settings.refresh_token_expire_days * 24 * 60 * 60,
        path="/",
        httponly=True,
        secure=settings.is_production,
        samesite="strict",
    )


def clear_refresh_cookie(response: Response) -> None:
    settings = get_settings()
    response.delete_cookie(
        key=REFRESH_COOKIE,
        path="/",
        httponly=True,
        secure=settings.is_production,
        samesite="strict",
    )


def _auth_payload(result: AuthResult) -> dict:
    return {
        "user": UserResponse.model_validate(result.user),
        "accessToken": result.access_token,
    }


@router.post("/register", status_code=status.HTTP_201_CREATED)
@auth_rate_limit
async def register(
    request: Request,
    user_data: UserCreate,
    response: Response,
    db: AsyncSession = Depends(get_db)
):
    """Регистрация администратора (только пока нет ни одного пользователя)"""
    identity_service = IdentityService(db)
    result = await identity_service.register_user(user_data)

    set_refresh_cookie(response, result.refresh_token)
    return success_response(_auth_payload(result), "Admin registered successfully")


@router.post("/login")
@auth_rate_limit
async def login(
    request: Request,
    login_data: UserLogin,
    response: Response,
    db: AsyncSession = Depends(get_db)
):
    """Вход администратора"""
    identity_service = IdentityService(db)
    result = await identity_service.login_user(login_data)

    set_refresh_cookie(response, result.refresh_token)
    return success_response(_auth_payload(result), "Logged in successfully")


@router.post("/refresh")
@auth_rate_limit
async def refresh_token(
    request: Request,
    response: Response,
    refresh_cookie: Optional[str] = Cookie(None, alias=REFRESH_COOKIE),
    db: AsyncSession = Depends(get_db)
):
    """Обновление access токена по refresh cookie с ротацией cookie"""
    identity_service = IdentityService(db)
    result = await identity_service.refresh(refresh_cookie)

    set_refresh_cookie(response, result.refresh_token)
    return success_response({"accessToken": result.access_token})


@router.post("/logout")
@auth_rate_limit
async def logout(request: Request, response: Response):
    """Выход пользователя"""
    clear_refresh_cookie(response)
    return success_response(message="Logged out successfully")


@router.get("/me")
@auth_rate_limit
async def get_current_user_info(request: Request, current_user: User = Depends(require_admin)):
    """Информация о текущем администраторе"""
    return success_response({"user": UserResponse.model_validate(current_user)})
