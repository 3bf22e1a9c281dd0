import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from portfolio.core.config import get_settings
from portfolio.core.exceptions import TokenExpired, TokenInvalid

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"

# bcrypt учитывает только первые 72 байта
_BCRYPT_MAX_BYTES = 72

_pwd_context: Optional[CryptContext] = None


def _get_pwd_context() -> CryptContext:
    """Контекст для хеширования паролей"""
    global _pwd_context
    if _pwd_context is None:
        _pwd_context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=get_settings().bcrypt_rounds,
        )
    return _pwd_context


def _truncate(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Проверка пароля"""
    return _get_pwd_context().verify(_truncate(plain_password), hashed_password)


def dummy_verify_password() -> None:
    """Холостая проверка, чтобы отсутствие пользователя стоило столько же времени"""
    _get_pwd_context().dummy_verify()


def get_password_hash(password: str) -> str:
    """Хеширование пароля"""
    return _get_pwd_context().hash(_truncate(password))


def _encode(claims: Dict[str, Any], secret: str, expires_delta: timedelta) -> str:
    settings = get_settings()
    now = datetime.now(timezone.utc)
    to_encode = claims.copy()
    to_encode.update({"iat": int(now.timestamp()), "exp": now + expires_delta})
    return jwt.encode(to_encode, secret, algorithm=settings.jwt_algorithm)


def _decode(token: str, secret: str, token_type: str) -> Dict[str, Any]:
    settings = get_settings()
    try:
        payload = jwt.decode(token, secret, algorithms=[settings.jwt_algorithm])
    except ExpiredSignatureError:
        raise TokenExpired()
    except JWTError:
        raise TokenInvalid()

    if payload.get("type") != token_type or not payload.get("userId"):
        raise TokenInvalid()

    return payload


def create_access_token(user_id: uuid.UUID, email: str, role: str,
                        expires_delta: Optional[timedelta] = None) -> str:
    """Создание JWT токена доступа"""
    settings = get_settings()
    claims = {
        "userId": str(user_id),
        "email": email,
        "role": role,
        "type": ACCESS_TOKEN_TYPE,
    }
    return _encode(
        claims,
        settings.jwt_secret,
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes),
    )


def create_refresh_token(user_id: uuid.UUID, expires_delta: Optional[timedelta] = None) -> str:
    """Создание refresh токена"""
    settings = get_settings()
    claims = {
        "userId": str(user_id),
        "type": REFRESH_TOKEN_TYPE,
        # каждый выпущенный токен уникален, даже в пределах одной секунды
        "jti": uuid.uuid4().hex,
    }
    return _encode(
        claims,
        settings.jwt_refresh_secret,
        expires_delta or timedelta(days=settings.refresh_token_expire_days),
    )


def verify_access_token(token: str) -> Dict[str, Any]:
    """Проверка JWT токена доступа и извлечение данных"""
    return _decode(token, get_settings().jwt_secret, ACCESS_TOKEN_TYPE)


def verify_refresh_token(token: str) -> Dict[str, Any]:
    """Проверка refresh токена"""
    return _decode(token, get_settings().jwt_refresh_secret, REFRESH_TOKEN_TYPE)
