from typing import Dict, List, Optional


class AppError(Exception):
    """Базовая ошибка приложения с HTTP статусом"""

    status_code: int = 500
    default_message: str = "Something went wrong"

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)

    @property
    def status(self) -> str:
        return "fail" if 400 <= self.status_code < 500 else "error"


class ValidationError(AppError):
    status_code = 400
    default_message = "Validation failed"

    def __init__(self, message: Optional[str] = None, errors: Optional[List[Dict[str, str]]] = None):
        super().__init__(message)
        self.errors = errors or []


class Unauthorized(AppError):
    status_code = 401
    default_message = "Not authenticated"


class TokenExpired(Unauthorized):
    default_message = "Token expired."


class TokenInvalid(Unauthorized):
    default_message = "Invalid token."


class InvalidCredentials(Unauthorized):
    default_message = "Invalid email or password"


class Forbidden(AppError):
    status_code = 403
    default_message = "Access denied. Admin privileges required."


class RegistrationClosed(Forbidden):
    default_message = "Registration is closed. Admin already exists."


class NotFound(AppError):
    status_code = 404
    default_message = "Not found"


class DuplicateKey(AppError):
    status_code = 400
    default_message = "Duplicate value. Please use another value."


class RateLimited(AppError):
    status_code = 429
    default_message = "Too many requests, please try again later."


class InternalError(AppError):
    status_code = 500
