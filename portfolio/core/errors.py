import logging
import traceback
from typing import Any, Dict, List

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from portfolio.core.config import get_settings
from portfolio.core.exceptions import AppError, DuplicateKey, InternalError, RateLimited, ValidationError
from portfolio.core.responses import error_response

logger = logging.getLogger(__name__)

# Префиксы локаций ошибок FastAPI, которые не нужны клиенту
_LOCATION_PREFIXES = {"body", "query", "path", "header", "cookie"}
_DISCRIMINATOR_ERRORS = {"union_tag_invalid", "union_tag_not_found"}


def _field_errors(exc: RequestValidationError) -> List[Dict[str, str]]:
    """Преобразование ошибок pydantic в список {field, message}"""
    errors = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ())]
        if loc and loc[0] in _LOCATION_PREFIXES:
            loc = loc[1:]
        if error.get("type") in _DISCRIMINATOR_ERRORS:
            field = "section"
        else:
            field = ".".join(loc)
        errors.append({"field": field, "message": error.get("msg", "Invalid value")})
    return errors


def _app_error_response(exc: AppError) -> JSONResponse:
    errors = exc.errors if isinstance(exc, ValidationError) else None
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(
        status_code=exc.status_code,
        content=error_response(exc.status, exc.message, errors),
        headers=headers,
    )


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return _app_error_response(exc)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return _app_error_response(ValidationError(errors=_field_errors(exc)))


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.warning(f"Integrity error on {request.method} {request.url.path}: {exc.orig}")
    return _app_error_response(DuplicateKey())


async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    logger.warning(f"Rate limit exceeded on {request.url.path}: {exc.detail}")
    return _app_error_response(RateLimited())


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 404 and exc.detail == "Not Found":
        message = f"Route {request.url.path} not found"
    else:
        message = str(exc.detail)
    status = "fail" if exc.status_code < 500 else "error"
    return JSONResponse(
        status_code=exc.status_code,
        content=error_response(status, message),
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    tb = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    logger.error(f"Unhandled error on {request.method} {request.url.path}\n{tb}")

    error = InternalError()
    stack = tb if get_settings().is_development else None
    return JSONResponse(
        status_code=error.status_code,
        content=error_response(error.status, error.message, stack=stack),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Единая точка трансляции ошибок в конверт ответа"""
    handlers: Dict[Any, Any] = {
        AppError: app_error_handler,
        RequestValidationError: request_validation_handler,
        IntegrityError: integrity_error_handler,
        RateLimitExceeded: rate_limit_handler,
        StarletteHTTPException: http_exception_handler,
        Exception: unhandled_exception_handler,
    }
    for exc_class, handler in handlers.items():
        app.add_exception_handler(exc_class, handler)
