from typing import Any, Dict, List, Optional

from fastapi.encoders import jsonable_encoder


def success_response(data: Any = None, message: Optional[str] = None) -> Dict[str, Any]:
    """Конверт успешного ответа"""
    body: Dict[str, Any] = {"status": "success"}
    if message is not None:
        body["message"] = message
    if data is not None:
        body["data"] = jsonable_encoder(data)
    return body


def error_response(
    status: str,
    message: str,
    errors: Optional[List[Dict[str, str]]] = None,
    stack: Optional[str] = None,
) -> Dict[str, Any]:
    """Конверт ответа с ошибкой"""
    body: Dict[str, Any] = {"status": status, "message": message}
    if errors:
        body["errors"] = errors
    if stack is not None:
        body["stack"] = stack
    return body


def pagination(page: int, limit: int, total: int) -> Dict[str, int]:
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "totalPages": (total + limit - 1) // limit if limit else 0,
    }
