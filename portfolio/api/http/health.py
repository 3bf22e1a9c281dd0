from datetime import datetime, timezone

from fastapi import APIRouter

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check():
    """Проверка работоспособности сервиса"""
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}
