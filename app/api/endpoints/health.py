"""
Health Check Endpoint
"""
from datetime import datetime, timezone

from fastapi import APIRouter

from app.core.config import settings
from app.core.tracing import is_tracing_enabled

router = APIRouter()


@router.get("/health")
async def health_check():
    """서비스 상태 확인"""
    return {
        "status": "ok",
        "service": settings.APP_NAME,
        "version": settings.VERSION,
        "model": settings.GEMINI_MODEL_NAME,
        "tracing": is_tracing_enabled(),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
