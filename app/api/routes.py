"""
API Routes
"""
from fastapi import APIRouter
from app.api.endpoints import health, image

router = APIRouter()

# Health check endpoints (root level)
router.include_router(health.router, tags=["health"])

# Image generation
router.include_router(image.router, prefix="/api/generate-image", tags=["image"])
# 기존 Netlify 함수 경로와 호환
router.include_router(image.router, prefix="/.netlify/functions/generateImage", tags=["image"])
