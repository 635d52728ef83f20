"""
Application Startup / Shutdown Handlers
"""
import logging
from typing import Optional

from app.core.config import TracingConfig, settings
from app.core.tracing import init_tracing, shutdown_tracing
from app.services.image_generator import GeminiImageClient

logger = logging.getLogger(__name__)

image_client: Optional[GeminiImageClient] = None


async def startup_handler():
    """애플리케이션 시작 시 초기화"""
    global image_client

    logger.info("=" * 80)
    logger.info("🔧 Gemini Image Relay 초기화 중...")
    logger.info("=" * 80)

    init_tracing(TracingConfig.from_environment(), service_version=settings.VERSION)

    image_client = GeminiImageClient(settings)
    logger.info(f"✅ Gemini 클라이언트 준비 완료")
    logger.info(f"   - Model: {settings.GEMINI_MODEL_NAME}")
    logger.info(f"   - Upstream contract: {settings.UPSTREAM_CONTRACT}")
    logger.info(f"   - Max retries: {settings.MAX_RETRIES}")
    logger.info("🚀 초기화 완료")


async def shutdown_handler():
    """애플리케이션 종료 시 정리"""
    global image_client

    if image_client is not None:
        await image_client.close()
        image_client = None
    shutdown_tracing()


def get_image_client() -> GeminiImageClient:
    """공유 GeminiImageClient 반환 (startup 전에는 새로 생성)"""
    global image_client

    if image_client is None:
        image_client = GeminiImageClient(settings)
    return image_client
