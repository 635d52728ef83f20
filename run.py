"""
Application Runner
"""
import uvicorn
from app.core.config import settings

if __name__ == "__main__":
    print("=" * 80)
    print("🚀 Gemini Image Relay 서버 시작")
    print("=" * 80)
    print(f"Host: {settings.HOST}")
    print(f"Port: {settings.PORT}")
    print(f"Model: {settings.GEMINI_MODEL_NAME}")
    print("Endpoints:")
    print("  - GET  /health")
    print("  - POST /api/generate-image (이미지 생성)")
    print("  - POST /.netlify/functions/generateImage (호환 경로)")
    print("=" * 80)

    uvicorn.run(
        "app.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level="debug" if settings.DEBUG else "info",
        reload=False
    )
