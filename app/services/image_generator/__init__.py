"""
Gemini Image Generator
텍스트 프롬프트를 Gemini generateContent로 전달하고 base64 이미지를 반환

- client: 지수 백오프 재시도가 포함된 업스트림 호출
- normalize: 업스트림 응답 형태 정규화
- handler: 요청 검증 및 응답 매핑
"""

from .client import GeminiImageClient, compute_delay_ms
from .handler import Invocation, InvocationResponse, handle_invocation
from .normalize import DEFAULT_MIME_TYPE, normalize_response

__version__ = "1.0.0"
__all__ = [
    "GeminiImageClient",
    "compute_delay_ms",
    "Invocation",
    "InvocationResponse",
    "handle_invocation",
    "DEFAULT_MIME_TYPE",
    "normalize_response",
]
