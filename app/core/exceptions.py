"""
Image Relay 에러 정의

핸들러까지 올라올 수 있는 모든 에러는 매핑될 HTTP 상태 코드를 가집니다.
UpstreamTransientError만 백오프 호출 밖으로 나가지 않습니다.
"""
from typing import Optional


class ImageRelayError(Exception):
    """HTTP 응답으로 매핑되는 에러의 기본 클래스"""

    status_code: int = 500
    default_message: str = "Internal server error during image generation."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ConfigurationError(ImageRelayError):
    """업스트림 API 키가 설정되지 않음"""

    status_code = 500
    default_message = "Gemini API key is not configured."


class MethodNotAllowedError(ImageRelayError):
    status_code = 405
    default_message = "Method Not Allowed"


class ValidationError(ImageRelayError):
    """요청 본문이 JSON이 아니거나 prompt가 없음"""

    status_code = 400
    default_message = "Prompt is required."


class UpstreamTransientError(ImageRelayError):
    """Rate limit, 네트워크 오류, 비정상 상태 코드 (재시도 대상)"""

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.upstream_status = status_code


class UpstreamTerminalError(ImageRelayError):
    """성공 응답이지만 이미지 데이터가 없음 (재시도 안 함)"""

    default_message = "API returned no valid image."


class UpstreamExhaustedError(ImageRelayError):
    default_message = "Image generation failed after multiple attempts."

    def __init__(
        self,
        message: Optional[str] = None,
        attempts: int = 0,
        last_error: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.attempts = attempts
        self.last_error = last_error
