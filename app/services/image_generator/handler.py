"""
Image Generation Request Handler
호스트와 무관하게 Invocation(메서드 + 원본 본문)을 받아 InvocationResponse를 반환
FastAPI 엔드포인트는 이 타입으로의 변환만 담당합니다.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from app.core.exceptions import (
    ConfigurationError,
    ImageRelayError,
    MethodNotAllowedError,
    ValidationError,
)
from app.schemas.request import ImagePromptRequest

from .client import GeminiImageClient

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"
TEXT_CONTENT_TYPE = "text/plain; charset=utf-8"
GENERIC_ERROR_MESSAGE = "Internal server error during image generation."


@dataclass
class Invocation:
    http_method: str
    body: Union[str, bytes, None] = None


@dataclass
class InvocationResponse:
    status_code: int
    body: str
    headers: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def json(cls, status_code: int, content: Dict[str, Any]) -> "InvocationResponse":
        return cls(
            status_code=status_code,
            body=json.dumps(content),
            headers={"Content-Type": JSON_CONTENT_TYPE},
        )

    @classmethod
    def text(cls, status_code: int, content: str) -> "InvocationResponse":
        return cls(status_code=status_code, body=content, headers={"Content-Type": TEXT_CONTENT_TYPE})

    def to_dict(self) -> Dict[str, Any]:
        """serverless 형식 {"statusCode", "headers", "body"}"""
        return {"statusCode": self.status_code, "headers": dict(self.headers), "body": self.body}


def parse_prompt(body: Union[str, bytes, None]) -> str:
    """요청 본문에서 prompt를 추출합니다. 실패 시 ValidationError."""
    if body is None or (isinstance(body, (str, bytes)) and not body.strip()):
        raise ValidationError("Request body is required.")

    try:
        data = json.loads(body)
    except (ValueError, UnicodeDecodeError):
        raise ValidationError("Request body must be valid JSON.")

    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object.")

    try:
        return ImagePromptRequest.model_validate(data).prompt
    except PydanticValidationError:
        raise ValidationError("Prompt is required.")


def _error_response(error: ImageRelayError) -> InvocationResponse:
    if isinstance(error, MethodNotAllowedError):
        return InvocationResponse.text(error.status_code, error.message)
    return InvocationResponse.json(error.status_code, {"message": error.message})


async def handle_invocation(
    invocation: Invocation,
    client: GeminiImageClient,
    api_key: Optional[str],
) -> InvocationResponse:
    """
    이미지 생성 요청 처리

    순서: API 키 확인 → 메서드 확인 → 본문 검증 → Gemini 호출
    모든 경로는 상태 코드와 본문이 있는 응답으로 끝납니다.
    """
    try:
        if not api_key:
            raise ConfigurationError()

        if (invocation.http_method or "").upper() != "POST":
            raise MethodNotAllowedError()

        prompt = parse_prompt(invocation.body)
        logger.debug(f"[Handler] Prompt received ({len(prompt)} chars)")

        result = await client.generate(client.build_request(prompt), api_key)
        return InvocationResponse.json(200, result.model_dump(by_alias=True))

    except ImageRelayError as e:
        if e.status_code >= 500:
            logger.error(f"[Handler] {type(e).__name__}: {e.message}")
        return _error_response(e)
    except Exception:
        logger.exception("[Handler] Unexpected error during image generation")
        return InvocationResponse.json(500, {"message": GENERIC_ERROR_MESSAGE})
