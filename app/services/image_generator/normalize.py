"""
Gemini 응답 정규화

업스트림 응답 형태는 배포 버전마다 다르기 때문에 UPSTREAM_CONTRACT 설정으로 선택합니다.
- candidates: candidates[].content.parts[].inlineData.{data, mimeType}
- image_base64: {"imageBase64": ..., "mimeType": ...}
"""
from typing import Any, Dict, Optional

from app.core.exceptions import UpstreamTerminalError
from app.schemas.response import GenerationResult

DEFAULT_MIME_TYPE = "image/png"


def _as_list(value: Any) -> list:
    return value if isinstance(value, list) else []


def _mime_type(value: Any) -> str:
    """mimeType이 비어 있거나 문자열이 아니면 image/png"""
    if isinstance(value, str) and value:
        return value
    return DEFAULT_MIME_TYPE


def find_inline_image(response_body: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """첫 번째 inlineData 파트를 찾습니다 (모든 candidate 순서대로 검색)"""
    for candidate in _as_list(response_body.get("candidates")):
        if not isinstance(candidate, dict):
            continue
        content = candidate.get("content")
        if not isinstance(content, dict):
            continue
        for part in _as_list(content.get("parts")):
            if not isinstance(part, dict):
                continue
            inline_data = part.get("inlineData")
            if isinstance(inline_data, dict) and isinstance(inline_data.get("data"), str) and inline_data["data"]:
                return inline_data
    return None


def normalize_candidates(response_body: Dict[str, Any]) -> GenerationResult:
    inline_data = find_inline_image(response_body)
    if inline_data is None:
        raise UpstreamTerminalError()
    return GenerationResult(
        base64_data=inline_data["data"],
        mime_type=_mime_type(inline_data.get("mimeType")),
    )


def normalize_image_base64(response_body: Dict[str, Any]) -> GenerationResult:
    image_base64 = response_body.get("imageBase64")
    if not image_base64 or not isinstance(image_base64, str):
        raise UpstreamTerminalError()
    return GenerationResult(
        base64_data=image_base64,
        mime_type=_mime_type(response_body.get("mimeType")),
    )


NORMALIZERS = {
    "candidates": normalize_candidates,
    "image_base64": normalize_image_base64,
}


def normalize_response(response_body: Any, contract: str = "candidates") -> GenerationResult:
    """
    업스트림 성공 응답에서 이미지를 추출합니다.

    Args:
        response_body: 파싱된 JSON 응답
        contract: "candidates" 또는 "image_base64"

    Returns:
        GenerationResult

    Raises:
        UpstreamTerminalError: 이미지 데이터가 없는 경우 (재시도 대상 아님)
    """
    try:
        normalizer = NORMALIZERS[contract]
    except KeyError:
        raise ValueError(f"Unknown upstream contract: {contract}")

    if not isinstance(response_body, dict):
        raise UpstreamTerminalError()
    return normalizer(response_body)
