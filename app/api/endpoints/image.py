"""
Image Generation Endpoint
"""
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response

from app.core.config import Settings, get_settings
from app.core.startup import get_image_client
from app.services.image_generator import GeminiImageClient, Invocation, handle_invocation
from app.services.utils.secrets import resolve_api_key

router = APIRouter()

# 405 응답을 직접 만들기 위해 모든 메서드를 받습니다
ACCEPTED_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def get_api_key(settings: Settings = Depends(get_settings)) -> Optional[str]:
    return resolve_api_key(settings)


@router.api_route("", methods=ACCEPTED_METHODS)
async def generate_image(
    request: Request,
    client: GeminiImageClient = Depends(get_image_client),
    api_key: Optional[str] = Depends(get_api_key),
):
    """
    이미지 생성 엔드포인트

    Body: {"prompt": "..."}
    Response: {"base64Data": "...", "mimeType": "..."}
    """
    invocation = Invocation(http_method=request.method, body=await request.body())
    result = await handle_invocation(invocation, client, api_key)

    return Response(
        content=result.body,
        status_code=result.status_code,
        headers=result.headers,
    )
