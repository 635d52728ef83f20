"""
Gemini API 키 조회 유틸리티

1순위: 프로세스 환경변수 (GEMINI_API_KEY)
2순위: AWS Secrets Manager (GEMINI_SECRET_NAME이 설정된 경우)
"""
import base64
import json
import logging
import os
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from app.core.config import Settings

logger = logging.getLogger(__name__)

SECRET_KEY_FIELD = "GEMINI_API_KEY"


def get_secret(secret_name: str, region_name: str = None) -> dict:
    """
    AWS Secrets Manager에서 시크릿을 가져옵니다.

    Args:
        secret_name: Secrets Manager의 시크릿 이름
        region_name: AWS 리전 (기본값: 환경변수 또는 us-east-1)

    Returns:
        시크릿 값을 담은 딕셔너리
    """
    if region_name is None:
        region_name = os.environ.get('AWS_REGION', 'us-east-1')

    session = boto3.session.Session()
    client = session.client(
        service_name='secretsmanager',
        region_name=region_name
    )

    try:
        logger.info(f"[Secrets] Fetching secret: {secret_name} from region: {region_name}")
        get_secret_value_response = client.get_secret_value(SecretId=secret_name)
    except ClientError as e:
        error_code = e.response['Error']['Code']
        logger.error(f"[Secrets] Secret 조회 실패 ({error_code}): {secret_name}")
        raise

    if 'SecretString' in get_secret_value_response:
        secret_string = get_secret_value_response['SecretString']

        # 작은따옴표로 감싸진 경우 제거 (AWS CLI 출력 형식)
        if secret_string.startswith("'") and secret_string.endswith("'"):
            secret_string = secret_string[1:-1]

        try:
            return json.loads(secret_string)
        except json.JSONDecodeError as e:
            raise ValueError(f"Secret '{secret_name}'의 JSON 파싱 실패: {str(e)}")

    decoded_binary_secret = base64.b64decode(get_secret_value_response['SecretBinary'])
    return json.loads(decoded_binary_secret)


def resolve_api_key(settings: Settings) -> Optional[str]:
    """
    요청마다 Gemini API 키를 조회합니다.

    Returns:
        API 키 또는 None (설정되지 않은 경우)
    """
    api_key = os.environ.get(settings.GEMINI_API_KEY_ENV)
    if api_key:
        return api_key

    if not settings.GEMINI_SECRET_NAME:
        return None

    try:
        secret = get_secret(settings.GEMINI_SECRET_NAME, settings.AWS_REGION)
    except (ClientError, BotoCoreError, ValueError) as e:
        logger.error(f"[Secrets] API 키를 Secrets Manager에서 가져올 수 없습니다: {type(e).__name__}")
        return None

    if not isinstance(secret, dict):
        logger.error(f"[Secrets] Secret '{settings.GEMINI_SECRET_NAME}'이 JSON 객체가 아닙니다")
        return None

    api_key = secret.get(SECRET_KEY_FIELD)
    if not isinstance(api_key, str) or not api_key:
        return None
    return api_key


def redact(text: str, secret: Optional[str]) -> str:
    """로그/에러 메시지에서 시크릿 값을 제거합니다."""
    if not secret:
        return text
    return text.replace(secret, "***")
