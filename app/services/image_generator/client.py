"""
Gemini Image Client - httpx 기반 비동기 호출 + 지수 백오프

재시도 규칙:
- 429 / 네트워크 오류 / 2xx 이외의 상태 / JSON이 아닌 응답 → 재시도 (최대 MAX_RETRIES회)
- 2xx 응답이지만 이미지가 없는 경우 → 즉시 실패 (재시도 없음)
- 대기 시간: 2^n * BASE_DELAY_MS + [0, JITTER_MS) 랜덤 지터
"""

import asyncio
import logging
import random
from typing import Any, Awaitable, Callable, Optional

import httpx

from app.core.config import Settings
from app.core.exceptions import (
    UpstreamExhaustedError,
    UpstreamTerminalError,
    UpstreamTransientError,
)
from app.core.tracing import get_tracer
from app.schemas.request import GenerationRequest
from app.schemas.response import GenerationResult
from app.services.utils.secrets import redact

from .normalize import normalize_response

logger = logging.getLogger(__name__)

SleepFunc = Callable[[float], Awaitable[Any]]


def compute_delay_ms(
    attempt: int,
    base_delay_ms: int = 1000,
    jitter_ms: int = 500,
    rng: random.Random = None,
) -> float:
    """attempt번째 실패 후 대기 시간 (밀리초)"""
    rng = rng or random
    return (2 ** attempt) * base_delay_ms + rng.random() * jitter_ms


class GeminiImageClient:
    """Gemini generateContent 비동기 클라이언트 (재시도/백오프 포함)"""

    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Optional[SleepFunc] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.settings = settings
        timeout = httpx.Timeout(settings.REQUEST_TIMEOUT_SECONDS)
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)
        self._sleep = sleep or asyncio.sleep
        self._rng = rng or random.Random()

    async def close(self) -> None:
        await self._client.aclose()

    def build_request(self, prompt: str) -> GenerationRequest:
        return GenerationRequest(
            prompt=prompt,
            model=self.settings.GEMINI_MODEL_NAME,
            aspect_ratio=self.settings.IMAGE_ASPECT_RATIO,
        )

    def endpoint_for(self, model: str) -> str:
        return f"{self.settings.GEMINI_API_BASE.rstrip('/')}/models/{model}:generateContent"

    async def generate(self, request: GenerationRequest, api_key: str) -> GenerationResult:
        """
        이미지 생성 요청을 보내고 정규화된 결과를 반환합니다.

        Args:
            request: GenerationRequest
            api_key: Gemini API 키 (쿼리 파라미터로 전달)

        Returns:
            GenerationResult

        Raises:
            UpstreamTerminalError: 성공 응답에 이미지가 없는 경우
            UpstreamExhaustedError: 모든 재시도가 실패한 경우
        """
        max_retries = self.settings.MAX_RETRIES
        tracer = get_tracer(__name__)

        with tracer.start_as_current_span("gemini.generate_content") as span:
            span.set_attribute("gemini.model", request.model)
            last_error: Optional[UpstreamTransientError] = None

            for attempt in range(1, max_retries + 1):
                span.set_attribute("gemini.attempts", attempt)
                try:
                    response_body = await self._send(request, api_key)
                except UpstreamTransientError as e:
                    last_error = e
                    if attempt >= max_retries:
                        break
                    delay_ms = compute_delay_ms(
                        attempt,
                        self.settings.BASE_DELAY_MS,
                        self.settings.JITTER_MS,
                        self._rng,
                    )
                    if e.upstream_status == 429:
                        logger.warning(f"[Gemini] API rate limit. Retrying in {round(delay_ms)}ms...")
                    else:
                        logger.warning(
                            f"[Gemini] Attempt {attempt} failed: {e.message}. Retrying in {round(delay_ms)}ms..."
                        )
                    await self._sleep(delay_ms / 1000)
                    continue

                try:
                    result = normalize_response(response_body, self.settings.UPSTREAM_CONTRACT)
                except UpstreamTerminalError:
                    span.set_attribute("gemini.outcome", "terminal")
                    logger.warning(f"[Gemini] Response without image data (attempt {attempt})")
                    raise

                span.set_attribute("gemini.outcome", "succeeded")
                logger.info(f"[Gemini] Image generated ({result.mime_type}, attempt {attempt})")
                return result

            span.set_attribute("gemini.outcome", "exhausted")
            logger.error(
                f"[Gemini] Giving up after {max_retries} attempts. Last error: "
                f"{last_error.message if last_error else 'unknown'}"
            )
            raise UpstreamExhaustedError(attempts=max_retries, last_error=last_error)

    async def _send(self, request: GenerationRequest, api_key: str) -> Any:
        try:
            response = await self._client.post(
                self.endpoint_for(request.model),
                params={"key": api_key},
                json=request.to_payload(),
            )
        except httpx.HTTPError as e:
            raise UpstreamTransientError(
                f"transport error ({type(e).__name__}): {redact(str(e), api_key)}"
            ) from e

        if response.status_code == 429:
            raise UpstreamTransientError("rate limited", status_code=429)

        if not response.is_success:
            raise UpstreamTransientError(
                f"HTTP error {response.status_code} - {redact(self._error_detail(response), api_key)}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise UpstreamTransientError(
                "upstream returned a non-JSON body", status_code=response.status_code
            ) from e

    @staticmethod
    def _error_detail(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.reason_phrase
        error = body.get("error") if isinstance(body, dict) else None
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        return response.reason_phrase
