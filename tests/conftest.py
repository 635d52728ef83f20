"""
Shared fixtures: a mocked Gemini upstream and a recording sleep.
"""
import random
from typing import List

import httpx
import pytest

from app.core.config import Settings
from app.services.image_generator import GeminiImageClient

TEST_API_KEY = "test-key-123"
UPSTREAM_BASE = "https://upstream.test/v1beta"


def image_body(data="QUJD", mime_type="image/png"):
    inline_data = {"data": data}
    if mime_type is not None:
        inline_data["mimeType"] = mime_type
    return {
        "candidates": [
            {"content": {"parts": [{"text": "here you go"}, {"inlineData": inline_data}]}}
        ]
    }


class UpstreamMock:
    """httpx.MockTransport handler replaying a scripted list of responses.

    The last item repeats once the script runs out. Exceptions are raised
    instead of returned.
    """

    def __init__(self, *script):
        self.script = list(script)
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        item = self.script.pop(0) if len(self.script) > 1 else self.script[0]
        if isinstance(item, Exception):
            raise item
        return item

    @property
    def calls(self) -> int:
        return len(self.requests)


class RecordingSleep:
    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def settings():
    return Settings(
        GEMINI_API_BASE=UPSTREAM_BASE,
        GEMINI_MODEL_NAME="gemini-test-image",
        UPSTREAM_CONTRACT="candidates",
        MAX_RETRIES=5,
    )


@pytest.fixture
def sleep():
    return RecordingSleep()


@pytest.fixture
def make_client(settings, sleep):
    def _make(upstream: UpstreamMock, client_settings: Settings = None) -> GeminiImageClient:
        return GeminiImageClient(
            client_settings or settings,
            transport=httpx.MockTransport(upstream),
            sleep=sleep,
            rng=random.Random(42),
        )
    return _make
