import json

import httpx
import pytest

from app.services.image_generator import Invocation, handle_invocation

from conftest import TEST_API_KEY, UpstreamMock, image_body


@pytest.fixture
def upstream():
    return UpstreamMock(httpx.Response(200, json=image_body()))


@pytest.fixture
def client(make_client, upstream):
    return make_client(upstream)


async def test_end_to_end_success(client, upstream):
    invocation = Invocation(http_method="POST", body='{"prompt":"a red fox"}')

    response = await handle_invocation(invocation, client, TEST_API_KEY)

    assert response.to_dict() == {
        "statusCode": 200,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps({"base64Data": "QUJD", "mimeType": "image/png"}),
    }
    assert json.loads(upstream.requests[0].content)["contents"][0]["parts"][0]["text"] == "a red fox"


@pytest.mark.parametrize("api_key", [None, ""])
async def test_missing_credential_is_checked_first(client, upstream, api_key):
    invocation = Invocation(http_method="GET", body="not json at all")

    response = await handle_invocation(invocation, client, api_key)

    assert response.status_code == 500
    assert "API key" in json.loads(response.body)["message"]
    assert upstream.calls == 0


@pytest.mark.parametrize("method", ["GET", "PUT", "DELETE", "PATCH"])
async def test_non_post_is_405(client, upstream, method):
    response = await handle_invocation(Invocation(http_method=method, body='{"prompt":"x"}'), client, TEST_API_KEY)

    assert response.status_code == 405
    assert response.body == "Method Not Allowed"
    assert response.headers["Content-Type"].startswith("text/plain")
    assert upstream.calls == 0


async def test_method_is_case_insensitive(client):
    response = await handle_invocation(Invocation(http_method="post", body='{"prompt":"x"}'), client, TEST_API_KEY)
    assert response.status_code == 200


@pytest.mark.parametrize("body", [
    None,
    "",
    b"",
    "not json",
    "[]",
    '"a red fox"',
    "{}",
    '{"prompt": ""}',
    '{"prompt": "   "}',
    '{"prompt": null}',
    '{"prompt": 5}',
    b"\xff\xfe",
])
async def test_invalid_body_is_400(client, upstream, body):
    response = await handle_invocation(Invocation(http_method="POST", body=body), client, TEST_API_KEY)

    assert response.status_code == 400
    assert json.loads(response.body)["message"]
    assert upstream.calls == 0


async def test_bytes_body_is_accepted(client):
    response = await handle_invocation(Invocation(http_method="POST", body=b'{"prompt":"a red fox"}'), client, TEST_API_KEY)
    assert response.status_code == 200


@pytest.mark.parametrize("upstream_body", [
    {"candidates": []},
    {"candidates": 5},
    {"candidates": [{"content": ["x"]}]},
])
async def test_terminal_upstream_failure_is_500(make_client, upstream_body):
    upstream = UpstreamMock(httpx.Response(200, json=upstream_body))
    response = await handle_invocation(
        Invocation(http_method="POST", body='{"prompt":"a red fox"}'), make_client(upstream), TEST_API_KEY
    )

    assert response.status_code == 500
    assert json.loads(response.body) == {"message": "API returned no valid image."}
    assert upstream.calls == 1


async def test_exhausted_retries_is_500_without_credential(make_client):
    upstream = UpstreamMock(httpx.ConnectError(f"cannot reach key={TEST_API_KEY}"))
    response = await handle_invocation(
        Invocation(http_method="POST", body='{"prompt":"a red fox"}'), make_client(upstream), TEST_API_KEY
    )

    assert response.status_code == 500
    assert json.loads(response.body) == {"message": "Image generation failed after multiple attempts."}
    assert TEST_API_KEY not in response.body
    assert upstream.calls == 5


class ExplodingClient:
    def build_request(self, prompt):
        return prompt

    async def generate(self, request, api_key):
        raise RuntimeError(f"boom with {api_key}")


async def test_unexpected_error_is_generic_500():
    response = await handle_invocation(
        Invocation(http_method="POST", body='{"prompt":"a red fox"}'), ExplodingClient(), TEST_API_KEY
    )

    assert response.status_code == 500
    assert json.loads(response.body) == {"message": "Internal server error during image generation."}
    assert TEST_API_KEY not in response.body


async def test_non_string_upstream_mime_type_defaults_to_png(make_client):
    body = {"candidates": [{"content": {"parts": [{"inlineData": {"data": "QUJD", "mimeType": 7}}]}}]}
    upstream = UpstreamMock(httpx.Response(200, json=body))
    response = await handle_invocation(
        Invocation(http_method="POST", body='{"prompt":"a red fox"}'), make_client(upstream), TEST_API_KEY
    )

    assert response.status_code == 200
    assert json.loads(response.body) == {"base64Data": "QUJD", "mimeType": "image/png"}
