import asyncio
import json

import httpx
import pytest

from llm.errors import LLMProviderError
from llm.llm_client import LLMClient
from llm.providers.openai_provider import OpenRouterProvider


@pytest.fixture(autouse=True)
def _api_key(monkeypatch):
    monkeypatch.setenv("OPENROUTER_API_KEY", "test-key")
    monkeypatch.setenv("OPENROUTER_BASE_URL", "https://llm.test/api/v1")
    monkeypatch.setenv("DEEPSEEK_MODEL", "test/model")


def _provider(handler):
    return OpenRouterProvider(transport=httpx.MockTransport(handler))


def test_posts_chat_completion_and_returns_content():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers["authorization"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={
            "choices": [{"message": {"role": "assistant", "content": "hi"}}],
            "usage": {"total_tokens": 5},
        })

    completion = asyncio.run(_provider(handler).generate(user="hello", system="sys", max_tokens=10, temperature=0.2))

    assert completion.content == "hi"
    assert completion.usage == {"total_tokens": 5}
    assert seen["url"] == "https://llm.test/api/v1/chat/completions"
    assert seen["auth"] == "Bearer test-key"
    assert seen["body"]["model"] == "test/model"
    assert seen["body"]["messages"] == [
        {"role": "system", "content": "sys"},
        {"role": "user", "content": "hello"},
    ]
    assert seen["body"]["max_tokens"] == 10
    assert seen["body"]["temperature"] == 0.2


def test_http_error_carries_status():
    def handler(request):
        return httpx.Response(429, json={"error": {"message": "Rate limit exceeded", "code": 429}})

    with pytest.raises(LLMProviderError) as exc:
        asyncio.run(_provider(handler).generate(user="x"))
    assert exc.value.status_code == 429
    assert "Rate limit" in str(exc.value)


def test_non_json_auth_failure_fails_fast(recording_sleep):
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(401, text="<html>Unauthorized</html>")

    client = LLMClient(provider=_provider(handler), max_attempts=3, jitter_s=0, sleep=recording_sleep)

    with pytest.raises(LLMProviderError) as exc:
        asyncio.run(client.generate("x"))
    assert len(calls) == 1
    assert recording_sleep.delays == []
    assert exc.value.status_code == 401
    assert str(exc.value) == "HTTP 401: <html>Unauthorized</html>"


def test_error_body_on_200_is_raised():
    def handler(request):
        return httpx.Response(200, json={"error": {"message": "Provider returned error", "code": 502}})

    with pytest.raises(LLMProviderError) as exc:
        asyncio.run(_provider(handler).generate(user="x"))
    assert exc.value.status_code == 502


def test_transport_failure_is_wrapped():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(LLMProviderError, match="LLM request failed"):
        asyncio.run(_provider(handler).generate(user="x"))
