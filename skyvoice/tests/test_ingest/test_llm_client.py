"""Tests for the chat-completions client with mocked httpx."""

import asyncio
import json

import httpx
import pytest
import respx

from skyvoice.ingest.llm_client import LlmClient, LlmClientError

COMPLETIONS_URL = "https://test-llm.example.com/v1/chat/completions"

MESSAGES = [
    {"role": "system", "content": "You are an AI assistant."},
    {"role": "user", "content": "Describe the weather."},
]


@pytest.fixture
def llm() -> LlmClient:
    return LlmClient(
        api_key="test-key",
        base_url="https://test-llm.example.com/v1/",
        model="test-model",
        max_tokens=100,
        temperature=0.7,
    )


def _completion(content) -> dict:
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


class TestComplete:
    @respx.mock
    def test_success(self, llm: LlmClient):
        respx.post(COMPLETIONS_URL).mock(
            return_value=httpx.Response(200, json=_completion("Sunny and 70."))
        )
        assert asyncio.run(llm.complete(MESSAGES)) == "Sunny and 70."

    @respx.mock
    def test_request_body_and_auth(self, llm: LlmClient):
        route = respx.post(COMPLETIONS_URL).mock(
            return_value=httpx.Response(200, json=_completion("ok"))
        )

        asyncio.run(llm.complete(MESSAGES))
        request = route.calls[0].request
        assert request.headers["authorization"] == "Bearer test-key"
        assert json.loads(request.content) == {
            "model": "test-model",
            "messages": MESSAGES,
            "max_tokens": 100,
            "temperature": 0.7,
        }

    @respx.mock
    def test_http_error(self, llm: LlmClient):
        respx.post(COMPLETIONS_URL).mock(return_value=httpx.Response(500, text="oops"))

        with pytest.raises(LlmClientError) as exc:
            asyncio.run(llm.complete(MESSAGES))
        assert exc.value.status_code == 500

    @respx.mock
    def test_transport_error(self, llm: LlmClient):
        respx.post(COMPLETIONS_URL).mock(side_effect=httpx.ConnectTimeout("timed out"))

        with pytest.raises(LlmClientError, match="Request failed"):
            asyncio.run(llm.complete(MESSAGES))

    @respx.mock
    def test_no_choices(self, llm: LlmClient):
        respx.post(COMPLETIONS_URL).mock(return_value=httpx.Response(200, json={"choices": []}))

        with pytest.raises(LlmClientError, match="Malformed"):
            asyncio.run(llm.complete(MESSAGES))

    @respx.mock
    def test_null_content(self, llm: LlmClient):
        respx.post(COMPLETIONS_URL).mock(
            return_value=httpx.Response(200, json=_completion(None))
        )

        with pytest.raises(LlmClientError):
            asyncio.run(llm.complete(MESSAGES))


class TestApiKey:
    def test_missing(self, monkeypatch):
        monkeypatch.delenv("LLM_API_KEY", raising=False)
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        llm = LlmClient(base_url="https://test-llm.example.com/v1")

        with pytest.raises(LlmClientError, match="LLM_API_KEY"):
            asyncio.run(llm.complete(MESSAGES))

    @respx.mock
    def test_openai_fallback(self, monkeypatch):
        monkeypatch.delenv("LLM_API_KEY", raising=False)
        monkeypatch.setenv("OPENAI_API_KEY", "openai-key")
        route = respx.post(COMPLETIONS_URL).mock(
            return_value=httpx.Response(200, json=_completion("ok"))
        )
        llm = LlmClient(base_url="https://test-llm.example.com/v1")

        asyncio.run(llm.complete(MESSAGES))
        assert route.calls[0].request.headers["authorization"] == "Bearer openai-key"
