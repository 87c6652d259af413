"""Chat-completions client used to generate weather summaries."""

import logging
from typing import Any

import httpx

from skyvoice.config.credentials import MissingSecretError, llm_api_key

logger = logging.getLogger(__name__)

LLM_API_BASE = "https://api.openai.com/v1"
DEFAULT_MODEL = "gpt-4o-mini"

Message = dict[str, str]


class LlmClientError(Exception):
    """Raised when the text-generation provider fails or returns no text."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class LlmClient:
    """Thin wrapper around an OpenAI-compatible /chat/completions endpoint.

    No timeout is passed, so httpx's default applies.
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str = LLM_API_BASE,
        model: str = DEFAULT_MODEL,
        max_tokens: int = 100,
        temperature: float = 0.7,
    ):
        self._api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature

    def _headers(self) -> dict[str, str]:
        if not self._api_key:
            self._api_key = llm_api_key()
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }

    def build_body(self, messages: list[Message]) -> dict[str, Any]:
        return {
            "model": self.model,
            "messages": messages,
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
        }

    async def complete(self, messages: list[Message]) -> str:
        """Return choices[0].message.content for the given messages."""
        url = f"{self.base_url}/chat/completions"
        try:
            headers = self._headers()
        except MissingSecretError as e:
            raise LlmClientError(str(e)) from e

        try:
            async with httpx.AsyncClient() as client:
                resp = await client.post(url, headers=headers, json=self.build_body(messages))
        except httpx.RequestError as e:
            logger.error("LLM request failed: %s", e)
            raise LlmClientError(f"Request failed: {e}") from e

        if resp.status_code >= 400:
            logger.error("LLM API %d: %s", resp.status_code, resp.text[:200])
            raise LlmClientError(f"HTTP {resp.status_code}", resp.status_code)

        try:
            content = resp.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise LlmClientError("Malformed completion response") from e
        if not isinstance(content, str):
            raise LlmClientError("Malformed completion response")
        return content
