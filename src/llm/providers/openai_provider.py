from __future__ import annotations
import logging
import os
from typing import Any, Optional

import httpx

from llm.errors import LLMProviderError
from .base import Completion, LLMProvider

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "deepseek/deepseek-chat-v3-0324:free"


def _error_from_body(
    body: Any, status_code: Optional[int], fallback: str = "Provider returned error"
) -> LLMProviderError:
    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict):
        message = str(error.get("message") or fallback)
        code = error.get("code")
    else:
        message = str(error or body or fallback)
        code = None
    if status_code is None and isinstance(code, int):
        status_code = code
    return LLMProviderError(message, status_code=status_code, code=code)


class OpenRouterProvider(LLMProvider):
    """OpenAI-compatible chat completions over plain HTTP (OpenRouter by default)."""

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.api_key = os.getenv("OPENROUTER_API_KEY", "").strip()
        self.model = os.getenv("DEEPSEEK_MODEL", DEFAULT_MODEL).strip()
        self.base_url = os.getenv("OPENROUTER_BASE_URL", "https://openrouter.ai/api/v1").strip().rstrip("/")
        self.timeout_s = float(os.getenv("LLM_TIMEOUT_S", "60"))
        self._transport = transport

        if not self.api_key:
            raise RuntimeError("OPENROUTER_API_KEY is missing")

    async def generate(
        self,
        *,
        user: str,
        system: Optional[str] = None,
        max_tokens: int = 1000,
        temperature: float = 0.7,
    ) -> Completion:
        url = f"{self.base_url}/chat/completions"
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "HTTP-Referer": "https://lexical-app.com",
            "X-Title": "LexiCal - Law Syllabus to Calendar",
        }
        messages = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": user})
        payload = {
            "model": self.model,
            "messages": messages,
            "max_tokens": max_tokens,
            "temperature": temperature,
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout_s, transport=self._transport) as client:
                r = await client.post(url, headers=headers, json=payload)
        except httpx.HTTPError as e:
            raise LLMProviderError(f"LLM request failed: {e}") from e

        try:
            data = r.json()
        except ValueError:
            data = None

        if r.is_error:
            err = _error_from_body(data, r.status_code, fallback=f"HTTP {r.status_code}: {r.text[:200]}")
            err.status_code = r.status_code
            raise err

        # OpenRouter can answer 200 with an error object when the upstream provider fails.
        if not isinstance(data, dict) or "error" in data or not data.get("choices"):
            raise _error_from_body(data, None)

        message = data["choices"][0].get("message") or {}
        return Completion(content=message.get("content") or "", usage=data.get("usage"))
