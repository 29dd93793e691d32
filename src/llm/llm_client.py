import asyncio
import logging
import os
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

from llm.providers.base import LLMProvider
from llm.retry import call_with_retry

logger = logging.getLogger(__name__)

DEFAULT_MAX_TOKENS = 1000
DEFAULT_TEMPERATURE = 0.7


@dataclass(frozen=True)
class LLMResult:
    content: str
    usage: Optional[dict[str, Any]] = None


def build_provider() -> LLMProvider:
    """Pick the concrete provider from LLM_PROVIDER (openrouter | mock)."""
    name = os.getenv("LLM_PROVIDER", "openrouter").strip().lower()
    if name == "mock":
        from llm.providers.mock_provider import MockProvider

        return MockProvider()
    if name in {"openrouter", "openai"}:
        from llm.providers.openai_provider import OpenRouterProvider

        return OpenRouterProvider()
    raise RuntimeError(f"Unknown LLM_PROVIDER: {name}")


class LLMClient:
    """Single entry point to the hosted model: ``generate(prompt, options)``.

    Every provider call goes through the retry policy, so callers only see
    the final outcome: an LLMResult, RateLimitExceededError,
    ServiceUnavailableError, or the provider's own non-retryable error.
    """

    def __init__(
        self,
        provider: Optional[LLMProvider] = None,
        max_attempts: Optional[int] = None,
        jitter_s: Optional[float] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self._provider = provider
        self.max_attempts = max_attempts if max_attempts is not None else int(os.getenv("LLM_MAX_ATTEMPTS", "3"))
        self.jitter_s = jitter_s if jitter_s is not None else float(os.getenv("LLM_RETRY_JITTER_S", "0"))
        self._sleep = sleep

    @property
    def provider(self) -> LLMProvider:
        # Resolved on first call so requests rejected up front never need credentials.
        if self._provider is None:
            self._provider = build_provider()
        return self._provider

    async def generate(
        self,
        prompt: str,
        *,
        system: Optional[str] = None,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
    ) -> LLMResult:
        max_tokens = max_tokens if max_tokens is not None else DEFAULT_MAX_TOKENS
        temperature = temperature if temperature is not None else DEFAULT_TEMPERATURE

        async def _call():
            return await self.provider.generate(
                user=prompt,
                system=system,
                max_tokens=max_tokens,
                temperature=temperature,
            )

        completion = await call_with_retry(
            _call,
            max_attempts=self.max_attempts,
            jitter_s=self.jitter_s,
            sleep=self._sleep,
        )
        logger.debug(f"LLM returned {len(completion.content)} chars (usage={completion.usage})")
        return LLMResult(content=completion.content, usage=completion.usage)
