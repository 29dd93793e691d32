from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class Completion:
    content: str
    usage: Optional[dict[str, Any]] = None


class LLMProvider(ABC):
    @abstractmethod
    async def generate(
        self,
        *,
        user: str,
        system: Optional[str] = None,
        max_tokens: int = 1000,
        temperature: float = 0.7,
    ) -> Completion:
        """
        Must return the model output as TEXT (JSON is parsed/validated by the callers).
        Failures are raised as llm.errors.LLMProviderError.
        """
        raise NotImplementedError
