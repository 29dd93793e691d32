from __future__ import annotations

from typing import Optional, Union


RATE_LIMIT_MESSAGE = (
    "API rate limit exceeded. Please wait a moment and try again. "
    "Consider upgrading your API plan for higher limits."
)
UNAVAILABLE_MESSAGE = "AI service is temporarily unavailable. Please try again in a few minutes."


class LLMError(Exception):
    """Base class for every failure coming out of the LLM layer."""


class LLMProviderError(LLMError):
    """The provider call failed at the transport or HTTP level."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        code: Optional[Union[str, int]] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.code = code


class RateLimitExceededError(LLMError):
    def __init__(self, message: str = RATE_LIMIT_MESSAGE):
        super().__init__(message)


class ServiceUnavailableError(LLMError):
    def __init__(self, message: str = UNAVAILABLE_MESSAGE):
        super().__init__(message)


class InvalidAIResponseError(LLMError):
    """No parseable JSON could be found in the model output."""

    def __init__(self, message: str = "Invalid JSON response from AI", raw: str = ""):
        super().__init__(message)
        self.raw = raw


class SchemaValidationError(LLMError):
    """The model output parsed, but is not shaped the way the caller needs."""

    def __init__(self, message: str, raw: str = ""):
        super().__init__(message)
        self.raw = raw
