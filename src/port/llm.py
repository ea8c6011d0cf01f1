"""LLM port: outbound interface for large language model calls."""

from typing import Protocol

from domain.model.advice import LLMCallResult


class LLMError(Exception):
    """Base exception for LLM port errors."""


class LLMTimeoutError(LLMError):
    """LLM request timed out."""


class LLMRateLimitError(LLMError):
    """LLM provider rate limit exceeded."""


class LLMAuthError(LLMError):
    """LLM provider authentication failed."""


class LLMEmptyResponseError(LLMError):
    """LLM provider returned no content."""


class LLMPort(Protocol):
    """Port for making text-completion calls."""

    async def call(
        self,
        messages: list[dict[str, str]],
        model: str = "openai/gpt-4o-mini",
        timeout: float = 30.0,
        **kwargs,
    ) -> tuple[str, LLMCallResult]: ...
