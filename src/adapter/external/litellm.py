"""LiteLLM adapter: implements LLMPort using LiteLLM for provider-agnostic LLM calls."""

import logging

import litellm
from litellm import acompletion

from domain.model.advice import LLMCallResult
from port.llm import (
    LLMAuthError,
    LLMEmptyResponseError,
    LLMError,
    LLMRateLimitError,
    LLMTimeoutError,
)

# Suppress LiteLLM's verbose logging
litellm.suppress_debug_info = True
logging.getLogger("LiteLLM").setLevel(logging.CRITICAL)

logger = logging.getLogger(__name__)


def _extract_provider_from_model(model: str) -> str | None:
    """Extract provider name from a model string like "openai/gpt-4o-mini"."""
    if "/" in model:
        return model.split("/")[0]
    if model.startswith("gpt-") or model.startswith("o1") or model.startswith("o3"):
        return "openai"
    return None


class LiteLLMAdapter:
    """Adapter that implements LLMPort using LiteLLM."""

    def __init__(self, api_key: str | None = None):
        self.api_key = api_key

    async def call(
        self,
        messages: list[dict[str, str]],
        model: str = "openai/gpt-4o-mini",
        timeout: float = 30.0,
        **kwargs,
    ) -> tuple[str, LLMCallResult]:
        """Call the completion API.

        Returns:
            Tuple of (content, stats).

        Raises:
            ValueError: If messages list is empty.
            LLMTimeoutError, LLMAuthError, LLMRateLimitError, LLMError:
                Provider failures, translated from LiteLLM exceptions.
            LLMEmptyResponseError: If no content is returned.
        """
        if not messages:
            raise ValueError("messages list cannot be empty")

        if self.api_key:
            kwargs.setdefault("api_key", self.api_key)

        try:
            response = await acompletion(
                model=model,
                messages=messages,
                timeout=timeout,
                **kwargs,
            )
        except litellm.Timeout as e:
            raise LLMTimeoutError(str(e)) from e
        except litellm.AuthenticationError as e:
            raise LLMAuthError(str(e)) from e
        except litellm.RateLimitError as e:
            raise LLMRateLimitError(str(e)) from e
        # Not subclasses of litellm.APIError; each must be listed
        except (
            litellm.APIError,
            litellm.APIConnectionError,
            litellm.BadRequestError,
            litellm.ServiceUnavailableError,
            litellm.InternalServerError,
        ) as e:
            raise LLMError(str(e)) from e

        content = ""
        if response.choices:
            message = response.choices[0].message
            if message and message.content:
                content = message.content.strip()

        if not content:
            logger.error("No content in LLM response", extra={
                "model": model,
                "response_id": getattr(response, "id", None),
            })
            raise LLMEmptyResponseError("No content returned from LLM")

        usage = response.usage
        stats = LLMCallResult(
            model=model,
            prompt_tokens=usage.prompt_tokens if usage else 0,
            completion_tokens=usage.completion_tokens if usage else 0,
            total_tokens=usage.total_tokens if usage else 0,
            provider=_extract_provider_from_model(model),
        )

        logger.debug("LLM API call completed", extra={
            "model": model,
            "provider": stats.provider,
            "total_tokens": stats.total_tokens,
        })

        return content, stats
